"""
Moteur de matching élève ↔ équipe.

Un match est la seule clé étrangère students.matched_team_id :
- un élève référence au plus une équipe, une équipe est référencée par 0..n élèves ;
- aucune donnée n'est écrite côté équipe, le roster est toujours recalculé par requête ;
- is_matched est dérivé de la clé, il ne peut donc pas diverger.

Chaque opération d'écriture touche une seule ligne et fait un seul commit. Deux matchs
concurrents sur le même élève se résolvent au niveau de la base (dernier commit gagnant).
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.errors import NotFoundError, returns_result
from app.models.student import Student
from app.models.team import Team
from app.schemas.match import MatchResponse, StudentMatchEntry, UserMatchesResponse
from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse
from app.services.profile_service import find_profile

logger = logging.getLogger(__name__)


@returns_result
def create_match(db: Session, student_id: str, team_id: str) -> StudentResponse:
    """
    Associe un élève à une équipe.

    - L'élève puis l'équipe doivent exister (NotFoundError sinon, rien n'est modifié)
    - Un match existant vers une autre équipe est écrasé sans notification
    - Rejouer le même match ne modifie rien (updated_at inchangé)
    """
    student = _get_student(db, student_id)
    if db.get(Team, team_id) is None:
        raise NotFoundError(f"Team '{team_id}' not found.")

    if student.matched_team_id == team_id:
        logger.info("Élève %s déjà matché avec l'équipe %s", student_id, team_id)
        return StudentResponse.model_validate(student)

    previous_team_id = student.matched_team_id
    student.matched_team_id = team_id
    student.updated_at = datetime.now()
    db.commit()
    db.refresh(student)

    if previous_team_id:
        logger.info("Élève %s déplacé de l'équipe %s vers %s", student_id, previous_team_id, team_id)
    else:
        logger.info("Élève %s matché avec l'équipe %s", student_id, team_id)
    return StudentResponse.model_validate(student)


@returns_result
def remove_match(db: Session, student_id: str) -> StudentResponse:
    """Libère un élève de son équipe. Sans effet si l'élève n'est pas matché."""
    student = _get_student(db, student_id)
    if student.matched_team_id is None:
        return StudentResponse.model_validate(student)

    team_id = student.matched_team_id
    student.matched_team_id = None
    student.updated_at = datetime.now()
    db.commit()
    db.refresh(student)

    logger.info("Match supprimé : élève %s ↔ équipe %s", student_id, team_id)
    return StudentResponse.model_validate(student)


@returns_result
def get_team_roster(db: Session, team_id: str) -> List[StudentResponse]:
    """
    Élèves dont matched_team_id == team_id, par ordre d'inscription (id en départage).
    Une équipe inconnue a un roster vide.
    """
    students = db.execute(
        select(Student)
        .where(Student.matched_team_id == team_id)
        .order_by(Student.created_at, Student.id)
    ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


@returns_result
def get_student_match(db: Session, student_id: str) -> Optional[TeamResponse]:
    """
    Équipe de l'élève, ou None s'il n'est pas matché.
    Une référence vers une équipe supprimée est traitée comme « pas de match ».
    """
    student = _get_student(db, student_id)
    return _matched_team(db, student)


@returns_result
def list_matches(db: Session) -> List[MatchResponse]:
    """
    Tous les élèves matchés avec leur équipe, du plus récent au plus ancien.
    La jointure interne écarte les références vers des équipes supprimées.
    """
    rows = db.execute(
        select(Student, Team)
        .join(Team, Team.id == Student.matched_team_id)
        .order_by(Student.created_at.desc(), Student.id)
    ).all()

    return [
        MatchResponse(
            student=StudentResponse.model_validate(student),
            team=TeamResponse.model_validate(team),
        )
        for student, team in rows
    ]


@returns_result
def get_user_matches(db: Session, user_id: str) -> UserMatchesResponse:
    """
    Matchs affichés sur le dashboard de l'utilisateur :
    - élève : son équipe (0 ou 1 entrée)
    - équipe : ses élèves matchés
    - administrateur : rien
    """
    user_type, profile = find_profile(db, user_id)

    if user_type == "student":
        team = _matched_team(db, profile)
        entries = [StudentMatchEntry(team=team, matched_at=profile.created_at)] if team else []
        return UserMatchesResponse(user_type="student", team_matches=entries)

    if user_type == "team":
        roster = get_team_roster(db, profile.id).unwrap()
        return UserMatchesResponse(user_type="team", roster=roster)

    return UserMatchesResponse(user_type="admin")


def _get_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError(f"Student '{student_id}' not found.")
    return student


def _matched_team(db: Session, student: Student) -> Optional[TeamResponse]:
    if student.matched_team_id is None:
        return None
    team = db.get(Team, student.matched_team_id)
    if team is None:
        logger.warning(
            "Élève %s référence une équipe inexistante (%s)", student.id, student.matched_team_id
        )
        return None
    return TeamResponse.model_validate(team)

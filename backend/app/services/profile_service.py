"""
Service de lecture des profils et d'administration des équipes.
"""

import logging
from typing import Optional, Tuple, Union

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.errors import NotFoundError, returns_result
from app.models.admin import Admin
from app.models.student import Student
from app.models.team import Team
from app.schemas.admin import AdminResponse
from app.schemas.auth import UserProfile
from app.schemas.student import StudentResponse
from app.schemas.team import TeamDeletionReport, TeamResponse
from app.services.storage_service import ObjectStore

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "Profile not found. Please complete your registration."


def find_profile(db: Session, user_id: str) -> Tuple[str, Union[Admin, Student, Team]]:
    """
    Cherche l'utilisateur dans admins, puis students, puis teams (même ordre que le frontend).
    Lève NotFoundError si aucun profil n'existe pour cette identité.
    """
    for user_type, model in (("admin", Admin), ("student", Student), ("team", Team)):
        row = db.get(model, user_id)
        if row is not None:
            return user_type, row
    raise NotFoundError(PROFILE_NOT_FOUND)


@returns_result
def get_user_profile(db: Session, user_id: str) -> UserProfile:
    user_type, row = find_profile(db, user_id)
    schema = {"admin": AdminResponse, "student": StudentResponse, "team": TeamResponse}[user_type]
    return UserProfile(type=user_type, profile=schema.model_validate(row))


def is_admin(db: Session, user_id: str) -> bool:
    return db.get(Admin, user_id) is not None


@returns_result
def get_student(db: Session, student_id: str) -> StudentResponse:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError(f"Student '{student_id}' not found.")
    return StudentResponse.model_validate(student)


@returns_result
def get_team(db: Session, team_id: str) -> TeamResponse:
    team = db.get(Team, team_id)
    if team is None:
        raise NotFoundError(f"Team '{team_id}' not found.")
    return TeamResponse.model_validate(team)


@returns_result
def set_team_active(db: Session, team_id: str, is_active: bool) -> TeamResponse:
    """Active ou désactive une équipe. Les élèves déjà matchés ne sont pas modifiés."""
    team = db.get(Team, team_id)
    if team is None:
        raise NotFoundError(f"Team '{team_id}' not found.")

    if team.is_active != is_active:
        team.is_active = is_active
        db.commit()
        db.refresh(team)
        logger.info("Équipe %s %s", team_id, "activée" if is_active else "désactivée")
    return TeamResponse.model_validate(team)


@returns_result
def delete_team(db: Session, team_id: str) -> TeamDeletionReport:
    """
    Supprime une équipe et libère ses élèves dans la même transaction,
    pour ne jamais laisser de matched_team_id pendant.
    """
    team = db.get(Team, team_id)
    if team is None:
        raise NotFoundError(f"Team '{team_id}' not found.")

    released = db.execute(
        update(Student)
        .where(Student.matched_team_id == team_id)
        .values(matched_team_id=None)
        .execution_options(synchronize_session="fetch")
    ).rowcount or 0

    db.delete(team)
    db.commit()

    logger.info("Équipe %s supprimée — %d élève(s) libéré(s)", team_id, released)
    return TeamDeletionReport(team_id=team_id, released_students=released)


@returns_result
def get_resume_url(db: Session, storage: ObjectStore, student_id: str) -> Optional[str]:
    """URL de téléchargement du CV de l'élève, ou None s'il n'en a pas déposé."""
    resume_path = db.execute(
        select(Student.resume_url).where(Student.id == student_id)
    ).scalar()
    if resume_path is None:
        if db.get(Student, student_id) is None:
            raise NotFoundError(f"Student '{student_id}' not found.")
        return None
    return storage.get_retrieval_url(resume_path)

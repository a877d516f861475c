"""
Service d'inscription des élèves et des équipes.

Étapes d'une inscription :
1. Valider tout le payload (toutes les erreurs de champ sont retournées ensemble)
2. Créer l'identité auprès du fournisseur d'identité
3. Élève uniquement : envoyer le CV optionnel, avec un délai maximum
4. Écrire la ligne de profil, clé = id de l'identité
5. Envoyer l'email de vérification

Si l'écriture du profil échoue, l'identité (et le CV) sont supprimés : on ne laisse pas
de compte sans profil derrière un échec.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import FieldError, IdentityError, TransientStoreError, ValidationError, returns_result
from app.models.student import Student
from app.models.team import Team
from app.schemas.student import StudentRegistration, StudentResponse
from app.schemas.team import TeamRegistration, TeamResponse
from app.services.identity_service import IdentityProvider
from app.services.storage_service import ObjectStore, resume_path, store_with_timeout

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class ResumeUpload:
    """CV joint au formulaire d'inscription."""
    filename: Optional[str]
    content: bytes


@returns_result
def validate_student_payload(payload: dict) -> StudentRegistration:
    return _validate(StudentRegistration, payload)


@returns_result
def validate_team_payload(payload: dict) -> TeamRegistration:
    return _validate(TeamRegistration, payload)


@returns_result
def register_student(
    db: Session,
    identity: IdentityProvider,
    storage: ObjectStore,
    payload: dict,
    resume: Optional[ResumeUpload] = None,
) -> StudentResponse:
    """Inscrit un élève. Le CV est optionnel : s'il ne peut pas être stocké, l'inscription continue sans."""
    data = _validate(StudentRegistration, payload)
    identity_id = identity.create_identity(data.email, data.password)

    stored_resume = None
    if resume is not None and resume.content:
        stored_resume = store_with_timeout(
            storage,
            resume.content,
            resume_path(resume.filename),
            settings.RESUME_UPLOAD_TIMEOUT_SECONDS,
        )
        if stored_resume is None:
            logger.warning("Inscription de %s poursuivie sans CV", identity_id)

    student = Student(
        id=identity_id,
        email=data.email,
        name=data.full_name,
        school=data.school,
        zip_code=data.zip_code,
        grade=data.grade,
        first_level=data.first_level,
        areas_of_interest=data.areas_of_interest,
        time_commitment=data.time_commitment,
        impressive_things=data.impressive_things,
        why_join_team=data.why_join_team,
        resume_url=stored_resume,
    )
    _write_profile(db, identity, student, storage=storage, stored_file=stored_resume)
    _send_verification(identity, identity_id)

    logger.info("Élève inscrit : %s (%s)", identity_id, data.email)
    return StudentResponse.model_validate(student)


@returns_result
def register_team(db: Session, identity: IdentityProvider, payload: dict) -> TeamResponse:
    data = _validate(TeamRegistration, payload)
    identity_id = identity.create_identity(data.email, data.password)

    team = Team(
        id=identity_id,
        team_name=data.team_name,
        email=data.email,
        zip_code=data.zip_code,
        first_level=data.first_level,
        areas_of_need=data.areas_of_need,
        grade_range_min=data.grade_range_min,
        grade_range_max=data.grade_range_max,
        time_commitment=data.time_commitment,
        qualities=data.qualities,
        is_school_team=bool(data.is_school_team),
        school_name=data.school_name if data.is_school_team else None,
        team_awards=data.team_awards,
        is_active=True,
    )
    _write_profile(db, identity, team)
    _send_verification(identity, identity_id)

    logger.info("Équipe inscrite : %s (%s)", identity_id, data.team_name)
    return TeamResponse.model_validate(team)


def _validate(model: Type[M], payload: dict) -> M:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc))


def field_errors(exc: PydanticValidationError) -> List[FieldError]:
    """Une entrée par champ invalide (premier message retenu pour chaque champ)."""
    errors = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__root__"
        message = err["msg"].removeprefix("Value error, ")
        errors.setdefault(field, message)
    return [FieldError(field=f, message=m) for f, m in errors.items()]


def _write_profile(
    db: Session,
    identity: IdentityProvider,
    profile,
    storage: Optional[ObjectStore] = None,
    stored_file: Optional[str] = None,
) -> None:
    """Insère le profil ; en cas d'échec, supprime l'identité et le fichier déjà créés."""
    try:
        db.add(profile)
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Écriture du profil %s échouée : %s — annulation de l'inscription", profile.id, exc)

        if storage is not None and stored_file:
            try:
                storage.delete(stored_file)
            except TransientStoreError as cleanup_exc:
                logger.error("Fichier orphelin %s : %s", stored_file, cleanup_exc)
        try:
            identity.delete_identity(profile.id)
        except (SQLAlchemyError, IdentityError) as cleanup_exc:
            db.rollback()
            logger.error("Identité orpheline %s : %s", profile.id, cleanup_exc)

        raise TransientStoreError("Registration failed. Please try again.")


def _send_verification(identity: IdentityProvider, identity_id: str) -> None:
    """L'email de vérification peut être renvoyé plus tard : son échec n'annule pas l'inscription."""
    try:
        identity.send_verification_email(identity_id)
    except (OSError, IdentityError) as exc:
        logger.warning("Email de vérification non envoyé à %s : %s", identity_id, exc)

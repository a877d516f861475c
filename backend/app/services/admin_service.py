"""
Gestion des comptes administrateurs (utilisée par scripts/manage_admins.py).
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.errors import NotFoundError, returns_result
from app.models.admin import Admin
from app.models.student import Student
from app.models.team import Team
from app.schemas.admin import AdminResponse
from app.services.identity_service import LocalIdentityProvider

logger = logging.getLogger(__name__)


@returns_result
def create_admin(
    db: Session,
    identity: LocalIdentityProvider,
    email: str,
    password: str,
    name: str,
) -> AdminResponse:
    """
    Crée (ou met à jour) un administrateur.
    Si une identité existe déjà pour cet email, son mot de passe est remplacé et l'adresse
    marquée vérifiée ; sinon une identité est créée.
    """
    identity_id = identity.find_identity_id(email)
    if identity_id is None:
        identity_id = identity.create_identity(email, password)
        logger.info("Identité administrateur créée pour %s", email)
    else:
        identity.set_password(identity_id, password)
        logger.info("Identité existante réutilisée pour %s", email)
    identity.mark_email_verified(identity_id)

    admin = db.get(Admin, identity_id)
    if admin is None:
        admin = Admin(id=identity_id, email=email.strip().lower(), name=name, role="admin")
        db.add(admin)
    else:
        admin.name = name
    db.commit()
    db.refresh(admin)
    return AdminResponse.model_validate(admin)


@returns_result
def list_admins(db: Session) -> List[AdminResponse]:
    admins = db.execute(
        select(Admin).order_by(Admin.email)
    ).scalars().all()
    return [AdminResponse.model_validate(a) for a in admins]


@returns_result
def remove_admin(db: Session, identity: LocalIdentityProvider, admin_id: str) -> str:
    """
    Supprime la ligne admins puis l'identité associée. Retourne l'email supprimé.
    L'identité est conservée si elle porte encore un profil élève ou équipe.
    """
    admin = db.get(Admin, admin_id)
    if admin is None:
        raise NotFoundError(f"Admin '{admin_id}' not found.")

    email = admin.email
    db.delete(admin)
    db.commit()

    if db.get(Student, admin_id) is None and db.get(Team, admin_id) is None:
        identity.delete_identity(admin_id)
    else:
        logger.info("Identité %s conservée : profil élève ou équipe existant", admin_id)

    logger.info("Administrateur supprimé : %s (%s)", email, admin_id)
    return email

"""
Fournisseur d'identité.

`IdentityProvider` décrit le contrat consommé par l'inscription, l'authentification et la
gestion des administrateurs. `LocalIdentityProvider` l'implémente sur la table identities :
mots de passe hachés via passlib, sessions et liens emails signés en JWT (python-jose).

Une session est invalidée en incrémentant `session_version` : tout jeton émis avec une
version antérieure est refusé.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import IdentityError
from app.models.identity import Identity
from app.schemas.student import check_password_strength
from app.services import email_service

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SESSION_TOKEN = "session"
VERIFY_TOKEN = "verify_email"
RESET_TOKEN = "password_reset"


class IdentityProvider(Protocol):
    def create_identity(self, email: str, password: str) -> str: ...

    def verify_credentials(self, email: str, password: str) -> str: ...

    def send_verification_email(self, identity_id: str) -> None: ...

    def send_password_reset(self, email: str) -> None: ...

    def destroy_session(self, identity_id: str) -> None: ...

    def delete_identity(self, identity_id: str) -> None: ...

    def issue_session_token(self, identity_id: str) -> str: ...

    def resolve_session_token(self, token: str) -> str: ...


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def normalize_email(email: str) -> str:
    """Valide la syntaxe (sans requête DNS) et retourne l'adresse en minuscules."""
    try:
        return validate_email(email.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        raise IdentityError("invalid_email")


class LocalIdentityProvider:
    """Implémentation du contrat IdentityProvider sur la base de données de l'application."""

    def __init__(self, db: Session):
        self.db = db

    # --- Comptes ---

    def create_identity(self, email: str, password: str) -> str:
        """Crée une identité. Lève IdentityError(email_taken | weak_password | invalid_email)."""
        email = normalize_email(email)
        try:
            check_password_strength(password)
        except ValueError as exc:
            raise IdentityError("weak_password", str(exc))

        if self._find_by_email(email) is not None:
            raise IdentityError("email_taken")

        identity = Identity(email=email, password_hash=hash_password(password))
        self.db.add(identity)
        try:
            self.db.commit()
        except IntegrityError:
            # inscription concurrente avec la même adresse : contrainte unique sur email
            self.db.rollback()
            raise IdentityError("email_taken")
        self.db.refresh(identity)
        logger.info("Identité créée : %s (%s)", identity.id, email)
        return identity.id

    def find_identity_id(self, email: str) -> Optional[str]:
        identity = self._find_by_email(normalize_email(email))
        return identity.id if identity else None

    def set_password(self, identity_id: str, password: str) -> None:
        """Remplace le mot de passe et invalide les sessions ouvertes."""
        identity = self._get(identity_id)
        identity.password_hash = hash_password(password)
        identity.session_version += 1
        identity.failed_attempts = 0
        self.db.commit()

    def mark_email_verified(self, identity_id: str) -> None:
        identity = self._get(identity_id)
        identity.email_verified = True
        self.db.commit()

    def delete_identity(self, identity_id: str) -> None:
        identity = self.db.get(Identity, identity_id)
        if identity is None:
            return
        self.db.delete(identity)
        self.db.commit()
        logger.info("Identité supprimée : %s", identity_id)

    def verify_credentials(self, email: str, password: str) -> str:
        """
        Retourne l'id de l'identité si les identifiants sont corrects.
        Au-delà de MAX_FAILED_SIGNIN_ATTEMPTS échecs consécutifs, le compte est bloqué
        jusqu'à une réinitialisation du mot de passe.
        """
        identity = self._find_by_email(normalize_email(email))
        if identity is None:
            raise IdentityError("invalid_credentials")
        if identity.is_disabled:
            raise IdentityError("user_disabled")
        if (identity.failed_attempts or 0) >= settings.MAX_FAILED_SIGNIN_ATTEMPTS:
            raise IdentityError("too_many_requests")

        if not verify_password(password, identity.password_hash):
            identity.failed_attempts = (identity.failed_attempts or 0) + 1
            self.db.commit()
            logger.warning("Échec de connexion pour %s (%d)", identity.email, identity.failed_attempts)
            raise IdentityError("invalid_credentials")

        identity.failed_attempts = 0
        identity.last_login = datetime.now()
        self.db.commit()
        return identity.id

    # --- Sessions ---

    def issue_session_token(self, identity_id: str) -> str:
        identity = self._get(identity_id)
        return _encode_token(
            {"sub": identity.id, "ver": identity.session_version, "type": SESSION_TOKEN},
            settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def resolve_session_token(self, token: str) -> str:
        """Retourne l'id porté par un jeton de session encore valide."""
        identity = self._identity_from_token(token, SESSION_TOKEN, "not_authenticated")
        if identity.is_disabled:
            raise IdentityError("user_disabled")
        return identity.id

    def destroy_session(self, identity_id: str) -> None:
        identity = self.db.get(Identity, identity_id)
        if identity is None:
            return
        identity.session_version += 1
        self.db.commit()
        logger.info("Sessions invalidées pour %s", identity_id)

    # --- Emails ---

    def send_verification_email(self, identity_id: str) -> None:
        identity = self._get(identity_id)
        token = _encode_token(
            {"sub": identity.id, "ver": identity.session_version, "type": VERIFY_TOKEN},
            settings.EMAIL_TOKEN_EXPIRE_MINUTES,
        )
        email_service.send_verification_email(
            identity.email, f"{settings.FRONTEND_URL}/verify-email?token={token}"
        )

    def confirm_email(self, token: str) -> str:
        identity = self._identity_from_token(token, VERIFY_TOKEN, "invalid_token", check_version=False)
        identity.email_verified = True
        self.db.commit()
        return identity.id

    def send_password_reset(self, email: str) -> None:
        """
        Envoie un lien de réinitialisation. Une adresse inconnue ne lève pas d'erreur
        pour ne pas révéler quels comptes existent.
        """
        identity = self._find_by_email(normalize_email(email))
        if identity is None:
            logger.info("Réinitialisation demandée pour une adresse inconnue, ignorée")
            return
        token = _encode_token(
            {"sub": identity.id, "ver": identity.session_version, "type": RESET_TOKEN},
            settings.EMAIL_TOKEN_EXPIRE_MINUTES,
        )
        email_service.send_password_reset_email(
            identity.email, f"{settings.FRONTEND_URL}/reset-password?token={token}"
        )

    def confirm_password_reset(self, token: str, new_password: str) -> str:
        """Applique le nouveau mot de passe. Le jeton devient inutilisable (version incrémentée)."""
        identity = self._identity_from_token(token, RESET_TOKEN, "invalid_token")
        try:
            check_password_strength(new_password)
        except ValueError as exc:
            raise IdentityError("weak_password", str(exc))
        self.set_password(identity.id, new_password)
        logger.info("Mot de passe réinitialisé pour %s", identity.id)
        return identity.id

    # --- Helpers ---

    def _find_by_email(self, email: str) -> Optional[Identity]:
        return self.db.execute(
            select(Identity).where(Identity.email == email)
        ).scalar()

    def _get(self, identity_id: str) -> Identity:
        identity = self.db.get(Identity, identity_id)
        if identity is None:
            raise IdentityError("user_not_found")
        return identity

    def _identity_from_token(
        self, token: str, expected_type: str, error_code: str, check_version: bool = True
    ) -> Identity:
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise IdentityError(error_code)
        if payload.get("type") != expected_type or not payload.get("sub"):
            raise IdentityError(error_code)

        identity = self.db.get(Identity, payload["sub"])
        if identity is None:
            raise IdentityError(error_code)
        if check_version and payload.get("ver") != identity.session_version:
            raise IdentityError(error_code)
        return identity


def _encode_token(claims: dict, minutes: int) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

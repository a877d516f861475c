"""
Dépendances FastAPI partagées par les routers : fournisseurs injectés, utilisateur courant,
contrôle d'accès administrateur, et conversion des Result en réponses HTTP.
"""

from typing import Optional, TypeVar

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import IDENTITY_ERROR_MESSAGES, IdentityError, Result
from app.services.identity_service import LocalIdentityProvider
from app.services.profile_service import is_admin
from app.services.storage_service import LocalObjectStore

T = TypeVar("T")

bearer_scheme = HTTPBearer(auto_error=False)

ERROR_STATUS = {
    "not_found": 404,
    "validation": 422,
    "transient_store": 503,
}

IDENTITY_ERROR_STATUS = {
    "email_taken": 409,
    "weak_password": 400,
    "invalid_email": 400,
    "invalid_credentials": 401,
    "not_authenticated": 401,
    "invalid_token": 400,
    "user_not_found": 404,
    "user_disabled": 403,
    "too_many_requests": 429,
}


def get_identity_provider(db: Session = Depends(get_db)) -> LocalIdentityProvider:
    return LocalIdentityProvider(db)


def get_object_store() -> LocalObjectStore:
    return LocalObjectStore()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
) -> str:
    """Id de l'identité portée par le jeton Bearer. 401 si absent ou invalide."""
    if credentials is None:
        raise HTTPException(status_code=401, detail=IDENTITY_ERROR_MESSAGES["not_authenticated"])
    try:
        return identity.resolve_session_token(credentials.credentials)
    except IdentityError as e:
        raise http_error(e)


def require_admin(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> str:
    """Réservé aux identités présentes dans la table admins."""
    if not is_admin(db, user_id):
        raise HTTPException(status_code=403, detail="Administrator access required.")
    return user_id


def http_error(error) -> HTTPException:
    if isinstance(error, IdentityError):
        status_code = IDENTITY_ERROR_STATUS.get(error.code, 400)
    else:
        status_code = ERROR_STATUS.get(error.kind, 500)
    return HTTPException(status_code=status_code, detail=error.to_detail())


def unwrap(result: Result[T]) -> T:
    """Retourne la valeur d'un Result ou lève l'HTTPException correspondant à son erreur."""
    if not result.ok:
        raise http_error(result.error)
    return result.value

"""
Taxonomie des erreurs métier et type résultat des opérations exposées.

Les helpers internes lèvent des TeamMatchError ; les opérations publiques des services
sont décorées par `returns_result` et retournent un `Result` au lieu de lever.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TeamMatchError(Exception):
    """Erreur métier de base. `kind` sert au mapping HTTP côté routers."""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Any:
        return self.message


class NotFoundError(TeamMatchError):
    """L'élève ou l'équipe référencé n'existe pas au moment de l'appel."""
    kind = "not_found"


@dataclass
class FieldError:
    field: str
    message: str


class ValidationError(TeamMatchError):
    """Payload invalide : liste TOUS les champs en erreur, pas seulement le premier."""
    kind = "validation"

    def __init__(self, errors: List[FieldError]):
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"Invalid fields: {fields}")
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def to_detail(self) -> Any:
        return [{"field": e.field, "message": e.message} for e in self.errors]


# Messages affichés à l'utilisateur, par code d'erreur du fournisseur d'identité
IDENTITY_ERROR_MESSAGES: Dict[str, str] = {
    "email_taken": "This email is already registered. Please sign in instead.",
    "weak_password": "Password is too weak. Please use a stronger password.",
    "invalid_email": "Invalid email address. Please check your email and try again.",
    "invalid_credentials": "Incorrect email or password. Please try again.",
    "user_not_found": "No account found with this email. Please check your email or sign up.",
    "user_disabled": "This account has been disabled. Please contact support.",
    "too_many_requests": "Too many requests. Please wait a few minutes before trying again.",
    "invalid_token": "This link is invalid or has expired.",
    "not_authenticated": "Not authenticated.",
}


class IdentityError(TeamMatchError):
    """Échec côté fournisseur d'identité, traduit via IDENTITY_ERROR_MESSAGES."""
    kind = "identity"

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or IDENTITY_ERROR_MESSAGES.get(code, "Authentication failed."))
        self.code = code


class TransientStoreError(TeamMatchError):
    """Échec réseau / permission vers le profile store ou l'object store. Jamais retenté."""
    kind = "transient_store"


@dataclass
class Result(Generic[T]):
    """Valeur de succès OU une erreur structurée."""
    value: Optional[T] = None
    error: Optional[TeamMatchError] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TeamMatchError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Retourne la valeur ou relève l'erreur (usage scripts / tests)."""
        if self.error is not None:
            raise self.error
        return self.value


def returns_result(func: Callable[..., T]) -> Callable[..., Result[T]]:
    """
    Frontière d'une opération exposée : convertit les TeamMatchError et les erreurs
    SQLAlchemy en Result.failure. La session (1er argument) est rollback en cas
    d'erreur de stockage pour ne jamais laisser d'écriture partielle.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result[T]:
        try:
            return Result.success(func(*args, **kwargs))
        except TeamMatchError as exc:
            return Result.failure(exc)
        except SQLAlchemyError as exc:
            db = args[0] if args else kwargs.get("db")
            if db is not None:
                db.rollback()
            logger.error("Erreur profile store dans %s : %s", func.__name__, exc)
            return Result.failure(TransientStoreError(f"Profile store failure: {exc.__class__.__name__}"))

    return wrapper

"""
Schémas Pydantic pour l'authentification et le profil de l'utilisateur connecté.
"""

from typing import Literal, Union

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.admin import AdminResponse
from app.schemas.student import StudentResponse, check_password_strength
from app.schemas.team import TeamResponse


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str


class EmailRequest(BaseModel):
    email: EmailStr


class TokenRequest(BaseModel):
    """Jeton reçu par email (vérification d'adresse)."""
    token: str


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class UserProfile(BaseModel):
    """Profil de l'utilisateur : type + document du bon ensemble (admins, students ou teams)."""
    type: Literal["student", "team", "admin"]
    profile: Union[AdminResponse, StudentResponse, TeamResponse]

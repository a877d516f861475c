"""
Schémas Pydantic pour les élèves.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.catalog import AREAS, FIRST_LEVELS, MAX_GRADE, MAX_HOURS, MIN_GRADE, MIN_HOURS

MIN_ANSWER_LENGTH = 10


def check_password_strength(v: str) -> str:
    """Au moins 8 caractères, une majuscule et un chiffre (mêmes règles que le formulaire)."""
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one number")
    return v


def check_zip_code(v: str) -> str:
    v = v.strip()
    if not 5 <= len(v) <= 10:
        raise ValueError("Please enter a valid zip code")
    return v


def check_first_level(v: str) -> str:
    if v not in FIRST_LEVELS:
        raise ValueError(f"Unknown FIRST level. Accepted values: {list(FIRST_LEVELS)}")
    return v


def check_areas(v: List[str]) -> List[str]:
    if not v:
        raise ValueError("Please select at least one area")
    unknown = [a for a in v if a not in AREAS]
    if unknown:
        raise ValueError(f"Unknown areas: {unknown}")
    return list(dict.fromkeys(v))  # dédoublonné, ordre conservé


def check_hours(v: int) -> int:
    if not MIN_HOURS <= v <= MAX_HOURS:
        raise ValueError(f"Time commitment must be between {MIN_HOURS} and {MAX_HOURS} hours per week")
    return v


def check_answer(v: str) -> str:
    if len(v.strip()) < MIN_ANSWER_LENGTH:
        raise ValueError(f"Please provide more details (at least {MIN_ANSWER_LENGTH} characters)")
    return v.strip()


class StudentRegistration(BaseModel):
    """Payload d'inscription d'un élève (formulaire multi-étapes côté frontend)."""
    first_name: str
    last_name: str
    email: EmailStr
    password: str
    zip_code: str
    first_level: str
    areas_of_interest: List[str]
    grade: int
    school: str
    time_commitment: int = 10
    impressive_things: str
    why_join_team: str

    @field_validator("first_name", "last_name", "school")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("zip_code")
    @classmethod
    def valid_zip_code(cls, v: str) -> str:
        return check_zip_code(v)

    @field_validator("first_level")
    @classmethod
    def valid_first_level(cls, v: str) -> str:
        return check_first_level(v)

    @field_validator("areas_of_interest")
    @classmethod
    def valid_areas(cls, v: List[str]) -> List[str]:
        return check_areas(v)

    @field_validator("grade")
    @classmethod
    def valid_grade(cls, v: int) -> int:
        if not MIN_GRADE <= v <= MAX_GRADE:
            raise ValueError(f"Please enter a valid grade ({MIN_GRADE}-{MAX_GRADE})")
        return v

    @field_validator("time_commitment")
    @classmethod
    def valid_time_commitment(cls, v: int) -> int:
        return check_hours(v)

    @field_validator("impressive_things", "why_join_team")
    @classmethod
    def detailed_answer(cls, v: str) -> str:
        return check_answer(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StudentResponse(BaseModel):
    """Profil élève tel que lu par les dashboards."""
    id: str
    email: str
    name: str
    school: str
    zip_code: str
    grade: int
    first_level: str
    areas_of_interest: List[str]
    time_commitment: int
    impressive_things: str
    why_join_team: str
    resume_url: Optional[str] = None
    is_matched: bool
    matched_team_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

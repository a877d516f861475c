"""
Schémas Pydantic pour les équipes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.schemas.catalog import MAX_GRADE, MAX_TEAM_QUALITIES, MIN_GRADE, TEAM_QUALITIES
from app.schemas.student import (
    check_answer,
    check_areas,
    check_first_level,
    check_hours,
    check_password_strength,
    check_zip_code,
)


class TeamRegistration(BaseModel):
    """Payload d'inscription d'une équipe."""
    team_name: str
    email: EmailStr
    password: str
    first_level: str
    zip_code: str
    is_school_team: Optional[bool] = False
    # validate_default : le nom d'école est obligatoire pour une équipe scolaire même s'il est absent
    school_name: Optional[str] = Field(default=None, validate_default=True)
    areas_of_need: List[str]
    grade_range_min: int = 6
    grade_range_max: int = 12
    time_commitment: int = 10
    qualities: List[str]
    team_awards: str

    @field_validator("team_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Team name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("first_level")
    @classmethod
    def valid_first_level(cls, v: str) -> str:
        return check_first_level(v)

    @field_validator("zip_code")
    @classmethod
    def valid_zip_code(cls, v: str) -> str:
        return check_zip_code(v)

    @field_validator("school_name")
    @classmethod
    def school_name_for_school_team(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("is_school_team") and not (v and v.strip()):
            raise ValueError("Please enter school name")
        return v.strip() if v else None

    @field_validator("areas_of_need")
    @classmethod
    def valid_areas(cls, v: List[str]) -> List[str]:
        return check_areas(v)

    @field_validator("grade_range_min", "grade_range_max")
    @classmethod
    def valid_grade(cls, v: int) -> int:
        if not MIN_GRADE <= v <= MAX_GRADE:
            raise ValueError(f"Please enter valid grades ({MIN_GRADE}-{MAX_GRADE})")
        return v

    @field_validator("grade_range_max")
    @classmethod
    def max_after_min(cls, v: int, info: ValidationInfo) -> int:
        # grade_range_min absent de info.data s'il est lui-même invalide
        minimum = info.data.get("grade_range_min")
        if minimum is not None and minimum > v:
            raise ValueError("Minimum grade must be lower than or equal to maximum grade")
        return v

    @field_validator("time_commitment")
    @classmethod
    def valid_time_commitment(cls, v: int) -> int:
        return check_hours(v)

    @field_validator("qualities")
    @classmethod
    def valid_qualities(cls, v: List[str]) -> List[str]:
        v = list(dict.fromkeys(v))
        if not v:
            raise ValueError("Please select at least one quality")
        if len(v) > MAX_TEAM_QUALITIES:
            raise ValueError(f"Select up to {MAX_TEAM_QUALITIES} qualities")
        unknown = [q for q in v if q not in TEAM_QUALITIES]
        if unknown:
            raise ValueError(f"Unknown qualities: {unknown}")
        return v

    @field_validator("team_awards")
    @classmethod
    def detailed_awards(cls, v: str) -> str:
        return check_answer(v)


class TeamResponse(BaseModel):
    id: str
    team_name: str
    email: str
    zip_code: str
    first_level: str
    areas_of_need: List[str]
    grade_range_min: int
    grade_range_max: int
    time_commitment: int
    qualities: List[str]
    is_school_team: bool
    school_name: Optional[str] = None
    team_awards: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TeamActivation(BaseModel):
    """Corps de requête pour activer / désactiver une équipe."""
    is_active: bool


class TeamDeletionReport(BaseModel):
    team_id: str
    released_students: int

"""
Schémas Pydantic pour les matchs élève ↔ équipe.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse


class MatchCreate(BaseModel):
    """Corps de requête : l'administrateur associe un élève à une équipe."""
    student_id: str
    team_id: str

    @field_validator("student_id", "team_id")
    @classmethod
    def id_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Identifier cannot be empty")
        return v.strip()


class MatchResponse(BaseModel):
    """Élève matché accompagné de son équipe (vue « Matches » du dashboard admin)."""
    student: StudentResponse
    team: TeamResponse


class StudentMatchEntry(BaseModel):
    type: Literal["matched"] = "matched"
    team: TeamResponse
    # Pas d'horodatage de match stocké : c'est la date d'inscription de l'élève
    matched_at: Optional[datetime] = None


class UserMatchesResponse(BaseModel):
    """Matchs vus depuis le dashboard de l'utilisateur connecté."""
    user_type: Literal["student", "team", "admin"]
    team_matches: List[StudentMatchEntry] = []
    roster: List[StudentResponse] = []


class TeamRosterResponse(BaseModel):
    team_id: str
    total: int
    students: List[StudentResponse]

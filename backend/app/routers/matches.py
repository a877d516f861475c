"""
Router des matchs élève ↔ équipe (administrateurs uniquement).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin, unwrap
from app.schemas.match import MatchCreate, MatchResponse
from app.schemas.student import StudentResponse
from app.services import match_service

router = APIRouter(prefix="/api/v1/matches", tags=["Matchs"], dependencies=[Depends(require_admin)])


@router.post("", response_model=StudentResponse, summary="Associer un élève à une équipe")
def create_match(data: MatchCreate, db: Session = Depends(get_db)):
    """
    Associe l'élève à l'équipe.
    Un match existant vers une autre équipe est remplacé ; rejouer le même match ne change rien.
    """
    return unwrap(match_service.create_match(db, data.student_id, data.team_id))


@router.delete("/{student_id}", response_model=StudentResponse, summary="Retirer un élève de son équipe")
def remove_match(student_id: str, db: Session = Depends(get_db)):
    return unwrap(match_service.remove_match(db, student_id))


@router.get("", response_model=List[MatchResponse], summary="Lister les matchs")
def list_matches(db: Session = Depends(get_db)):
    """Élèves matchés avec leur équipe, du plus récent au plus ancien."""
    return unwrap(match_service.list_matches(db))

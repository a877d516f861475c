"""
Router d'administration des équipes : liste, détail, roster, activation, suppression.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin, unwrap
from app.schemas.directory import SortOption, TeamFilter
from app.schemas.match import TeamRosterResponse
from app.schemas.team import TeamActivation, TeamDeletionReport, TeamResponse
from app.services import directory_service, match_service, profile_service

router = APIRouter(prefix="/api/v1/teams", tags=["Équipes"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[TeamResponse], summary="Lister les équipes")
def list_teams(
    search: Optional[str] = None,
    zip_code: Optional[str] = None,
    first_level: Optional[str] = None,
    show_active_only: bool = False,
    show_inactive_only: bool = False,
    sort: SortOption = SortOption.NEWEST,
    db: Session = Depends(get_db),
):
    try:
        filters = TeamFilter(
            search=search,
            zip_code=zip_code,
            first_level=first_level,
            show_active_only=show_active_only,
            show_inactive_only=show_inactive_only,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return unwrap(directory_service.list_teams(db, filters, sort))


@router.get("/{team_id}", response_model=TeamResponse, summary="Détail d'une équipe")
def get_team(team_id: str, db: Session = Depends(get_db)):
    return unwrap(profile_service.get_team(db, team_id))


@router.get("/{team_id}/roster", response_model=TeamRosterResponse, summary="Élèves matchés avec l'équipe")
def get_roster(team_id: str, db: Session = Depends(get_db)):
    """Roster recalculé à partir des élèves, par ordre d'inscription."""
    unwrap(profile_service.get_team(db, team_id))
    students = unwrap(match_service.get_team_roster(db, team_id))
    return TeamRosterResponse(team_id=team_id, total=len(students), students=students)


@router.put("/{team_id}/activation", response_model=TeamResponse, summary="Activer / désactiver une équipe")
def set_activation(team_id: str, data: TeamActivation, db: Session = Depends(get_db)):
    return unwrap(profile_service.set_team_active(db, team_id, data.is_active))


@router.delete("/{team_id}", response_model=TeamDeletionReport, summary="Supprimer une équipe")
def delete_team(team_id: str, db: Session = Depends(get_db)):
    """Supprime l'équipe ; ses élèves redeviennent non matchés dans la même transaction."""
    return unwrap(profile_service.delete_team(db, team_id))

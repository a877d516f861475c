"""
Router d'administration des élèves : liste filtrée/triée, détail, équipe, CV.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_object_store, require_admin, unwrap
from app.schemas.directory import SortOption, StudentFilter
from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse
from app.services import directory_service, match_service, profile_service
from app.services.storage_service import LocalObjectStore

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[StudentResponse], summary="Lister les élèves")
def list_students(
    search: Optional[str] = None,
    zip_code: Optional[str] = None,
    first_level: Optional[str] = None,
    show_matched_only: bool = False,
    show_unmatched_only: bool = False,
    sort: SortOption = SortOption.NEWEST,
    db: Session = Depends(get_db),
):
    """
    Recherche (nom ou email, insensible à la casse), filtres code postal / niveau
    (`all` = pas de filtre) et statut de match. Tri : newest, oldest, name, location.
    """
    try:
        filters = StudentFilter(
            search=search,
            zip_code=zip_code,
            first_level=first_level,
            show_matched_only=show_matched_only,
            show_unmatched_only=show_unmatched_only,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return unwrap(directory_service.list_students(db, filters, sort))


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(student_id: str, db: Session = Depends(get_db)):
    return unwrap(profile_service.get_student(db, student_id))


@router.get("/{student_id}/match", response_model=Optional[TeamResponse], summary="Équipe de l'élève")
def get_student_match(student_id: str, db: Session = Depends(get_db)):
    """Retourne l'équipe de l'élève, ou null s'il n'est pas matché (ou si l'équipe n'existe plus)."""
    return unwrap(match_service.get_student_match(db, student_id))


@router.get("/{student_id}/resume", summary="Lien de téléchargement du CV")
def get_resume(
    student_id: str,
    db: Session = Depends(get_db),
    storage: LocalObjectStore = Depends(get_object_store),
):
    url = unwrap(profile_service.get_resume_url(db, storage, student_id))
    if url is None:
        raise HTTPException(status_code=404, detail="This student has not uploaded a resume.")
    return {"student_id": student_id, "url": url}

"""
Router d'inscription des élèves et des équipes.
POST /api/v1/register/students : multipart (payload JSON + CV optionnel)
POST /api/v1/register/teams    : JSON
"""

import json
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import get_identity_provider, get_object_store, unwrap
from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse
from app.services import registration_service
from app.services.identity_service import LocalIdentityProvider
from app.services.registration_service import ResumeUpload
from app.services.storage_service import LocalObjectStore

router = APIRouter(prefix="/api/v1/register", tags=["Inscription"])

ALLOWED_RESUME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
ALLOWED_RESUME_EXTENSIONS = (".pdf", ".doc", ".docx")


@router.post("/students", response_model=StudentResponse, status_code=201, summary="Inscrire un élève")
def register_student(
    payload: str = Form(..., description="Champs du formulaire élève, encodés en JSON"),
    resume: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
    storage: LocalObjectStore = Depends(get_object_store),
):
    """
    Crée l'identité et le profil élève.

    - Toutes les erreurs de validation sont retournées ensemble (422, liste field/message)
    - Le CV (PDF ou Word) est optionnel ; s'il ne peut pas être stocké à temps,
      l'inscription est enregistrée sans CV
    - Route synchrone : exécutée dans le threadpool, l'attente du CV ne bloque pas les autres requêtes
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        raise HTTPException(status_code=422, detail=[{"field": "payload", "message": "Invalid JSON"}])
    if not isinstance(data, dict):
        raise HTTPException(status_code=422, detail=[{"field": "payload", "message": "Expected a JSON object"}])

    upload = None
    if resume is not None and resume.filename:
        if (
            resume.content_type not in ALLOWED_RESUME_TYPES
            and not resume.filename.lower().endswith(ALLOWED_RESUME_EXTENSIONS)
        ):
            raise HTTPException(
                status_code=400,
                detail="Invalid format. Only PDF and Word resumes are accepted.",
            )
        content = resume.file.read()
        if len(content) > settings.MAX_RESUME_SIZE_MB * 1024 * 1024:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Maximum size: {settings.MAX_RESUME_SIZE_MB} MB.",
            )
        upload = ResumeUpload(filename=resume.filename, content=content)

    return unwrap(registration_service.register_student(db, identity, storage, data, upload))


@router.post("/teams", response_model=TeamResponse, status_code=201, summary="Inscrire une équipe")
def register_team(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    identity: LocalIdentityProvider = Depends(get_identity_provider),
):
    """Crée l'identité et le profil équipe. Toutes les erreurs de validation sont retournées ensemble."""
    return unwrap(registration_service.register_team(db, identity, payload))

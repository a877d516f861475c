"""
Point d'entrée principal de l'API TeamMatch.
Démarrage : uvicorn app.main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import app.models  # noqa: F401 — enregistre tous les modèles dans Base.metadata avant les routers
from app.config import settings
from app.routers import auth, matches, registration, students, teams
from app.schemas.catalog import CatalogResponse, build_catalog

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : s'assure que le dossier des CV existe avant de servir des requêtes."""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info("API TeamMatch démarrée (env=%s, uploads=%s)", settings.ENV, settings.UPLOAD_DIR)
    yield


app = FastAPI(
    title="TeamMatch API",
    description="Inscription des élèves et des équipes FIRST, et gestion des matchs élève ↔ équipe",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# CV téléversés (LocalObjectStore) ; le dossier est créé au démarrage
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

app.include_router(auth.router)
app.include_router(registration.router)
app.include_router(students.router)
app.include_router(teams.router)
app.include_router(matches.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour que la réponse 500
    passe par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "TeamMatch API", "version": "0.1.0"}


@app.get("/api/v1/catalogs", response_model=CatalogResponse, tags=["Configuration"])
def get_catalogs():
    """Niveaux FIRST, domaines d'intérêt et qualités d'équipe acceptés par l'inscription."""
    return build_catalog()


@app.get("/api/v1/config", tags=["Configuration"])
def get_config():
    return settings.app_branding()

"""
Configuration de la connexion à la base de données (profile store).
Les services reçoivent la session en paramètre : aucun client global n'est utilisé ailleurs.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (dev local) : la session FastAPI peut changer de thread entre deux requêtes
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """Crée les tables manquantes (base neuve, scripts d'administration)."""
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dépendance FastAPI — fournit une session de profile store et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

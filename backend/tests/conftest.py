"""
Configuration partagée pour tous les tests.

- `client` : override get_db par un MagicMock (aucune connexion à PostgreSQL) et
  court-circuite l'authentification (utilisateur courant = administrateur).
- `db_session` : base SQLite en mémoire, pour les tests qui vérifient les propriétés
  du matching sur de vraies requêtes.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.dependencies import get_current_user_id, get_identity_provider, get_object_store, require_admin
from app.main import app
from app.models.student import Student
from app.models.team import Team
from app.schemas.student import StudentResponse
from app.schemas.team import TeamResponse

ADMIN_ID = "admin-uid"
BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def mock_identity():
    return MagicMock()


@pytest.fixture
def mock_storage():
    return MagicMock()


@pytest.fixture
def client(mock_db, mock_identity, mock_storage):
    """Client HTTP de test avec la BDD, l'identité et le stockage mockés."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_identity_provider] = lambda: mock_identity
    app.dependency_overrides[get_object_store] = lambda: mock_storage
    app.dependency_overrides[get_current_user_id] = lambda: ADMIN_ID
    app.dependency_overrides[require_admin] = lambda: ADMIN_ID
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(mock_db, mock_identity):
    """Client sans utilisateur connecté : l'authentification réelle s'applique."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_identity_provider] = lambda: mock_identity
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, recréée pour chaque test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def add_student(db_session):
    """Insère un élève. `minutes` décale created_at pour contrôler l'ordre d'inscription."""

    def _add(student_id, name="Ada Lovelace", minutes=0, **kwargs):
        values = dict(
            email=f"{student_id}@example.org",
            name=name,
            school="Lincoln High School",
            zip_code="97201",
            grade=10,
            first_level="first-tech-challenge",
            areas_of_interest=["software"],
            time_commitment=10,
            impressive_things="Built a line-following robot",
            why_join_team="I want to compete with a real team",
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        values.update(kwargs)
        student = Student(id=student_id, **values)
        db_session.add(student)
        db_session.commit()
        return student

    return _add


@pytest.fixture
def add_team(db_session):
    def _add(team_id, team_name="RevAmped", minutes=0, **kwargs):
        values = dict(
            email=f"{team_id}@example.org",
            team_name=team_name,
            zip_code="97201",
            first_level="first-tech-challenge",
            areas_of_need=["hardware"],
            grade_range_min=6,
            grade_range_max=12,
            time_commitment=10,
            qualities=["teamwork"],
            is_school_team=False,
            team_awards="Inspire Award 2024 at state",
            is_active=True,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        values.update(kwargs)
        team = Team(id=team_id, **values)
        db_session.add(team)
        db_session.commit()
        return team

    return _add


@pytest.fixture
def make_student_response():
    """Fabrique de StudentResponse pour les tests d'API (services mockés)."""

    def _make(**kwargs) -> StudentResponse:
        values = dict(
            id="s1",
            email="ada@example.org",
            name="Ada Lovelace",
            school="Lincoln High School",
            zip_code="97201",
            grade=10,
            first_level="first-tech-challenge",
            areas_of_interest=["software"],
            time_commitment=10,
            impressive_things="Built a line-following robot",
            why_join_team="I want to compete with a real team",
            is_matched=False,
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )
        values.update(kwargs)
        return StudentResponse(**values)

    return _make


@pytest.fixture
def make_team_response():
    def _make(**kwargs) -> TeamResponse:
        values = dict(
            id="t1",
            team_name="RevAmped",
            email="coach@revamped.org",
            zip_code="97201",
            first_level="first-tech-challenge",
            areas_of_need=["hardware"],
            grade_range_min=6,
            grade_range_max=12,
            time_commitment=10,
            qualities=["teamwork"],
            is_school_team=False,
            team_awards="Inspire Award 2024 at state",
            is_active=True,
            created_at=datetime.now(),
        )
        values.update(kwargs)
        return TeamResponse(**values)

    return _make

"""
Tests des listes filtrées / triées du dashboard d'administration.
"""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from app.errors import TransientStoreError
from app.schemas.directory import SortOption, StudentFilter, TeamFilter
from app.services import directory_service
from app.services.match_service import create_match


@pytest.fixture
def students(db_session, add_student, add_team):
    add_team("t1")
    add_student("s1", name="Charlie Brown", zip_code="97201", minutes=0)
    add_student("s2", name="alice Smith", zip_code="97030", minutes=10, email="alice@school.org")
    add_student("s3", name="Bob Jones", zip_code="97201", minutes=20,
                first_level="first-robotics-competition")
    add_student("s4", name="Alice Smith", zip_code="97030", minutes=20)
    create_match(db_session, "s1", "t1").unwrap()
    create_match(db_session, "s3", "t1").unwrap()


def ids(result):
    return [r.id for r in result.unwrap()]


# --- Filtres ---

def test_filtres_vides_retourne_tout(db_session, students):
    assert len(directory_service.list_students(db_session).unwrap()) == 4


def test_recherche_nom_insensible_casse(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(search="ALICE"))
    assert sorted(ids(rows)) == ["s2", "s4"]


def test_recherche_email(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(search="school.org"))
    assert ids(rows) == ["s2"]


def test_recherche_caracteres_joker_echappes(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(search="%"))
    assert ids(rows) == []


def test_filtre_code_postal_et_niveau(db_session, students):
    rows = directory_service.list_students(
        db_session, StudentFilter(zip_code="97201", first_level="first-robotics-competition")
    )
    assert ids(rows) == ["s3"]


def test_niveau_all_ne_filtre_pas(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(first_level="all"))
    assert len(ids(rows)) == 4


def test_matches_uniquement(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(show_matched_only=True))
    assert sorted(ids(rows)) == ["s1", "s3"]


def test_non_matches_uniquement(db_session, students):
    rows = directory_service.list_students(db_session, StudentFilter(show_unmatched_only=True))
    assert sorted(ids(rows)) == ["s2", "s4"]


def test_bascules_exclusives():
    with pytest.raises(ValidationError):
        StudentFilter(show_matched_only=True, show_unmatched_only=True)


def test_activer_une_bascule_desactive_l_autre():
    f = StudentFilter(show_matched_only=True).with_unmatched_only(True)
    assert f.show_unmatched_only is True
    assert f.show_matched_only is False

    g = f.with_matched_only(True)
    assert g.show_matched_only is True
    assert g.show_unmatched_only is False


# --- Tris ---

def test_tri_plus_recent(db_session, students):
    rows = directory_service.list_students(db_session, sort=SortOption.NEWEST)
    # s3 et s4 inscrits au même instant : départagés par id
    assert ids(rows) == ["s3", "s4", "s2", "s1"]


def test_tri_plus_ancien(db_session, students):
    rows = directory_service.list_students(db_session, sort=SortOption.OLDEST)
    assert ids(rows) == ["s1", "s2", "s3", "s4"]


def test_tri_nom_insensible_casse(db_session, students):
    rows = directory_service.list_students(db_session, sort=SortOption.NAME)
    assert ids(rows) == ["s2", "s4", "s3", "s1"]


def test_tri_localisation(db_session, students):
    rows = directory_service.list_students(db_session, sort=SortOption.LOCATION)
    assert ids(rows) == ["s2", "s4", "s1", "s3"]


@pytest.mark.parametrize("sort", list(SortOption))
def test_ordre_deterministe(db_session, students, sort):
    """Même filtre + même tri → même ordre, à chaque appel."""
    filters = StudentFilter(search="a")
    first = ids(directory_service.list_students(db_session, filters, sort))
    for _ in range(3):
        assert ids(directory_service.list_students(db_session, filters, sort)) == first


# --- Équipes ---

def test_equipes_actives_inactives(db_session, add_team):
    add_team("t1", team_name="Zeta", minutes=0)
    add_team("t2", team_name="alpha", minutes=5, is_active=False)
    add_team("t3", team_name="Beta", minutes=10)

    active = directory_service.list_teams(db_session, TeamFilter(show_active_only=True))
    inactive = directory_service.list_teams(db_session, TeamFilter(show_inactive_only=True))
    by_name = directory_service.list_teams(db_session, sort=SortOption.NAME)

    assert sorted(ids(active)) == ["t1", "t3"]
    assert ids(inactive) == ["t2"]
    assert ids(by_name) == ["t2", "t3", "t1"]


def test_equipes_recherche(db_session, add_team):
    add_team("t1", team_name="RevAmped Robotics")
    add_team("t2", team_name="Gearheads")

    rows = directory_service.list_teams(db_session, TeamFilter(search="robot"))

    assert ids(rows) == ["t1"]


def test_team_filter_bascules():
    with pytest.raises(ValidationError):
        TeamFilter(show_active_only=True, show_inactive_only=True)
    f = TeamFilter(show_inactive_only=True).with_active_only(True)
    assert (f.show_active_only, f.show_inactive_only) == (True, False)


# --- Erreurs de stockage ---

@pytest.mark.parametrize("list_func", [directory_service.list_students, directory_service.list_teams])
def test_erreur_de_stockage_retourne_un_echec(list_func):
    """Une erreur SQLAlchemy ne remonte pas : Result en échec (TransientStoreError) + rollback."""
    db = MagicMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

    result = list_func(db)

    assert not result.ok
    assert isinstance(result.error, TransientStoreError)
    db.rollback.assert_called_once()

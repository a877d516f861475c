"""
Tests de la gestion des administrateurs (utilisée par scripts/manage_admins.py).
"""

import pytest

from app.errors import NotFoundError
from app.models.admin import Admin
from app.models.identity import Identity
from app.services import admin_service
from app.services.identity_service import LocalIdentityProvider


@pytest.fixture
def provider(db_session):
    return LocalIdentityProvider(db_session)


def test_create_admin_nouvelle_identite(db_session, provider):
    admin = admin_service.create_admin(db_session, provider, "Boss@Example.org", "Secret123", "Boss").unwrap()

    assert admin.email == "boss@example.org"
    assert admin.role == "admin"
    assert db_session.get(Identity, admin.id).email_verified is True
    assert provider.verify_credentials("boss@example.org", "Secret123") == admin.id


def test_create_admin_identite_existante(db_session, provider):
    identity_id = provider.create_identity("boss@example.org", "Secret123")

    admin = admin_service.create_admin(db_session, provider, "boss@example.org", "Other1234", "Boss").unwrap()

    assert admin.id == identity_id
    assert provider.verify_credentials("boss@example.org", "Other1234") == identity_id


def test_create_admin_deux_fois_met_a_jour(db_session, provider):
    admin_service.create_admin(db_session, provider, "boss@example.org", "Secret123", "Boss").unwrap()
    admin_service.create_admin(db_session, provider, "boss@example.org", "Secret123", "Big Boss").unwrap()

    admins = admin_service.list_admins(db_session).unwrap()
    assert [a.name for a in admins] == ["Big Boss"]


def test_create_admin_mot_de_passe_faible(db_session, provider):
    result = admin_service.create_admin(db_session, provider, "boss@example.org", "weak", "Boss")
    assert result.error.code == "weak_password"


def test_list_admins_tries_par_email(db_session, provider):
    admin_service.create_admin(db_session, provider, "zoe@example.org", "Secret123", "Zoe").unwrap()
    admin_service.create_admin(db_session, provider, "amy@example.org", "Secret123", "Amy").unwrap()

    emails = [a.email for a in admin_service.list_admins(db_session).unwrap()]

    assert emails == ["amy@example.org", "zoe@example.org"]


def test_remove_admin(db_session, provider):
    admin = admin_service.create_admin(db_session, provider, "boss@example.org", "Secret123", "Boss").unwrap()

    email = admin_service.remove_admin(db_session, provider, admin.id).unwrap()

    assert email == "boss@example.org"
    assert db_session.get(Admin, admin.id) is None
    assert db_session.get(Identity, admin.id) is None


def test_remove_admin_inexistant(db_session, provider):
    result = admin_service.remove_admin(db_session, provider, "ghost")
    assert isinstance(result.error, NotFoundError)


@pytest.mark.parametrize("profile_fixture", ["add_student", "add_team"])
def test_remove_admin_conserve_l_identite_d_un_profil(db_session, provider, request, profile_fixture):
    """Un élève ou une équipe promu admin garde son identité (et donc sa connexion) après retrait."""
    identity_id = provider.create_identity("coach@example.org", "Secret123")
    request.getfixturevalue(profile_fixture)(identity_id)
    admin_service.create_admin(db_session, provider, "coach@example.org", "Secret123", "Coach").unwrap()

    admin_service.remove_admin(db_session, provider, identity_id).unwrap()

    assert db_session.get(Admin, identity_id) is None
    assert db_session.get(Identity, identity_id) is not None
    assert provider.verify_credentials("coach@example.org", "Secret123") == identity_id

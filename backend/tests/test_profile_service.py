"""
Tests du service de profils : profil de l'utilisateur connecté, activation et suppression d'équipe.
"""

from unittest.mock import MagicMock

from app.errors import NotFoundError
from app.models.admin import Admin
from app.models.student import Student
from app.services import match_service, profile_service


# --- get_user_profile ---

def test_profil_administrateur_prioritaire(db_session, add_student):
    add_student("uid-1")
    db_session.add(Admin(id="uid-1", email="admin@example.org", name="Admin", role="admin"))
    db_session.commit()

    profile = profile_service.get_user_profile(db_session, "uid-1").unwrap()

    assert profile.type == "admin"
    assert profile.profile.email == "admin@example.org"


def test_profil_eleve(db_session, add_student):
    add_student("uid-1", name="Ada Lovelace")
    profile = profile_service.get_user_profile(db_session, "uid-1").unwrap()
    assert profile.type == "student"
    assert profile.profile.name == "Ada Lovelace"


def test_profil_equipe(db_session, add_team):
    add_team("uid-2", team_name="RevAmped")
    profile = profile_service.get_user_profile(db_session, "uid-2").unwrap()
    assert profile.type == "team"
    assert profile.profile.team_name == "RevAmped"


def test_profil_introuvable(db_session):
    result = profile_service.get_user_profile(db_session, "ghost")
    assert isinstance(result.error, NotFoundError)
    assert result.error.message == profile_service.PROFILE_NOT_FOUND


def test_is_admin(db_session):
    db_session.add(Admin(id="uid-1", email="admin@example.org"))
    db_session.commit()
    assert profile_service.is_admin(db_session, "uid-1") is True
    assert profile_service.is_admin(db_session, "uid-2") is False


# --- set_team_active ---

def test_desactiver_equipe_garde_les_matchs(db_session, add_student, add_team):
    add_student("s1")
    add_team("t1")
    match_service.create_match(db_session, "s1", "t1").unwrap()

    team = profile_service.set_team_active(db_session, "t1", False).unwrap()

    assert team.is_active is False
    assert db_session.get(Student, "s1").matched_team_id == "t1"


def test_activer_equipe_inexistante(db_session):
    result = profile_service.set_team_active(db_session, "ghost", True)
    assert isinstance(result.error, NotFoundError)


# --- delete_team ---

def test_supprimer_equipe_libere_les_eleves(db_session, add_student, add_team):
    add_student("s1")
    add_student("s2", minutes=1)
    add_student("s3", minutes=2)
    add_team("t1")
    add_team("t2")
    match_service.create_match(db_session, "s1", "t1").unwrap()
    match_service.create_match(db_session, "s2", "t1").unwrap()
    match_service.create_match(db_session, "s3", "t2").unwrap()

    report = profile_service.delete_team(db_session, "t1").unwrap()

    assert report.team_id == "t1"
    assert report.released_students == 2
    assert profile_service.get_team(db_session, "t1").error is not None
    for student_id in ("s1", "s2"):
        student = db_session.get(Student, student_id)
        assert student.matched_team_id is None
        assert student.is_matched is False
    assert db_session.get(Student, "s3").matched_team_id == "t2"


def test_supprimer_equipe_inexistante(db_session):
    result = profile_service.delete_team(db_session, "ghost")
    assert isinstance(result.error, NotFoundError)


# --- get_resume_url ---

def test_resume_url(db_session, add_student):
    add_student("s1", resume_url="student-resumes/1-abc.pdf")
    storage = MagicMock()
    storage.get_retrieval_url.return_value = "http://api.test/uploads/student-resumes/1-abc.pdf"

    url = profile_service.get_resume_url(db_session, storage, "s1").unwrap()

    assert url.endswith("1-abc.pdf")
    storage.get_retrieval_url.assert_called_once_with("student-resumes/1-abc.pdf")


def test_resume_url_sans_cv(db_session, add_student):
    add_student("s1")
    assert profile_service.get_resume_url(db_session, MagicMock(), "s1").unwrap() is None


def test_resume_url_eleve_inexistant(db_session):
    result = profile_service.get_resume_url(db_session, MagicMock(), "ghost")
    assert isinstance(result.error, NotFoundError)

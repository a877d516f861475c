"""
Tests d'intégration API pour les matchs élève ↔ équipe.
Testent les URLs, les codes HTTP, la validation et le format des réponses.
"""

from unittest.mock import patch

from app.errors import NotFoundError, Result, TransientStoreError
from app.schemas.match import MatchResponse


# ============================================================
# POST /api/v1/matches
# ============================================================

def test_create_match_succes(client, make_student_response):
    with patch("app.routers.matches.match_service.create_match") as mock:
        mock.return_value = Result.success(make_student_response(is_matched=True, matched_team_id="t1"))

        response = client.post("/api/v1/matches", json={"student_id": "s1", "team_id": "t1"})

    assert response.status_code == 200
    assert response.json()["is_matched"] is True
    assert response.json()["matched_team_id"] == "t1"
    assert mock.call_args.args[1:] == ("s1", "t1")


def test_create_match_eleve_inexistant(client):
    with patch("app.routers.matches.match_service.create_match") as mock:
        mock.return_value = Result.failure(NotFoundError("Student 'ghost' not found."))

        response = client.post("/api/v1/matches", json={"student_id": "ghost", "team_id": "t1"})

    assert response.status_code == 404
    assert "ghost" in response.json()["detail"]


def test_create_match_stockage_indisponible(client):
    with patch("app.routers.matches.match_service.create_match") as mock:
        mock.return_value = Result.failure(TransientStoreError("Profile store failure: OperationalError"))

        response = client.post("/api/v1/matches", json={"student_id": "s1", "team_id": "t1"})

    assert response.status_code == 503


def test_create_match_id_vide(client):
    response = client.post("/api/v1/matches", json={"student_id": "  ", "team_id": "t1"})
    assert response.status_code == 422


def test_create_match_body_manquant(client):
    response = client.post("/api/v1/matches")
    assert response.status_code == 422


def test_create_match_sans_authentification(anonymous_client):
    response = anonymous_client.post("/api/v1/matches", json={"student_id": "s1", "team_id": "t1"})
    assert response.status_code == 401


# ============================================================
# DELETE /api/v1/matches/{student_id}
# ============================================================

def test_remove_match_succes(client, make_student_response):
    with patch("app.routers.matches.match_service.remove_match") as mock:
        mock.return_value = Result.success(make_student_response())

        response = client.delete("/api/v1/matches/s1")

    assert response.status_code == 200
    assert response.json()["is_matched"] is False
    assert response.json()["matched_team_id"] is None


def test_remove_match_eleve_inexistant(client):
    with patch("app.routers.matches.match_service.remove_match") as mock:
        mock.return_value = Result.failure(NotFoundError("Student 'ghost' not found."))
        response = client.delete("/api/v1/matches/ghost")

    assert response.status_code == 404


# ============================================================
# GET /api/v1/matches
# ============================================================

def test_list_matches(client, make_student_response, make_team_response):
    with patch("app.routers.matches.match_service.list_matches") as mock:
        mock.return_value = Result.success([
            MatchResponse(
                student=make_student_response(is_matched=True, matched_team_id="t1"),
                team=make_team_response(),
            )
        ])
        response = client.get("/api/v1/matches")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["student"]["id"] == "s1"
    assert data[0]["team"]["team_name"] == "RevAmped"

"""
Tests d'intégration API pour les élèves.
GET  /api/students, GET /api/students/{id}, POST /api/students, POST /api/students/validate
"""

from datetime import date, timedelta
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from student_registration.exceptions import StorageUnavailableError
from student_registration.main import app


# --- Helpers ---

def student_payload(**kwargs) -> dict:
    payload = {
        "name": "John Doe",
        "email": "JOHN@X.COM",
        "course": "Computer Science",
        "date_of_birth": "2000-01-01",
    }
    payload.update(kwargs)
    return payload


def ten_years_ago() -> str:
    return (date.today() - timedelta(days=365 * 10)).isoformat()


# ============================================================
# GET /api/health
# ============================================================

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["message"] == "Server is running"


# ============================================================
# POST /api/students
# ============================================================

def test_create_student_succes(client):
    """Création valide → 201, email normalisé en minuscules."""
    response = client.post("/api/students", json=student_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Student registered successfully"
    assert body["data"]["email"] == "john@x.com"
    assert body["data"]["date_of_birth"] == "2000-01-01"
    assert isinstance(body["data"]["id"], int)
    assert "created_at" in body["data"]


def test_create_student_champs_trimes(client):
    response = client.post("/api/students", json=student_payload(name="  Jane Smith  ", course=" Business "))
    assert response.status_code == 201
    assert response.json()["data"]["name"] == "Jane Smith"
    assert response.json()["data"]["course"] == "Business"


def test_create_student_erreurs_de_validation(client):
    """Trois champs invalides → 400 avec les trois erreurs, dans l'ordre des champs."""
    response = client.post("/api/students", json=student_payload(
        name="Jo", email="bad-email", course="A", date_of_birth=ten_years_ago(),
    ))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation errors"
    assert [e["field"] for e in body["errors"]] == ["email", "course", "date_of_birth"]
    assert body["errors"][2]["message"] == "Student must be between 16 and 100 years old"


def test_create_student_rien_n_est_ecrit_si_invalide(client, sqlite_store):
    client.post("/api/students", json=student_payload(name="J0hn"))
    assert sqlite_store.list_all() == []


def test_create_student_email_duplique(client, sqlite_store):
    first = client.post("/api/students", json=student_payload(email="john@x.com"))
    assert first.status_code == 201

    response = client.post("/api/students", json=student_payload(name="Other John", email="John@X.com"))

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Email already exists"}
    assert len(sqlite_store.list_all()) == 1


def test_create_student_body_manquant(client):
    """Body absent → 400 dans l'enveloppe de validation (pas de 422)."""
    response = client.post("/api/students")
    assert response.status_code == 400
    assert response.json()["message"] == "Validation errors"


def test_create_student_json_illisible(client):
    response = client.post(
        "/api/students",
        content="{pas du json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert [e["field"] for e in response.json()["errors"]] == ["body"]


def test_create_student_champs_absents(client):
    response = client.post("/api/students", json={})
    assert response.status_code == 400
    assert {e["field"] for e in response.json()["errors"]} == {"name", "email", "course", "date_of_birth"}


# ============================================================
# GET /api/students
# ============================================================

def test_list_students_vide(client):
    response = client.get("/api/students")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Students fetched successfully", "data": []}


def test_list_students_plus_recent_en_premier(client):
    for email in ("a@x.com", "b@x.com", "c@x.com"):
        client.post("/api/students", json=student_payload(email=email))

    data = client.get("/api/students").json()["data"]

    assert [s["email"] for s in data] == ["c@x.com", "b@x.com", "a@x.com"]


def test_list_students_filtre_id(client):
    created = client.post("/api/students", json=student_payload()).json()["data"]

    response = client.get("/api/students", params={"id": created["id"]})

    assert response.status_code == 200
    assert response.json()["message"] == "Student fetched successfully"
    assert response.json()["data"] == created


def test_list_students_filtre_id_introuvable(client):
    response = client.get("/api/students", params={"id": 999})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found"}


# ============================================================
# GET /api/students/{id}
# ============================================================

def test_get_student(client):
    created = client.post("/api/students", json=student_payload()).json()["data"]

    response = client.get(f"/api/students/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "john@x.com"


def test_get_student_introuvable(client):
    response = client.get("/api/students/12345")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found"}


def test_get_student_id_invalide(client):
    response = client.get("/api/students/pas-un-id")
    assert response.status_code == 400
    assert response.json()["message"] == "Validation errors"


# ============================================================
# POST /api/students/validate
# ============================================================

def test_validate_formulaire_valide(client, sqlite_store):
    response = client.post("/api/students/validate", json=student_payload())

    assert response.status_code == 200
    assert response.json() == {
        "valid": True,
        "errors": {"name": None, "email": None, "course": None, "date_of_birth": None},
    }
    assert sqlite_store.list_all() == []


def test_validate_formulaire_invalide(client):
    response = client.post("/api/students/validate", json=student_payload(name="J", email="nope"))

    body = response.json()
    assert body["valid"] is False
    assert body["errors"]["name"] == "Name must be at least 2 characters long"
    assert body["errors"]["email"] == "Please enter a valid email address"
    assert body["errors"]["course"] is None


# ============================================================
# Routes inconnues et erreurs internes
# ============================================================

def test_route_api_inconnue(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "API endpoint not found"
    assert body["path"] == "/api/unknown"
    assert "POST /api/students" in body["available_endpoints"]


def _client_with_store(store, monkeypatch) -> TestClient:
    monkeypatch.setattr("student_registration.main.create_student_store", lambda _settings: store)
    return TestClient(app, raise_server_exceptions=False)


def test_erreur_interne_sans_detail(monkeypatch):
    store = MagicMock()
    store.list_all.side_effect = RuntimeError("secret stack detail")

    with _client_with_store(store, monkeypatch) as c:
        response = c.get("/api/students")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_base_indisponible_pendant_l_inscription(monkeypatch):
    store = MagicMock()
    store.get_by_email.return_value = None
    store.create.side_effect = StorageUnavailableError("postgresql database unavailable")

    with _client_with_store(store, monkeypatch) as c:
        response = c.post("/api/students", json=student_payload())

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"


def test_methode_de_modification_non_exposee(client):
    """Les élèves sont immuables : aucun PUT / DELETE."""
    assert client.put("/api/students/1", json=student_payload()).status_code == 405
    assert client.delete("/api/students/1").status_code == 405


def test_cors_preflight_limite_a_get_post(client):
    allowed = client.options("/api/students", headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "POST",
    })
    refused = client.options("/api/students", headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "DELETE",
    })

    assert allowed.status_code == 200
    assert "DELETE" not in allowed.headers["access-control-allow-methods"]
    assert refused.status_code == 400

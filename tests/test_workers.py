from sqlalchemy import select, func

from app.crud import worker as worker_crud
from app.models import Worker, WorkerSkill


def count(session_factory, model):
    with session_factory() as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()


def worker_payload(skills=None, **overrides):
    payload = {
        "first_name": "Karl",
        "last_name": "Huber",
        "phone": "0171 555000",
        "email": "karl@example.com",
        "hourly_rate": 45.5,
        "skills": skills or [],
    }
    payload.update(overrides)
    return payload


def test_list_skills_ordered_by_name(client):
    response = client.get("/workers/skills")

    assert response.status_code == 200
    assert [skill["name"] for skill in response.json()] == ["Elektrik", "Heizung", "Sanitär"]


def test_create_worker_with_skills(client, skill_ids):
    response = client.post("/workers", json=worker_payload(skills=[
        {"id": skill_ids["Sanitär"], "experience_years": 12},
        {"id": skill_ids["Heizung"], "experience_years": 3},
    ]))

    assert response.status_code == 201
    data = response.json()
    assert data["active"] is True
    assert data["hourly_rate"] == 45.5
    assert {(s["name"], s["experience_years"]) for s in data["skills"]} == {("Sanitär", 12), ("Heizung", 3)}


def test_create_worker_with_unknown_skill(client):
    response = client.post("/workers", json=worker_payload(skills=[{"id": 999, "experience_years": 1}]))

    assert response.status_code == 400
    assert "999" in response.json()["error"]
    assert client.get("/workers").json() == []


def test_create_worker_with_repeated_skill(client, skill_ids):
    skill = {"id": skill_ids["Elektrik"], "experience_years": 1}

    response = client.post("/workers", json=worker_payload(skills=[skill, skill]))

    assert response.status_code == 400


def test_create_worker_with_blank_optional_fields(client):
    response = client.post("/workers", json=worker_payload(phone="", email="", hourly_rate=None))

    assert response.status_code == 201
    data = response.json()
    assert data["phone"] is None
    assert data["email"] is None
    assert data["hourly_rate"] is None


def test_empty_string_hourly_rate_is_rejected(client, session_factory):
    response = client.post("/workers", json=worker_payload(hourly_rate=""))

    assert response.status_code == 400
    assert "hourly_rate" in response.json()["error"]
    assert count(session_factory, Worker) == 0


def test_list_workers_ordered_by_name(client):
    client.post("/workers", json=worker_payload(first_name="Eva", last_name="Zimmer"))
    client.post("/workers", json=worker_payload(first_name="Paul", last_name="Alt"))
    client.post("/workers", json=worker_payload(first_name="Emil", last_name="Alt"))

    response = client.get("/workers")

    names = [(w["last_name"], w["first_name"]) for w in response.json()]
    assert names == [("Alt", "Emil"), ("Alt", "Paul"), ("Zimmer", "Eva")]


def test_get_worker(client, skill_ids):
    created = client.post("/workers", json=worker_payload(skills=[{"id": skill_ids["Elektrik"]}])).json()

    response = client.get(f"/workers/{created['id']}")

    assert response.status_code == 200
    assert response.json()["skills"] == [{"id": skill_ids["Elektrik"], "name": "Elektrik", "experience_years": None}]


def test_get_worker_not_found(client):
    response = client.get("/workers/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Handwerker nicht gefunden"}


def test_update_worker_replaces_skills(client, skill_ids):
    created = client.post("/workers", json=worker_payload(skills=[
        {"id": skill_ids["Elektrik"], "experience_years": 5},
        {"id": skill_ids["Heizung"], "experience_years": 2},
    ])).json()

    response = client.put(f"/workers/{created['id']}", json=worker_payload(
        hourly_rate=50,
        skills=[
            {"id": skill_ids["Heizung"], "experience_years": 3},
            {"id": skill_ids["Sanitär"], "experience_years": 1},
        ],
    ))

    assert response.status_code == 200
    data = response.json()
    assert data["hourly_rate"] == 50
    assert {(s["name"], s["experience_years"]) for s in data["skills"]} == {("Heizung", 3), ("Sanitär", 1)}


def test_update_worker_with_unknown_skill_keeps_old_skills(client, skill_ids):
    created = client.post("/workers", json=worker_payload(skills=[{"id": skill_ids["Elektrik"]}])).json()

    response = client.put(f"/workers/{created['id']}", json=worker_payload(skills=[{"id": 999}]))

    assert response.status_code == 400
    skills = client.get(f"/workers/{created['id']}").json()["skills"]
    assert [s["name"] for s in skills] == ["Elektrik"]


def test_update_missing_worker(client):
    response = client.put("/workers/999", json=worker_payload())

    assert response.status_code == 404


def test_delete_worker_is_soft(client, skill_ids):
    created = client.post("/workers", json=worker_payload(skills=[{"id": skill_ids["Elektrik"]}])).json()

    response = client.delete(f"/workers/{created['id']}")

    assert response.status_code == 200
    assert "message" in response.json()
    assert client.get("/workers").json() == []
    kept = client.get(f"/workers/{created['id']}").json()
    assert kept["active"] is False
    assert [s["name"] for s in kept["skills"]] == ["Elektrik"]


def test_delete_missing_worker(client):
    response = client.delete("/workers/999")

    assert response.status_code == 404


def test_failed_create_writes_nothing(client, monkeypatch, session_factory):
    monkeypatch.setattr(worker_crud, "_build_links", lambda skills_in: [WorkerSkill(skill_id=999)])

    response = client.post("/workers", json=worker_payload())

    assert response.status_code == 500
    assert response.json() == {"error": "Fehler beim Erstellen des Handwerkers"}
    assert count(session_factory, Worker) == 0


def test_failed_update_keeps_worker_unchanged(client, skill_ids, monkeypatch):
    created = client.post("/workers", json=worker_payload(skills=[{"id": skill_ids["Elektrik"]}])).json()
    monkeypatch.setattr(worker_crud, "_build_links", lambda skills_in: [WorkerSkill(skill_id=999)])

    response = client.put(f"/workers/{created['id']}", json=worker_payload(first_name="Kurt"))

    assert response.status_code == 500
    assert response.json() == {"error": "Fehler beim Aktualisieren des Handwerkers"}
    kept = client.get(f"/workers/{created['id']}").json()
    assert kept["first_name"] == "Karl"
    assert [s["name"] for s in kept["skills"]] == ["Elektrik"]

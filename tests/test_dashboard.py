import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.database import get_db
from app.crud import worker as worker_crud
from main import app as fastapi_app


@pytest.fixture
def unreachable_db(client, tmp_path):
    """Point every request at a database file that cannot be opened."""
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'db.sqlite'}")
    factory = sessionmaker(bind=engine)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield
    engine.dispose()


def test_stats(client, create_property):
    create_property(address="Main St 1", units=[
        {"name": "U1", "type": "Wohnung", "size": 50, "status": "besetzt", "rent": 800},
        {"name": "U2", "type": "Wohnung", "size": 42.5},
    ])
    create_property(address="Main St 2", units=[
        {"name": "Laden", "type": "Gewerbe", "size": 120, "status": "besetzt", "rent": 1500.5},
    ])
    client.post("/workers", json={"first_name": "Karl", "last_name": "Huber"})
    gone = client.post("/workers", json={"first_name": "Eva", "last_name": "Zimmer"}).json()
    client.delete(f"/workers/{gone['id']}")

    response = client.get("/dashboard/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_properties"] == 2
    assert data["total_units"] == 3
    assert data["monthly_rent"] == 2300.5
    assert data["active_workers"] == 1
    assert len(data["vacant_units"]) == 1
    assert data["vacant_units"][0]["name"] == "U2"
    assert data["vacant_units"][0]["property_address"] == "Main St 1"
    assert data["vacant_units"][0]["size"] == 42.5


def test_stats_on_empty_database(client):
    response = client.get("/dashboard/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total_properties": 0,
        "total_units": 0,
        "monthly_rent": 0,
        "vacant_units": [],
        "active_workers": 0,
    }


def test_stats_when_database_unreachable(client, unreachable_db):
    response = client.get("/dashboard/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total_properties": 0,
        "total_units": 0,
        "monthly_rent": 0,
        "vacant_units": [],
        "active_workers": 0,
    }


def test_stats_with_one_failing_query(client, create_property, monkeypatch):
    create_property(units=[{"name": "U1", "type": "Wohnung"}])

    def broken_count(db):
        raise OperationalError("SELECT count(*) FROM workers", {}, Exception("table locked"))

    monkeypatch.setattr(worker_crud, "count_active", broken_count)

    response = client.get("/dashboard/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["active_workers"] == 0
    assert data["total_properties"] == 1
    assert data["total_units"] == 1


def test_diagnostic(client, create_property):
    create_property(units=[{"name": "U1", "type": "Wohnung"}])

    response = client.get("/api/diagnostic")

    assert response.status_code == 200
    data = response.json()
    assert data["server"]["status"] == "running"
    assert data["server"]["environment"] == "development"
    assert data["database"]["status"] == "ok"
    assert data["database"]["connected"] is True
    assert data["database"]["tables"] == {
        "properties": 1,
        "units": 1,
        "tenants": 0,
        "workers": 0,
        "documents": 0,
    }


def test_diagnostic_when_database_unreachable(client, unreachable_db):
    response = client.get("/api/diagnostic")

    assert response.status_code == 200
    database = response.json()["database"]
    assert database["status"] == "error"
    assert database["connected"] is False


def test_cors_test(client):
    response = client.get("/api/cors-test")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_health_when_database_unreachable(client, unreachable_db):
    response = client.get("/health")

    assert response.status_code == 503

import os

# app.database refuses to start without a URL
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db, enable_sqlite_foreign_keys
from app.models import DocumentCategory, Skill
from app.services.document import document_service
from app.services.storage import DocumentStorage
from main import app as fastapi_app

CATEGORIES = ["Mietvertrag", "Nebenkostenabrechnung", "Wartungsvertrag", "Versicherung", "Sonstiges"]
SKILLS = ["Elektrik", "Heizung", "Sanitär"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with factory() as db:
        db.add_all([DocumentCategory(name=name) for name in CATEGORIES])
        db.add_all([Skill(name=name) for name in SKILLS])
        db.commit()
    return factory


@pytest.fixture
def storage(tmp_path, monkeypatch):
    storage = DocumentStorage(tmp_path / "uploads")
    monkeypatch.setattr(document_service, "storage", storage)
    return storage


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def category_id(session_factory):
    with session_factory() as db:
        stmt = select(DocumentCategory.id).where(DocumentCategory.name == "Mietvertrag")
        return db.execute(stmt).scalar_one()


@pytest.fixture
def skill_ids(session_factory):
    with session_factory() as db:
        return {skill.name: skill.id for skill in db.execute(select(Skill)).scalars().all()}


@pytest.fixture
def create_property(client):
    """POST a property and return the response body."""
    def _create(units=None, address="Hauptstraße 1", property_type="Mehrfamilienhaus"):
        response = client.post("/properties", json={
            "address": address,
            "property_type": property_type,
            "units": units or [],
        })
        assert response.status_code == 201, response.text
        return response.json()

    return _create

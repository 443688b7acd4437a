import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConflictError
from app.models import Tenant, Unit
from app.schemas.tenant import TenantCreate
from app.services.tenant import tenant_service


@pytest.fixture
def units(create_property):
    data = create_property(address="Lindenweg 3", units=[
        {"name": "EG links", "type": "Wohnung", "size": 60},
        {"name": "EG rechts", "type": "Wohnung", "size": 55},
    ])
    return [unit["id"] for unit in data["units"]]


def unit_status(session_factory, unit_id):
    with session_factory() as db:
        return db.get(Unit, unit_id).status.value


def tenant_payload(**overrides):
    payload = {
        "first_name": "Anna",
        "last_name": "Berger",
        "email": "anna@example.com",
        "phone": "0170 1234567",
        "rent_start_date": "2024-01-01",
    }
    payload.update(overrides)
    return payload


def test_create_tenant_occupies_unit(client, units, session_factory):
    response = client.post("/tenants", json=tenant_payload(unit_id=units[0]))

    assert response.status_code == 201
    data = response.json()
    assert data["active"] is True
    assert data["unit_name"] == "EG links"
    assert data["unit_type"] == "Wohnung"
    assert data["property_address"] == "Lindenweg 3"
    assert data["property_type"] == "Mehrfamilienhaus"
    assert unit_status(session_factory, units[0]) == "besetzt"


def test_create_tenant_without_unit(client):
    response = client.post("/tenants", json=tenant_payload(email="", unit_id=None))

    assert response.status_code == 201
    data = response.json()
    assert data["unit_id"] is None
    assert data["email"] is None
    assert data["unit_name"] is None


def test_empty_string_unit_id_is_rejected(client, session_factory):
    response = client.post("/tenants", json=tenant_payload(unit_id=""))

    assert response.status_code == 400
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Tenant)).scalar_one() == 0


def test_create_tenant_with_invalid_email(client):
    response = client.post("/tenants", json=tenant_payload(email="keine-mail"))

    assert response.status_code == 400


def test_create_tenant_on_unknown_unit(client):
    response = client.post("/tenants", json=tenant_payload(unit_id=999))

    assert response.status_code == 400


def test_second_active_tenant_on_unit_is_rejected(client, units, session_factory):
    first = client.post("/tenants", json=tenant_payload(unit_id=units[0])).json()

    response = client.post("/tenants", json=tenant_payload(first_name="Bernd", last_name="Schulz", unit_id=units[0]))

    assert response.status_code == 400
    assert response.json() == {"error": "Diese Wohneinheit hat bereits einen aktiven Mieter"}
    assert unit_status(session_factory, units[0]) == "besetzt"
    with session_factory() as db:
        occupants = db.execute(
            select(Tenant).where(Tenant.unit_id == units[0], Tenant.active.is_(True))
        ).scalars().all()
        assert [tenant.id for tenant in occupants] == [first["id"]]


def test_active_unit_index_rejects_duplicate_past_the_check(session_factory, units, monkeypatch):
    with session_factory() as db:
        db.add(Tenant(first_name="Anna", last_name="Berger", unit_id=units[0], active=True))
        db.commit()

    # a concurrent writer that passed the occupancy check before the first commit
    monkeypatch.setattr(tenant_service.crud, "get_active_for_unit", lambda **kwargs: None)
    with session_factory() as db:
        with pytest.raises(ConflictError):
            tenant_service.create_tenant(db=db, tenant_data=TenantCreate(
                first_name="Bernd", last_name="Schulz", unit_id=units[0]
            ))

    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Tenant)).scalar_one() == 1


def test_list_tenants_ordered_by_name(client, units):
    client.post("/tenants", json=tenant_payload(first_name="Zoe", last_name="Adler"))
    client.post("/tenants", json=tenant_payload(first_name="Anna", last_name="Berger", unit_id=units[0]))
    client.post("/tenants", json=tenant_payload(first_name="Alex", last_name="Adler"))

    response = client.get("/tenants")

    assert response.status_code == 200
    names = [(t["last_name"], t["first_name"]) for t in response.json()]
    assert names == [("Adler", "Alex"), ("Adler", "Zoe"), ("Berger", "Anna")]


def test_get_tenant_not_found(client):
    response = client.get("/tenants/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Mieter nicht gefunden"}


def test_moving_tenant_frees_previous_unit(client, units, session_factory):
    tenant = client.post("/tenants", json=tenant_payload(unit_id=units[0])).json()

    response = client.put(f"/tenants/{tenant['id']}", json=tenant_payload(unit_id=units[1]))

    assert response.status_code == 200
    assert response.json()["unit_name"] == "EG rechts"
    assert unit_status(session_factory, units[0]) == "verfügbar"
    assert unit_status(session_factory, units[1]) == "besetzt"


def test_deactivating_tenant_frees_unit(client, units, session_factory):
    tenant = client.post("/tenants", json=tenant_payload(unit_id=units[0])).json()

    response = client.put(
        f"/tenants/{tenant['id']}",
        json=tenant_payload(unit_id=units[0], active=False, rent_end_date="2024-12-31"),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["active"] is False
    assert data["rent_end_date"] == "2024-12-31"
    assert unit_status(session_factory, units[0]) == "verfügbar"


def test_update_into_occupied_unit_is_rejected(client, units, session_factory):
    client.post("/tenants", json=tenant_payload(unit_id=units[0]))
    other = client.post("/tenants", json=tenant_payload(first_name="Bernd", unit_id=units[1])).json()

    response = client.put(f"/tenants/{other['id']}", json=tenant_payload(first_name="Bernd", unit_id=units[0]))

    assert response.status_code == 400
    # nothing changed for the rejected tenant
    assert client.get(f"/tenants/{other['id']}").json()["unit_id"] == units[1]
    assert unit_status(session_factory, units[1]) == "besetzt"


def test_update_keeps_unit_of_active_tenant(client, units, session_factory):
    tenant = client.post("/tenants", json=tenant_payload(unit_id=units[0])).json()

    response = client.put(f"/tenants/{tenant['id']}", json=tenant_payload(phone="030 987654", unit_id=units[0]))

    assert response.status_code == 200
    assert response.json()["phone"] == "030 987654"
    assert unit_status(session_factory, units[0]) == "besetzt"


def test_update_missing_tenant(client, units, session_factory):
    response = client.put("/tenants/999", json=tenant_payload(unit_id=units[0]))

    assert response.status_code == 404
    assert unit_status(session_factory, units[0]) == "verfügbar"


def test_failed_create_leaves_unit_available(client, units, monkeypatch, session_factory):
    def broken_status(db, *, db_obj, status):
        raise OperationalError("UPDATE units", {}, Exception("database is locked"))

    monkeypatch.setattr(tenant_service.unit_crud, "set_status", broken_status)

    response = client.post("/tenants", json=tenant_payload(unit_id=units[0]))

    assert response.status_code == 500
    assert response.json() == {"error": "Fehler beim Erstellen des Mieters"}
    assert unit_status(session_factory, units[0]) == "verfügbar"
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Tenant)).scalar_one() == 0

import importlib

from sqlalchemy import select, func

from app.models import Property, Tenant, Unit

property_crud_module = importlib.import_module("app.crud.property")


OCCUPIED_UNIT = {"name": "U1", "type": "Wohnung", "size": 50, "status": "besetzt", "rent": 800}


def test_create_property_with_units(create_property):
    data = create_property(units=[
        OCCUPIED_UNIT,
        {"name": "U2", "type": "Wohnung", "size": 40, "status": "verfügbar", "rent": 600},
    ])

    assert data["address"] == "Hauptstraße 1"
    assert [unit["name"] for unit in data["units"]] == ["U1", "U2"]
    assert data["units"][0]["rent"] == 800
    # rent only counts for occupied units
    assert data["units"][1]["rent"] == 0
    assert data["total_rent"] == 800


def test_unit_defaults_size_and_rent_to_zero(create_property):
    data = create_property(units=[{"name": "Keller", "type": "Lager", "status": "besetzt"}])

    unit = data["units"][0]
    assert unit["size"] == 0
    assert unit["rent"] == 0
    assert unit["status"] == "besetzt"


def test_negative_rent_is_rejected(client):
    response = client.post("/properties", json={
        "address": "Hauptstraße 1",
        "property_type": "Mehrfamilienhaus",
        "units": [{"name": "U1", "type": "Wohnung", "rent": -5}],
    })

    assert response.status_code == 400
    assert "rent" in response.json()["error"]


def test_empty_string_size_is_rejected(client):
    response = client.post("/properties", json={
        "address": "Hauptstraße 1",
        "property_type": "Mehrfamilienhaus",
        "units": [{"name": "U1", "type": "Wohnung", "size": ""}],
    })

    assert response.status_code == 400


def test_missing_address_is_rejected(client):
    response = client.post("/properties", json={"property_type": "Mehrfamilienhaus"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Ungültige Eingabe")


def test_list_properties(client, create_property):
    create_property(address="Main St 1", units=[OCCUPIED_UNIT])
    create_property(address="Main St 2")

    response = client.get("/properties")

    assert response.status_code == 200
    data = response.json()
    assert [p["address"] for p in data] == ["Main St 1", "Main St 2"]
    assert data[0]["total_rent"] == 800
    assert data[1]["units"] == []


def test_get_property_not_found(client):
    response = client.get("/properties/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Immobilie nicht gefunden"}


def test_get_property_with_invalid_id(client):
    response = client.get("/properties/abc")

    assert response.status_code == 400
    assert response.json() == {"error": "Ungültige ID"}


def test_unit_becoming_available_drops_rent(client, create_property):
    created = create_property(
        address="Main St 1", property_type="Einfamilienhaus", units=[OCCUPIED_UNIT]
    )
    assert created["units"][0]["rent"] == 800

    response = client.put(f"/properties/{created['id']}", json={
        "address": "Main St 1",
        "property_type": "Einfamilienhaus",
        "units": [dict(OCCUPIED_UNIT, status="verfügbar")],
    })
    assert response.status_code == 200

    fetched = client.get(f"/properties/{created['id']}").json()
    assert fetched["units"][0]["status"] == "verfügbar"
    assert fetched["units"][0]["rent"] == 0
    assert fetched["total_rent"] == 0


def test_update_replaces_unit_set(client, create_property, session_factory):
    created = create_property(units=[OCCUPIED_UNIT, {"name": "U2", "type": "Wohnung"}])

    response = client.put(f"/properties/{created['id']}", json={
        "address": "Nebenstraße 5",
        "property_type": "Mehrfamilienhaus",
        "units": [{"name": "U3", "type": "Büro", "size": 80}],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "Nebenstraße 5"
    assert [unit["name"] for unit in data["units"]] == ["U3"]
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Unit)).scalar_one() == 1


def test_update_missing_property_touches_nothing(client, create_property, session_factory):
    create_property(units=[OCCUPIED_UNIT])

    response = client.put("/properties/999", json={
        "address": "Nirgendwo 1",
        "property_type": "Mehrfamilienhaus",
        "units": [],
    })

    assert response.status_code == 404
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Unit)).scalar_one() == 1


def test_delete_property_cascades_to_units(client, create_property, session_factory):
    created = create_property(units=[OCCUPIED_UNIT, {"name": "U2", "type": "Wohnung"}])
    tenant = client.post("/tenants", json={
        "first_name": "Anna",
        "last_name": "Berger",
        "unit_id": created["units"][0]["id"],
    }).json()

    response = client.delete(f"/properties/{created['id']}")

    assert response.status_code == 200
    assert "message" in response.json()
    assert client.get(f"/properties/{created['id']}").status_code == 404
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Property)).scalar_one() == 0
        assert db.execute(select(func.count()).select_from(Unit)).scalar_one() == 0
        # the tenant survives without a unit
        assert db.get(Tenant, tenant["id"]).unit_id is None


def test_delete_missing_property(client):
    response = client.delete("/properties/999")

    assert response.status_code == 404


def nameless_unit(build_unit):
    def _build(unit_in):
        unit = build_unit(unit_in)
        unit.name = None
        return unit

    return _build


def test_failed_unit_insert_rolls_back_property(client, monkeypatch, session_factory):
    monkeypatch.setattr(property_crud_module, "build_unit", nameless_unit(property_crud_module.build_unit))

    response = client.post("/properties", json={
        "address": "Hauptstraße 1",
        "property_type": "Mehrfamilienhaus",
        "units": [OCCUPIED_UNIT],
    })

    assert response.status_code == 500
    assert response.json() == {"error": "Fehler beim Erstellen"}
    with session_factory() as db:
        assert db.execute(select(func.count()).select_from(Property)).scalar_one() == 0
        assert db.execute(select(func.count()).select_from(Unit)).scalar_one() == 0


def test_failed_update_keeps_old_units(client, create_property, monkeypatch):
    created = create_property(units=[OCCUPIED_UNIT])
    monkeypatch.setattr(property_crud_module, "build_unit", nameless_unit(property_crud_module.build_unit))

    response = client.put(f"/properties/{created['id']}", json={
        "address": "Nebenstraße 5",
        "property_type": "Mehrfamilienhaus",
        "units": [{"name": "Neu", "type": "Wohnung"}],
    })

    assert response.status_code == 500
    assert response.json() == {"error": "Fehler beim Aktualisieren"}
    kept = client.get(f"/properties/{created['id']}").json()
    assert kept["address"] == "Hauptstraße 1"
    assert [unit["name"] for unit in kept["units"]] == ["U1"]
    assert kept["units"][0]["id"] == created["units"][0]["id"]

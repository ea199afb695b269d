import pytest
from fastapi.testclient import TestClient

from campus_coffee.main import app
from campus_coffee.routers.pos import get_pos_service
from campus_coffee.services.pos_service import PosService
from tests.helpers import RADA_NODE_ID, RADA_TAGS, DummyOsmClient, make_node

POS_BODY = {
    "name": "Schmelzpunkt",
    "description": "Great waffles",
    "type": "CAFE",
    "campus": "ALTSTADT",
    "street": "Hauptstraße",
    "house_number": "90",
    "postal_code": 69117,
    "city": "Heidelberg",
}


@pytest.fixture
def client(store, rada_node):
    incomplete = make_node({k: v for k, v in RADA_TAGS.items() if k != "addr:postcode"}, node_id=2)
    service = PosService(store, DummyOsmClient({RADA_NODE_ID: rada_node, 2: incomplete}))
    app.dependency_overrides[get_pos_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_list_empty(client):
    resp = client.get("/api/pos")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_and_get(client):
    resp = client.post("/api/pos", json=POS_BODY)
    assert resp.status_code == 201
    created = resp.json()
    assert created["id"] == 1
    assert created["created_at"].endswith("Z")

    resp = client.get(f"/api/pos/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


def test_create_with_id_rejected(client):
    resp = client.post("/api/pos", json=dict(POS_BODY, id=3))
    assert resp.status_code == 400


def test_create_invalid_body_rejected(client):
    resp = client.post("/api/pos", json=dict(POS_BODY, type="PUB"))
    assert resp.status_code == 422


@pytest.mark.parametrize("field, value", [
    ("name", "   "),
    ("name", ""),
    ("street", "\t"),
    ("house_number", " "),
    ("city", "  "),
])
def test_create_blank_text_field_rejected(client, field, value):
    resp = client.post("/api/pos", json=dict(POS_BODY, **{field: value}))

    assert resp.status_code == 422
    assert client.get("/api/pos").json() == []


def test_update_blank_name_rejected(client):
    created = client.post("/api/pos", json=POS_BODY).json()

    resp = client.put(f"/api/pos/{created['id']}", json=dict(POS_BODY, name="   "))

    assert resp.status_code == 422
    assert client.get(f"/api/pos/{created['id']}").json()["name"] == "Schmelzpunkt"


@pytest.mark.parametrize("postal_code", [99999999999, 2**31, -1])
def test_create_out_of_range_postal_code_rejected(client, postal_code):
    resp = client.post("/api/pos", json=dict(POS_BODY, postal_code=postal_code))
    assert resp.status_code == 422


def test_create_overlong_house_number_rejected(client):
    resp = client.post("/api/pos", json=dict(POS_BODY, house_number="1;3;5;7;9;11;13;15;17;19;21;23;25"))
    assert resp.status_code == 422


def test_create_duplicate_name_conflict(client):
    client.post("/api/pos", json=POS_BODY)

    resp = client.post("/api/pos", json=POS_BODY)

    assert resp.status_code == 409
    assert resp.json()["name"] == "Schmelzpunkt"


def test_get_unknown(client):
    resp = client.get("/api/pos/42")
    assert resp.status_code == 404
    assert resp.json()["pos_id"] == 42


def test_update(client):
    created = client.post("/api/pos", json=POS_BODY).json()

    resp = client.put(f"/api/pos/{created['id']}", json=dict(POS_BODY, city="Mannheim"))

    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert resp.json()["city"] == "Mannheim"


def test_update_unknown(client):
    resp = client.put("/api/pos/42", json=POS_BODY)
    assert resp.status_code == 404


def test_update_id_mismatch(client):
    created = client.post("/api/pos", json=POS_BODY).json()

    resp = client.put(f"/api/pos/{created['id']}", json=dict(POS_BODY, id=created["id"] + 1))

    assert resp.status_code == 400


def test_import_from_osm(client):
    resp = client.post(f"/api/pos/import/osm/{RADA_NODE_ID}")

    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Rada Coffee & Rösterei"
    assert body["type"] == "CAFE"
    assert body["postal_code"] == 69117


def test_import_unknown_node(client):
    resp = client.post("/api/pos/import/osm/999")
    assert resp.status_code == 404
    assert resp.json()["node_id"] == 999


def test_import_incomplete_node(client):
    resp = client.post("/api/pos/import/osm/2")
    assert resp.status_code == 422
    assert resp.json()["fields"] == ["addr:postcode"]


def test_import_node_with_overlong_house_number(client, store):
    tags = dict(RADA_TAGS, **{"addr:housenumber": "1;3;5;7;9;11;13;15;17;19;21;23;25"})
    app.dependency_overrides[get_pos_service] = lambda: PosService(store, DummyOsmClient({3: make_node(tags, node_id=3)}))

    resp = client.post("/api/pos/import/osm/3")

    assert resp.status_code == 422
    assert resp.json()["fields"] == ["addr:housenumber"]


def test_import_twice_conflicts(client):
    assert client.post(f"/api/pos/import/osm/{RADA_NODE_ID}").status_code == 201
    assert client.post(f"/api/pos/import/osm/{RADA_NODE_ID}").status_code == 409


def test_clear(client):
    client.post("/api/pos", json=POS_BODY)

    resp = client.delete("/api/pos")

    assert resp.status_code == 204
    assert client.get("/api/pos").json() == []


def test_metrics_endpoint(client):
    client.post(f"/api/pos/import/osm/{RADA_NODE_ID}")

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "campus_coffee_pos_imports_total" in resp.text

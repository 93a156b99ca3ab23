import pytest
from fastapi.testclient import TestClient

from conference_pricing.api.main import app, get_engine
from conference_pricing.config.settings import Settings
from conference_pricing.engine import PricingEngine


@pytest.fixture
def client():
    app.dependency_overrides[get_engine] = lambda: PricingEngine(Settings(default_vat_percentage=20))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_quote(client, sample_pricing):
    response = client.post("/pricing/quote", json={
        "pricing": sample_pricing,
        "now": "2026-02-15T12:00:00Z",
        "accompanying_persons": 2,
        "add_on_ids": ["dinner"],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 477.5
    assert data["resolution"]["tier"] == "early_bird"
    assert data["resolution"]["next_tier"] == "regular"
    assert data["registration_fee"]["gross_amount"] == 187.5
    assert data["message"] == "Early Bird pricing ends March 01, 2026; Regular pricing applies afterwards"


def test_quote_uses_organisation_vat(client):
    response = client.post("/pricing/quote", json={
        "pricing": {"regular": {"amount": 150}},
        "now": "2026-04-01T00:00:00Z",
    })

    assert response.json()["total"] == 180.0


def test_unknown_category_is_unprocessable(client, sample_pricing):
    response = client.post("/pricing/quote", json={
        "pricing": sample_pricing,
        "now": "2026-02-15T12:00:00Z",
        "category": "sponsor",
    })

    assert response.status_code == 422
    assert response.json()["kind"] == "UNKNOWN_CATEGORY"


def test_invalid_configuration_is_unprocessable(client, sample_pricing):
    sample_pricing["vatPercentage"] = 150
    response = client.post("/pricing/quote", json={"pricing": sample_pricing})

    assert response.status_code == 422
    assert response.json()["kind"] == "INVALID_CONFIGURATION"


@pytest.mark.parametrize("pricing", [
    {"regular": {"amount": "lots"}},
    {"earlyBird": {"amount": 100, "deadline": "2026-13-01"}},
    {"vatPercentage": "twenty"},
])
def test_malformed_values_are_unprocessable(client, pricing):
    response = client.post("/pricing/quote", json={"pricing": pricing})

    assert response.status_code == 422
    assert response.json()["kind"] == "INVALID_CONFIGURATION"


def test_fee_type_without_id_is_bad_request(client):
    response = client.post("/pricing/quote", json={"pricing": {"customFeeTypes": [{"name": "VIP"}]}})
    assert response.status_code == 400


def test_price_matrix(client, sample_pricing):
    response = client.post("/pricing/matrix", json={"pricing": sample_pricing})

    assert response.status_code == 200
    data = response.json()
    assert data["currency"] == "EUR"
    assert [row["Category"] for row in data["rows"]] == ["standard", "student", "vip"]


def test_validate_form(client, form_fields, valid_payload):
    valid_payload["dietary"] = "C"
    response = client.post("/forms/validate", json={"fields": form_fields, "payload": valid_payload})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["errors"] == [{"field_id": "f1", "field_name": "dietary", "message": "Must be one of: A, B"}]


def test_form_defaults(client, form_fields):
    response = client.post("/forms/defaults", json={"fields": form_fields})
    assert response.json()["custom_fields"]["terms"] is False


def test_unsupported_field_type(client):
    response = client.post("/forms/validate", json={
        "fields": [{"id": "x", "name": "cv", "type": "file"}],
        "payload": {},
    })

    assert response.status_code == 422
    assert response.json()["kind"] == "INVALID_CONFIGURATION"


def test_move(client):
    items = [{"id": f"i{k}", "order": k} for k in range(4)]
    response = client.post("/ordering/move", json={"items": items, "from_index": 3, "to_index": 0})

    assert [item["id"] for item in response.json()["items"]] == ["i3", "i0", "i1", "i2"]


def test_move_out_of_range(client):
    response = client.post("/ordering/move", json={"items": [{"id": "a"}], "from_index": 0, "to_index": 5})

    assert response.status_code == 422
    assert response.json()["kind"] == "INDEX_OUT_OF_RANGE"

import pytest

from conference_pricing.config.settings import Settings
from conference_pricing.engine import PricingConfig, PricingEngine


@pytest.fixture
def sample_pricing():
    """Pricing as the admin editor sends it (camelCase, ISO strings)."""
    return {
        "currency": "EUR",
        "vatPercentage": 25,
        "pricesIncludeVat": False,
        "earlyBird": {"amount": 150, "deadline": "2026-03-01"},
        "regular": {"amount": 200},
        "late": {"amount": 250, "startDate": "2026-05-01"},
        "student": {"earlyBird": 100, "regular": 150, "late": 180},
        "accompanyingPersonPrice": 100,
        "customFeeTypes": [
            {"id": "vip", "name": "VIP Member", "earlyBird": 300, "regular": 350, "late": 400},
        ],
        "customPricingFields": [
            {"id": "dinner", "name": "Gala dinner", "value": 40, "description": "Friday evening"},
        ],
    }


@pytest.fixture
def config(sample_pricing):
    return PricingConfig.from_dict(sample_pricing)


@pytest.fixture
def settings():
    """Settings with no organisation defaults, independent of the environment."""
    return Settings()


@pytest.fixture
def engine(settings):
    return PricingEngine(settings)


@pytest.fixture
def form_fields():
    """A registration form mixing every data type with one separator."""
    return [
        {"id": "f1", "name": "dietary", "type": "select", "label": "Diet", "required": True, "options": ["A", "B"]},
        {"id": "sep1", "name": "", "type": "separator", "label": "Co-author"},
        {"id": "f2", "name": "organisation", "type": "text", "validation": {"minLength": 2, "maxLength": 10}},
        {"id": "f3", "name": "email", "type": "email", "required": True},
        {"id": "f4", "name": "age", "type": "number", "validation": {"min": 18, "max": 99}},
        {"id": "f5", "name": "arrival", "type": "date"},
        {"id": "f6", "name": "terms", "type": "checkbox", "required": True},
        {"id": "f7", "name": "phone", "type": "tel"},
    ]


@pytest.fixture
def valid_payload():
    return {
        "dietary": "A",
        "organisation": "ACME",
        "email": "ana@example.org",
        "age": "42",
        "arrival": "2026-05-01",
        "terms": True,
        "phone": "",
    }

from datetime import date

import pytest

from conference_pricing.config.settings import Settings
from conference_pricing.engine import PricingConfig, PricingEngine, QuoteRequest, Tier
from conference_pricing.errors import UnknownCategoryError


def test_full_quote(engine, config):
    """Early bird registration with two accompanying persons and the dinner."""
    request = QuoteRequest(
        now=date(2026, 2, 15),
        accompanying_persons=2,
        add_on_ids=["dinner"],
    )
    quote = engine.quote(request, config)

    assert quote.tier == Tier.EARLY_BIRD
    assert quote.currency == "EUR"
    assert [line.code for line in quote.lines] == ["standard", "accompanying_person", "dinner"]
    assert [line.extended_price for line in quote.lines] == [187.5, 250.0, 40.0]
    assert quote.total == 477.5
    assert quote.registration_fee.net_amount == 150.0


def test_quote_trace_lists_every_step(engine, config):
    quote = engine.quote(QuoteRequest(now=date(2026, 2, 15)), config)
    trace = quote.get_trace_text()

    assert "• Tier: Active tier is Early Bird = early_bird" in trace
    assert "Deadline" in trace
    assert "Registration" in trace
    assert trace.splitlines()[-1] == "• Total: 1 line(s) = 187.50 EUR"


def test_late_quote_has_no_deadline(engine, config):
    quote = engine.quote(QuoteRequest(now=date(2026, 6, 1), category="vip"), config)

    assert quote.tier == Tier.LATE
    assert quote.resolution.deadline is None
    assert quote.total == 500.0
    assert not any(step.step == "Deadline" for step in quote.trace)


def test_unknown_add_on_raises(engine, config):
    with pytest.raises(UnknownCategoryError):
        engine.quote(QuoteRequest(now=date(2026, 2, 15), add_on_ids=["spa"]), config)


def test_unknown_category_raises(engine, config):
    with pytest.raises(UnknownCategoryError):
        engine.quote(QuoteRequest(now=date(2026, 2, 15), category="sponsor"), config)


def test_default_vat_comes_from_settings():
    config = PricingConfig.from_dict({"regular": {"amount": 150}})
    engine = PricingEngine(Settings(default_vat_percentage=20))

    quote = engine.quote(QuoteRequest(now=date(2026, 4, 1)), config)
    assert quote.total == 180.0


def test_request_vat_fallback_wins_over_settings():
    config = PricingConfig.from_dict({"regular": {"amount": 100}})
    engine = PricingEngine(Settings(default_vat_percentage=20))

    assert engine.vat_fallback(QuoteRequest(now=date(2026, 4, 1), vat_fallback=10)) == 10
    assert engine.quote(QuoteRequest(now=date(2026, 4, 1), vat_fallback=10), config).total == 110.0


def test_late_window_from_settings():
    config = PricingConfig.from_dict({
        "vatPercentage": 25,
        "earlyBird": {"amount": 150, "deadline": "2026-03-01"},
        "regular": {"amount": 200},
        "late": {"amount": 250},
    })
    request = QuoteRequest(now=date(2026, 5, 20), conference_start=date(2026, 5, 30))

    assert PricingEngine(Settings()).quote(request, config).tier == Tier.REGULAR

    quote = PricingEngine(Settings(late_window_days=14)).quote(request, config)
    assert quote.tier == Tier.LATE
    assert quote.total == 312.5

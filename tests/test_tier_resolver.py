from datetime import date, datetime, timedelta, timezone

import pytest

from conference_pricing.engine.models import TIER_ORDER, PricingConfig, Tier
from conference_pricing.engine.tier_resolver import (
    effective_late_start,
    effective_regular_start,
    resolve_tier,
    tier_windows,
)

UTC = timezone.utc


def make_config(deadline=None, regular_start=None, late_start=None):
    return PricingConfig.from_dict({
        "earlyBird": {"amount": 150, "deadline": deadline},
        "regular": {"amount": 200, "startDate": regular_start},
        "late": {"amount": 250, "startDate": late_start},
    })


def test_early_bird_before_deadline():
    """Before the deadline early bird is active and regular follows."""
    config = make_config(deadline="2026-03-01")
    resolution = resolve_tier(date(2026, 2, 15), config)

    assert resolution.tier == Tier.EARLY_BIRD
    assert resolution.next_tier == Tier.REGULAR
    assert resolution.deadline == datetime(2026, 3, 1, 23, 59, 59, 999999, tzinfo=UTC)


def test_deadline_day_is_still_early_bird():
    config = make_config(deadline="2026-03-01")
    assert resolve_tier(datetime(2026, 3, 1, 18, 0), config).tier == Tier.EARLY_BIRD


def test_regular_defaults_to_day_after_deadline():
    """No regular start date: regular starts the day after the deadline."""
    config = make_config(deadline="2026-03-01")

    assert resolve_tier(date(2026, 3, 2), config).tier == Tier.REGULAR
    assert effective_regular_start(config) == datetime(2026, 3, 2, tzinfo=UTC)


def test_no_deadline_never_early_bird():
    config = make_config()

    assert resolve_tier(date(2020, 1, 1), config).tier == Tier.REGULAR
    assert effective_regular_start(config) is None
    assert effective_regular_start(config, conference_start=date(2026, 6, 1)) == datetime(2026, 6, 1, tzinfo=UTC)


def test_late_starts_on_explicit_date():
    config = make_config(deadline="2026-03-01", late_start="2026-05-01")

    assert resolve_tier(date(2026, 5, 1), config).tier == Tier.LATE

    before = resolve_tier(date(2026, 4, 30), config)
    assert before.tier == Tier.REGULAR
    assert before.next_tier == Tier.LATE
    assert before.deadline == datetime(2026, 4, 30, 23, 59, 59, 999999, tzinfo=UTC)


def test_late_never_entered_without_start_date():
    config = make_config(deadline="2026-03-01")
    resolution = resolve_tier(date(2030, 1, 1), config, conference_start=date(2026, 6, 1))

    assert resolution.tier == Tier.REGULAR
    assert resolution.next_tier is None


def test_future_regular_start_does_not_fall_through_to_late():
    """Between the deadline and a later regular start the tier is still regular."""
    config = make_config(deadline="2026-03-01", regular_start="2026-04-01", late_start="2026-05-01")
    assert resolve_tier(date(2026, 3, 15), config).tier == Tier.REGULAR


def test_late_window_never_wraps_before_regular():
    config = make_config(deadline="2026-03-01", regular_start="2026-04-01", late_start="2026-03-10")

    assert effective_late_start(config) == datetime(2026, 4, 1, tzinfo=UTC)
    assert resolve_tier(date(2026, 3, 15), config).tier == Tier.REGULAR
    assert resolve_tier(date(2026, 4, 2), config).tier == Tier.LATE


def test_implicit_late_window_is_opt_in():
    config = make_config(deadline="2026-03-01")
    conference_start = date(2026, 5, 30)

    assert resolve_tier(date(2026, 5, 20), config, conference_start).tier == Tier.REGULAR
    assert resolve_tier(date(2026, 5, 20), config, conference_start, late_window_days=14).tier == Tier.LATE
    assert resolve_tier(date(2026, 5, 10), config, conference_start, late_window_days=14).tier == Tier.REGULAR


def test_utc_deadline_strings_and_naive_now():
    config = make_config(deadline="2026-03-01T23:59:59Z")

    assert resolve_tier(datetime(2026, 3, 1, 23, 0, tzinfo=UTC), config).tier == Tier.EARLY_BIRD
    assert resolve_tier(datetime(2026, 3, 2), config).tier == Tier.REGULAR


def test_windows_are_totally_ordered():
    config = make_config(deadline="2026-03-01", regular_start="2026-03-02", late_start="2026-05-01")
    windows = tier_windows(config)

    early_end = windows[Tier.EARLY_BIRD][1]
    regular_start, regular_end = windows[Tier.REGULAR]
    late_start = windows[Tier.LATE][0]

    assert early_end < regular_start
    assert regular_start <= regular_end < late_start


def test_tier_sequence_is_monotone_over_time():
    """Walking forward a day at a time, tiers never go backwards."""
    config = make_config(deadline="2026-03-01", late_start="2026-05-01")
    day = date(2026, 1, 1)
    last_index = 0
    seen = set()

    while day < date(2026, 7, 1):
        tier = resolve_tier(day, config).tier
        index = TIER_ORDER.index(tier)
        assert index >= last_index, f"Tier went backwards on {day}"
        last_index = index
        seen.add(tier)
        day += timedelta(days=1)

    assert seen == set(TIER_ORDER)


@pytest.mark.parametrize("now", [date(2025, 1, 1), date(2026, 3, 1), date(2026, 4, 15), date(2027, 1, 1)])
def test_always_returns_a_tier(now):
    config = make_config(deadline="2026-03-01", late_start="2026-05-01")
    assert resolve_tier(now, config).tier in TIER_ORDER

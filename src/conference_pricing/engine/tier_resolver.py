"""
Tier Resolver - maps a point in time onto the active pricing tier.

Resolution order:
1. Early bird while ``now`` is on or before the early-bird deadline
2. Late once ``now`` reaches the late start date (explicit, or implicit
   when a late window before the conference is configured)
3. Regular otherwise
"""
from datetime import datetime, timedelta
from typing import Optional

from .models import Moment, PricingConfig, Tier, TierResolution, as_utc


def effective_regular_start(
    config: PricingConfig,
    conference_start: Optional[Moment] = None,
) -> Optional[datetime]:
    """
    When regular pricing begins.

    Explicit start date first, then the day after the early-bird deadline,
    then the conference start. None means "since forever".
    """
    if config.regular.start_date is not None:
        return as_utc(config.regular.start_date)
    deadline = config.early_bird.deadline
    if deadline is not None:
        if isinstance(deadline, datetime):
            return as_utc(deadline) + timedelta(days=1)
        return as_utc(deadline + timedelta(days=1))
    if conference_start is not None:
        return as_utc(conference_start)
    return None


def effective_late_start(
    config: PricingConfig,
    conference_start: Optional[Moment] = None,
    late_window_days: Optional[int] = None,
) -> Optional[datetime]:
    """
    When late pricing begins, or None if it never starts on its own.

    Late pricing needs an explicit start date. ``late_window_days`` opts in
    to starting it that many days before the conference instead. The late
    window is never allowed to open before regular pricing does.
    """
    if config.late.start_date is not None:
        late_start = as_utc(config.late.start_date)
    elif late_window_days is not None and conference_start is not None:
        late_start = as_utc(conference_start) - timedelta(days=late_window_days)
    else:
        return None

    regular_start = effective_regular_start(config, conference_start)
    if regular_start is not None and late_start < regular_start:
        return regular_start
    return late_start


def resolve_tier(
    now: Moment,
    config: PricingConfig,
    conference_start: Optional[Moment] = None,
    late_window_days: Optional[int] = None,
) -> TierResolution:
    """Resolve the tier active at ``now``. Always returns a tier."""
    current = as_utc(now)

    deadline = config.early_bird.deadline
    if deadline is not None:
        # A date-only deadline covers the whole day
        deadline_end = as_utc(deadline, end_of_day=True)
        if current <= deadline_end:
            return TierResolution(tier=Tier.EARLY_BIRD, deadline=deadline_end, next_tier=Tier.REGULAR)

    late_start = effective_late_start(config, conference_start, late_window_days)
    if late_start is not None and current >= late_start:
        return TierResolution(tier=Tier.LATE)

    if late_start is not None:
        return TierResolution(
            tier=Tier.REGULAR,
            deadline=late_start - timedelta(microseconds=1),
            next_tier=Tier.LATE,
        )
    return TierResolution(tier=Tier.REGULAR)


def tier_windows(
    config: PricingConfig,
    conference_start: Optional[Moment] = None,
    late_window_days: Optional[int] = None,
) -> dict[Tier, tuple[Optional[datetime], Optional[datetime]]]:
    """
    Start/end of each tier window (None = open-ended), for display.

    Early bird has no window at all when no deadline is set.
    """
    windows: dict[Tier, tuple[Optional[datetime], Optional[datetime]]] = {}
    deadline = config.early_bird.deadline
    regular_from = effective_regular_start(config, conference_start)
    late_from = effective_late_start(config, conference_start, late_window_days)

    if deadline is not None:
        windows[Tier.EARLY_BIRD] = (None, as_utc(deadline, end_of_day=True))
    windows[Tier.REGULAR] = (
        regular_from,
        late_from - timedelta(microseconds=1) if late_from is not None else None,
    )
    if late_from is not None:
        windows[Tier.LATE] = (late_from, None)
    return windows

"""
Time-decay weighting: older records count less, stepwise per bucket.

Age is measured in 30.44-day months. Inside the engagement window the weight
drops by monthly_decay_rate_percent for every full bucket of
decay_bucket_size_months; outside the window it is 0. The weight is always in
[0, 1] and never increases with age.

    bucket 0: tw = 1.0
    bucket 1: tw = 1.0 - rate
    bucket n: tw = max(0, 1.0 - n * rate)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from dateutil import parser

DAYS_PER_MONTH = 30.44
SECONDS_PER_MONTH = DAYS_PER_MONTH * 24 * 60 * 60


@dataclass(frozen=True)
class TimeWeightParams:
    engagement_window_months: float
    monthly_decay_rate_percent: float
    decay_bucket_size_months: float = 1.0


@dataclass(frozen=True)
class TimeWeight:
    """
    Decay result for one record.

    tw / age_months / bucket_index are None when the timestamp did not parse;
    callers mark such records invalid_created_at.
    """

    tw: float | None
    age_months: float | None
    bucket_index: int | None
    is_valid: bool
    is_within_window: bool


INVALID_TIME_WEIGHT = TimeWeight(
    tw=None,
    age_months=None,
    bucket_index=None,
    is_valid=False,
    is_within_window=False,
)


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts 'Z', '+HH:MM' / '+HHMM' offsets, any fraction length and a space
    separator; naive values are taken as UTC. Returns None for anything
    unparsable instead of raising.
    """
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    try:
        parsed = parser.isoparse(raw)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def age_in_months(created_at: datetime, now: datetime) -> float:
    return (now - created_at).total_seconds() / SECONDS_PER_MONTH


def calculate_time_weight(created_at: datetime, now: datetime, params: TimeWeightParams) -> TimeWeight:
    """Compute the bucketed decay weight for a parsed creation time."""
    age_months = age_in_months(created_at, now)
    # records dated after `now` stay in bucket 0
    bucket_index = max(0, math.floor(age_months / params.decay_bucket_size_months))

    if age_months >= params.engagement_window_months:
        return TimeWeight(
            tw=0.0,
            age_months=age_months,
            bucket_index=bucket_index,
            is_valid=True,
            is_within_window=False,
        )

    tw = max(0.0, 1.0 - bucket_index * (params.monthly_decay_rate_percent / 100.0))
    return TimeWeight(
        tw=tw,
        age_months=age_months,
        bucket_index=bucket_index,
        is_valid=True,
        is_within_window=tw > 0,
    )


def compute_time_weight(created_at: str | None, now: datetime, params: TimeWeightParams) -> TimeWeight:
    """Parse a raw timestamp and weight it; unparsable input yields INVALID_TIME_WEIGHT."""
    parsed = parse_timestamp(created_at)
    if parsed is None:
        return INVALID_TIME_WEIGHT
    return calculate_time_weight(parsed, now, params)

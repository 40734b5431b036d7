#!/usr/bin/env python3
"""
Quota Pacing
Period resolution, monthly quota scaling, KPI aggregation and forecast lines.

Everything here is pure: callers pass ``now`` and the rows to aggregate, so the
math can be checked without a database or a clock.
"""

import calendar
from collections import namedtuple
from datetime import datetime, timedelta

RANGE_DAY = 'day'
RANGE_WEEK = 'week'
RANGE_MONTH = 'month'
RANGE_YEAR = 'year'
RANGE_TYPES = (RANGE_DAY, RANGE_WEEK, RANGE_MONTH, RANGE_YEAR)

# Snapshot attribute -> API key
METRICS = (
    ('calls', 'calls'),
    ('emails', 'emails'),
    ('meetings_booked', 'meetingsBooked'),
    ('meetings_held', 'meetingsHeld'),
    ('opportunities_created', 'opportunitiesCreated'),
    ('clean_opportunities', 'cleanOpportunities'),
)

# User quota attribute -> API metric key. meetingsHeld and opportunitiesCreated have no quota.
QUOTA_METRICS = (
    ('quota_calls', 'calls'),
    ('quota_emails', 'emails'),
    ('quota_meetings_booked', 'meetingsBooked'),
    ('quota_clean_opportunities', 'cleanOpportunities'),
)

Period = namedtuple('Period', ['start', 'end_exclusive', 'elapsed_fraction'])


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def _midnight(moment):
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def days_in_month(moment):
    return calendar.monthrange(moment.year, moment.month)[1]


def resolve_period(range_type, now):
    """
    Resolve the reporting window that contains ``now``.

    Weeks start on Sunday. Returns a Period whose elapsed_fraction is the share
    of the window already behind ``now``, clamped to [0, 1].
    """
    if range_type not in RANGE_TYPES:
        raise ValueError(f'Unknown range type: {range_type!r}')

    today = _midnight(now)
    if range_type == RANGE_DAY:
        start = today
        end_exclusive = start + timedelta(days=1)
    elif range_type == RANGE_WEEK:
        # weekday(): Monday=0 ... Sunday=6
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end_exclusive = start + timedelta(days=7)
    elif range_type == RANGE_YEAR:
        start = today.replace(month=1, day=1)
        end_exclusive = datetime(start.year + 1, 1, 1)
    else:
        start = today.replace(day=1)
        if start.month == 12:
            end_exclusive = datetime(start.year + 1, 1, 1)
        else:
            end_exclusive = datetime(start.year, start.month + 1, 1)

    total = (end_exclusive - start).total_seconds()
    if total <= 0:
        elapsed_fraction = 0.0
    else:
        elapsed_fraction = clamp((now - start).total_seconds() / total, 0.0, 1.0)

    return Period(start, end_exclusive, elapsed_fraction)


def scale_monthly_quota(monthly, range_type, now):
    """
    Re-express a monthly quota for another range.

    Day and week are pro-rated against the days in the current month, which is
    a linear approximation rather than a calendar-exact figure.
    """
    if range_type == RANGE_MONTH:
        return monthly
    if range_type == RANGE_YEAR:
        return monthly * 12
    if range_type == RANGE_WEEK:
        return monthly * 7 / days_in_month(now)
    if range_type == RANGE_DAY:
        return monthly / days_in_month(now)
    raise ValueError(f'Unknown range type: {range_type!r}')


def empty_metrics():
    return {key: 0 for _, key in METRICS}


def sum_snapshots(snapshots):
    totals = empty_metrics()
    for snapshot in snapshots:
        for attr, key in METRICS:
            totals[key] += getattr(snapshot, attr) or 0
    return totals


def sum_quotas(quota_rows):
    """Sum monthly quota fields across users; missing values count as 0."""
    totals = {key: 0 for _, key in QUOTA_METRICS}
    for row in quota_rows:
        for attr, key in QUOTA_METRICS:
            totals[key] += getattr(row, attr) or 0
    return totals


def scale_quotas(monthly_totals, range_type, now):
    """Scale summed monthly quotas to ``range_type``, filling quota-less metrics with 0."""
    scaled = {key: 0 for _, key in METRICS}
    for key, monthly in monthly_totals.items():
        scaled[key] = scale_monthly_quota(monthly, range_type, now)
    return scaled


def build_forecast_line(actual, quota, elapsed_fraction):
    expected = quota * elapsed_fraction
    projected = actual / elapsed_fraction if elapsed_fraction > 0 else 0
    pace_pct = (projected / quota) * 100 if quota > 0 else None
    return {
        'actual': actual,
        'expected': expected,
        'projected': projected,
        'quota': quota,
        'pacePct': pace_pct,
    }


def build_forecast(actuals, quotas, elapsed_fraction):
    return {
        key: build_forecast_line(actuals.get(key, 0), quotas.get(key, 0), elapsed_fraction)
        for _, key in METRICS
    }

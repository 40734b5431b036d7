#!/usr/bin/env python3
"""
KPI Service
Resolves who a KPI request covers, loads their snapshots and quotas, and
assembles actuals and forecast payloads.
"""

import logging
from .models import db, User, KpiSnapshot
from .errors import Forbidden
from .validators import parse_id
from . import pacing

logger = logging.getLogger(__name__)


class KpiService:
    """Data access and assembly for the /kpi endpoints."""

    @staticmethod
    def resolve_target_user_ids(caller, requested_user_id=None):
        """
        Decide which users a KPI request aggregates over.

        Basic users only ever see themselves; asking for anyone else is
        rejected rather than narrowed. Admins get the requested user, or every
        active user when none is given.
        """
        requested = requested_user_id if requested_user_id not in (None, '') else None

        if not caller.is_admin:
            if requested is not None:
                raise Forbidden('Not authorized to view other users')
            return [caller.id]

        if requested is not None:
            return [parse_id(requested, 'userId')]
        return KpiService.find_active_user_ids()

    @staticmethod
    def find_active_user_ids():
        rows = db.session.query(User.id).filter(User.is_active.is_(True)).order_by(User.id).all()
        return [row.id for row in rows]

    @staticmethod
    def find_snapshots(user_ids, date_from, date_to):
        """Snapshots for ``user_ids`` dated within [date_from, date_to] inclusive."""
        if not user_ids:
            return []
        return KpiSnapshot.query.filter(
            KpiSnapshot.user_id.in_(user_ids),
            KpiSnapshot.date >= date_from,
            KpiSnapshot.date <= date_to
        ).all()

    @staticmethod
    def find_user_quotas(user_ids):
        """Summed monthly quotas of the active users among ``user_ids``."""
        if not user_ids:
            return pacing.sum_quotas([])
        users = User.query.filter(
            User.id.in_(user_ids),
            User.is_active.is_(True)
        ).all()
        return pacing.sum_quotas(users)

    @staticmethod
    def get_actuals(user_ids, range_type, now):
        period = pacing.resolve_period(range_type, now)
        snapshots = KpiService.find_snapshots(user_ids, period.start.date(), now.date())
        return {
            'rangeType': range_type,
            'startDate': period.start.isoformat(),
            'endDate': now.isoformat(),
            'metrics': pacing.sum_snapshots(snapshots),
        }

    @staticmethod
    def get_forecast(user_ids, range_type, now):
        period = pacing.resolve_period(range_type, now)

        # Actuals so far: period start -> now
        snapshots = KpiService.find_snapshots(user_ids, period.start.date(), now.date())
        actuals = pacing.sum_snapshots(snapshots)

        monthly_quotas = KpiService.find_user_quotas(user_ids)
        quotas = pacing.scale_quotas(monthly_quotas, range_type, now)

        logger.debug(
            f'Forecast {range_type} for {len(user_ids)} user(s): '
            f'elapsed={period.elapsed_fraction:.4f} monthly_quotas={monthly_quotas}'
        )

        return {
            'rangeType': range_type,
            'startDate': period.start.isoformat(),
            'endDateExclusive': period.end_exclusive.isoformat(),
            'elapsedFraction': period.elapsed_fraction,
            'kpis': pacing.build_forecast(actuals, quotas, period.elapsed_fraction),
        }

#!/usr/bin/env python3
"""
Seed helpers
Bootstrap an admin account and a sample KPI snapshot. Used by scripts/.
"""

import logging
from datetime import date
from . import db
from .models import User, KpiSnapshot, ROLE_ADMIN
from . import user_service

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = 'admin@bdrdragon.local'
DEFAULT_ADMIN_PASSWORD = 'Admin123!'

SAMPLE_SNAPSHOT = {
    'calls': 45,
    'emails': 120,
    'meetings_booked': 3,
    'meetings_held': 2,
    'opportunities_created': 1,
    'clean_opportunities': 1,
}


def seed_admin(email=DEFAULT_ADMIN_EMAIL, password=DEFAULT_ADMIN_PASSWORD):
    """Create the admin account if it is missing. Returns (user, created)."""
    existing = user_service.find_user_by_email(email)
    if existing:
        logger.info(f'Admin {existing.email} already exists (id={existing.id})')
        return existing, False

    user = user_service.create_user(
        email=email,
        password=password,
        role=ROLE_ADMIN,
        first_name='Admin',
        last_name='User'
    )
    return user, True


def seed_kpi_snapshot(on_date=None, **counts):
    """Write one snapshot for the first user, defaulting to today's sample numbers."""
    user = User.query.order_by(User.id).first()
    if not user:
        raise RuntimeError('No user found')

    values = dict(SAMPLE_SNAPSHOT)
    values.update(counts)
    snapshot = KpiSnapshot(user_id=user.id, date=on_date or date.today(), **values)
    db.session.add(snapshot)
    db.session.commit()
    logger.info(f'Seeded KPI snapshot for user {user.id} on {snapshot.date}')
    return snapshot

#!/usr/bin/env python3
"""
User Service
Account creation, credential checks, password changes and admin updates.
"""

import logging
from .models import db, User, Market, UserMarket, ROLES, QUOTA_FIELDS
from .errors import BadRequest, Unauthorized, NotFound, Conflict
from .security import hash_password, verify_password
from .task_manager import TaskManager
from .validators import parse_quota, parse_id_list, optional_string, MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)


def normalize_email(email):
    return email.strip().lower()


def find_user_by_email(email):
    return User.query.filter_by(email=normalize_email(email)).first()


def get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')
    return user


def parse_quotas(data, partial=False):
    """Pull quota fields out of a camelCase payload. With partial=True absent keys are skipped."""
    quotas = {}
    for key, attr in QUOTA_FIELDS.items():
        if partial and key not in data:
            continue
        quotas[attr] = parse_quota(data.get(key), key)
    return quotas


def resolve_markets(market_ids):
    """Load markets by id, failing if any id is unknown."""
    if not market_ids:
        return []
    markets = Market.query.filter(Market.id.in_(market_ids)).all()
    if len(markets) != len(set(market_ids)):
        raise BadRequest('One or more marketIds are invalid')
    return markets


def replace_user_markets(user, market_ids):
    """Replace the user's market assignments wholesale."""
    markets = resolve_markets(market_ids)
    UserMarket.query.filter_by(user_id=user.id).delete(synchronize_session=False)
    db.session.flush()
    db.session.expire(user, ['user_markets'])
    for market in markets:
        db.session.add(UserMarket(user_id=user.id, market_id=market.id))


def create_user(email, password, role, first_name=None, last_name=None,
                quotas=None, market_ids=None, commit=True):
    """
    Create a user together with the three default task lists.

    Raises Conflict when the email is taken and BadRequest for an unknown role
    or market id.
    """
    if role not in ROLES:
        raise BadRequest('role must be ADMIN or BASIC')
    email = normalize_email(email)
    if User.query.filter_by(email=email).first():
        raise Conflict('User with this email already exists')

    markets = resolve_markets(market_ids or [])

    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
        first_name=first_name,
        last_name=last_name,
        **(quotas or {})
    )
    db.session.add(user)
    db.session.flush()

    for market in markets:
        db.session.add(UserMarket(user_id=user.id, market_id=market.id))

    TaskManager.create_default_lists(user)

    if commit:
        db.session.commit()
    logger.info(f'Created {role} user {email} (id={user.id})')
    return user


def validate_user_credentials(email, password):
    user = find_user_by_email(email)
    if not user or not user.is_active:
        logger.warning(f'Failed login for {email!r}: unknown or inactive account')
        raise Unauthorized('Invalid credentials')

    if not verify_password(password, user.password_hash):
        logger.warning(f'Failed login for {email!r}: bad password')
        raise Unauthorized('Invalid credentials')

    return user


def change_user_password(user_id, current_password, new_password):
    user = get_user_or_404(user_id)

    if not verify_password(current_password, user.password_hash):
        raise BadRequest('Current password is incorrect')
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f'newPassword must be at least {MIN_PASSWORD_LENGTH} characters')

    user.password_hash = hash_password(new_password)
    db.session.commit()
    logger.info(f'User {user.id} changed their password')


def set_user_password(user_id, new_password):
    user = get_user_or_404(user_id)
    user.password_hash = hash_password(new_password)
    db.session.commit()
    logger.info(f'Password reset by admin for user {user.id}')
    return user


def update_user(user, data):
    """Apply an admin's partial update. Unknown or malformed enum values are ignored."""
    role = data.get('role')
    if role in ROLES:
        user.role = role

    is_active = data.get('isActive')
    if isinstance(is_active, bool):
        user.is_active = is_active

    if 'firstName' in data:
        user.first_name = optional_string(data.get('firstName'))
    if 'lastName' in data:
        user.last_name = optional_string(data.get('lastName'))

    for attr, value in parse_quotas(data, partial=True).items():
        setattr(user, attr, value)

    if 'marketIds' in data:
        replace_user_markets(user, parse_id_list(data.get('marketIds'), 'marketIds'))

    db.session.commit()
    logger.info(f'Updated user {user.id}: fields={sorted(data.keys())}')
    return user

#!/usr/bin/env python3
"""
Security helpers
Password hashing with bcrypt, JWT access/refresh tokens and the cookies that carry them.
"""

from datetime import datetime, timezone
from flask import current_app
import bcrypt
import jwt

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'
REFRESH_COOKIE_PATH = '/auth/refresh'


def hash_password(password):
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt(rounds=current_app.config.get('BCRYPT_ROUNDS', 12))
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password, hashed):
    """Verify password against hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def _encode(user_id, role, secret, expires):
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'role': role,
        'iat': now,
        'exp': now + expires,
    }
    return jwt.encode(payload, secret, algorithm='HS256')


def _decode(token, secret):
    """Return the token payload, or None when it is missing, expired or invalid."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if 'sub' not in payload or payload.get('role') not in ('ADMIN', 'BASIC'):
        return None
    return payload


def sign_access_token(user_id, role):
    return _encode(user_id, role, current_app.config['JWT_ACCESS_SECRET'],
                   current_app.config['JWT_ACCESS_EXPIRES'])


def sign_refresh_token(user_id, role):
    return _encode(user_id, role, current_app.config['JWT_REFRESH_SECRET'],
                   current_app.config['JWT_REFRESH_EXPIRES'])


def verify_access_token(token):
    return _decode(token, current_app.config['JWT_ACCESS_SECRET'])


def verify_refresh_token(token):
    return _decode(token, current_app.config['JWT_REFRESH_SECRET'])


def _cookie_options():
    return {
        'httponly': True,
        'secure': current_app.config.get('AUTH_COOKIE_SECURE', False),
        'samesite': current_app.config.get('AUTH_COOKIE_SAMESITE', 'Lax'),
    }


def set_auth_cookies(response, user_id, role):
    """Issue a fresh access/refresh token pair on the response."""
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE,
        sign_access_token(user_id, role),
        path='/',
        max_age=int(current_app.config['JWT_ACCESS_EXPIRES'].total_seconds()),
        **options
    )
    # Refresh cookie is only sent to the refresh endpoint
    response.set_cookie(
        REFRESH_COOKIE,
        sign_refresh_token(user_id, role),
        path=REFRESH_COOKIE_PATH,
        max_age=int(current_app.config['JWT_REFRESH_EXPIRES'].total_seconds()),
        **options
    )
    return response


def clear_auth_cookies(response):
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, path='/', **options)
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH, **options)
    return response

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from flask_login.config import EXEMPT_METHODS
from functools import wraps
import logging
from . import db
from .models import User, ROLE_ADMIN, ROLE_BASIC
from .errors import BadRequest, Unauthorized, Forbidden
from .security import (ACCESS_COOKIE, REFRESH_COOKIE, set_auth_cookies, clear_auth_cookies,
                       verify_access_token, verify_refresh_token)
from .validators import get_json_body, require_password, optional_string
from . import user_service

logger = logging.getLogger(__name__)

auth = Blueprint('auth', __name__)


def init_login_manager(login_manager):
    """Authenticate every request from the access-token cookie instead of the Flask session."""

    @login_manager.request_loader
    def load_user_from_cookie(req):
        payload = verify_access_token(req.cookies.get(ACCESS_COOKIE))
        if not payload:
            return None
        try:
            user_id = int(payload['sub'])
        except (TypeError, ValueError):
            return None
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthorized()


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if request.method in EXEMPT_METHODS:
            return f(*args, **kwargs)
        if not current_user.is_authenticated:
            raise Unauthorized()
        if not current_user.is_admin:
            raise Forbidden()
        return f(*args, **kwargs)
    return decorated_function


def _user_summary(user):
    return {
        'id': user.id,
        'email': user.email,
        'role': user.role,
        'firstName': user.first_name,
        'lastName': user.last_name,
    }


@auth.route('/login', methods=['POST'])
def login():
    data = get_json_body()
    email = data.get('email')
    password = data.get('password')
    if not isinstance(email, str) or not email or not isinstance(password, str) or not password:
        raise BadRequest('Email and password required')

    user = user_service.validate_user_credentials(email, password)
    response = jsonify(_user_summary(user))
    set_auth_cookies(response, user.id, user.role)
    logger.info(f'User {user.id} logged in')
    return response


@auth.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'message': 'Logged out'})
    clear_auth_cookies(response)
    return response


@auth.route('/refresh', methods=['POST'])
def refresh():
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise Unauthorized('No refresh token')

    payload = verify_refresh_token(token)
    if not payload:
        raise Unauthorized('Invalid refresh token')

    user = db.session.get(User, int(payload['sub']))
    if not user or not user.is_active:
        raise Unauthorized('Invalid refresh token')

    response = jsonify({'message': 'Refreshed'})
    set_auth_cookies(response, user.id, user.role)
    return response


@auth.route('/change-password', methods=['POST'])
@login_required
def change_password():
    data = get_json_body()
    current_password = data.get('currentPassword')
    new_password = data.get('newPassword')
    if not isinstance(current_password, str) or not current_password \
            or not isinstance(new_password, str) or not new_password:
        raise BadRequest('currentPassword and newPassword required')

    user_service.change_user_password(current_user.id, current_password, new_password)
    return jsonify({'message': 'Password changed'})


@auth.route('/register', methods=['POST'])
@admin_required
def register():
    data = get_json_body()
    email = data.get('email')
    if not isinstance(email, str) or not email.strip() or not data.get('tempPassword'):
        raise BadRequest('email and tempPassword required')
    temp_password = require_password(data, 'tempPassword')

    role = ROLE_ADMIN if data.get('role') == ROLE_ADMIN else ROLE_BASIC
    user = user_service.create_user(
        email=email,
        password=temp_password,
        role=role,
        first_name=optional_string(data.get('firstName')),
        last_name=optional_string(data.get('lastName'))
    )
    return jsonify(_user_summary(user)), 201

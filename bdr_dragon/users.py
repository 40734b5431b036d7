from flask import Blueprint, jsonify
from flask_login import login_required, current_user
import logging
from . import db
from .errors import Forbidden
from .validators import get_json_body, require_string

logger = logging.getLogger(__name__)

users = Blueprint('users', __name__)


@users.route('/me', methods=['GET'])
@login_required
def get_me():
    return jsonify(current_user.to_dict())


@users.route('/me', methods=['PUT'])
@login_required
def update_me():
    """Only admins may change their name."""
    if not current_user.is_admin:
        raise Forbidden('Only admins can update user name')

    data = get_json_body()
    first_name = require_string(data, 'firstName')
    last_name = require_string(data, 'lastName')

    current_user.first_name = first_name.strip()
    current_user.last_name = last_name.strip()
    db.session.commit()
    logger.info(f'User {current_user.id} updated their name')
    return jsonify(current_user.to_dict())

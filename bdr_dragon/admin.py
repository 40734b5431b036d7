from flask import Blueprint, jsonify
import logging
from . import db
from .auth import admin_required
from .errors import BadRequest, NotFound
from .models import User, Market, UserMarket, IntegrationStatus, ROLES
from .validators import (get_json_body, require_string, require_password, optional_string,
                         parse_datetime, parse_id_list)
from . import user_service
from . import clock

logger = logging.getLogger(__name__)

admin = Blueprint('admin', __name__)

INTEGRATION_SCOPE = 'GLOBAL'


@admin.before_request
@admin_required
def require_admin():
    pass


# Users

@admin.route('/users', methods=['GET'])
def list_users():
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([user.to_dict(include_markets=True) for user in users])


@admin.route('/users', methods=['POST'])
def create_user():
    data = get_json_body()
    email = require_string(data, 'email', 'email is required')
    if data.get('role') not in ROLES:
        raise BadRequest('role must be ADMIN or BASIC')
    temp_password = require_password(data, 'tempPassword')
    quotas = user_service.parse_quotas(data)
    market_ids = parse_id_list(data['marketIds'], 'marketIds') if data.get('marketIds') is not None else []

    user = user_service.create_user(
        email=email,
        password=temp_password,
        role=data['role'],
        first_name=optional_string(data.get('firstName')),
        last_name=optional_string(data.get('lastName')),
        quotas=quotas,
        market_ids=market_ids
    )
    return jsonify(user.to_dict(include_markets=True)), 201


@admin.route('/users/<id:user_id>', methods=['PUT'])
def update_user(user_id):
    """Partial update; marketIds, when present, replaces the assignment set."""
    user = user_service.get_user_or_404(user_id)
    user = user_service.update_user(user, get_json_body())
    return jsonify(user.to_dict(include_markets=True))


@admin.route('/users/<id:user_id>/set-password', methods=['POST'])
def set_password(user_id):
    data = get_json_body()
    new_password = require_password(data, 'newPassword')
    user_service.set_user_password(user_id, new_password)
    return jsonify({'ok': True})


# Markets

def _get_market_or_404(market_id):
    market = db.session.get(Market, market_id)
    if not market:
        raise NotFound('Market not found')
    return market


def _apply_market_fields(market, data):
    if 'geographicDescription' in data:
        market.geographic_description = optional_string(data.get('geographicDescription'))
    if 'accountExecutives' in data:
        market.account_executives = optional_string(data.get('accountExecutives'))
    if 'managerName' in data:
        market.manager_name = optional_string(data.get('managerName'))
    if 'startDate' in data:
        market.start_date = parse_datetime(data.get('startDate'), 'startDate')


@admin.route('/markets', methods=['GET'])
def list_markets():
    markets = Market.query.order_by(Market.created_at.desc(), Market.id.desc()).all()
    return jsonify([market.to_dict() for market in markets])


@admin.route('/markets', methods=['POST'])
def create_market():
    data = get_json_body()
    market = Market(name=require_string(data, 'name'))
    _apply_market_fields(market, data)
    db.session.add(market)
    db.session.commit()
    logger.info(f'Created market {market.id} ({market.name})')
    return jsonify(market.to_dict()), 201


@admin.route('/markets/<id:market_id>', methods=['PUT'])
def update_market(market_id):
    market = _get_market_or_404(market_id)
    data = get_json_body()
    if isinstance(data.get('name'), str) and data['name'].strip():
        market.name = data['name']
    _apply_market_fields(market, data)
    db.session.commit()
    logger.info(f'Updated market {market.id}')
    return jsonify(market.to_dict())


@admin.route('/markets/<id:market_id>', methods=['DELETE'])
def delete_market(market_id):
    market = _get_market_or_404(market_id)

    # Assignments first, then the market, in one commit
    removed = UserMarket.query.filter_by(market_id=market.id).delete(synchronize_session=False)
    db.session.delete(market)
    db.session.commit()

    logger.info(f'Deleted market {market_id} and {removed} user assignment(s)')
    return '', 204


# Integration status

def _find_integration_status():
    return IntegrationStatus.query.filter_by(scope=INTEGRATION_SCOPE).order_by(
        IntegrationStatus.updated_at.desc()
    ).first()


@admin.route('/integration-status', methods=['GET'])
def integration_status():
    status = _find_integration_status()
    if status is None:
        return jsonify({
            'scope': INTEGRATION_SCOPE,
            'salesforceStatus': 'NOT_CONFIGURED',
            'outreachStatus': 'STUBBED',
            'lastSyncAt': None
        })
    return jsonify(status.to_dict())


@admin.route('/sync', methods=['POST'])
def sync():
    """Stub: records the sync time; no third-party calls are made."""
    now = clock.now()
    status = _find_integration_status()
    if status is None:
        status = IntegrationStatus(scope=INTEGRATION_SCOPE)
        db.session.add(status)

    status.last_sync_at = now
    status.salesforce_status = 'CONFIGURED'
    status.outreach_status = 'STUBBED'
    db.session.commit()

    logger.info(f'Integration sync triggered at {now.isoformat()}')
    return jsonify({'message': 'Sync triggered (stub)', 'lastSyncAt': status.last_sync_at.isoformat()})

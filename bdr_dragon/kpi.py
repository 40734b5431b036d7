from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from .errors import BadRequest
from .kpi_service import KpiService
from .pacing import RANGE_TYPES, RANGE_MONTH
from . import clock

kpi = Blueprint('kpi', __name__)


def parse_range_type(value):
    if value is None or value == '':
        return RANGE_MONTH
    if value not in RANGE_TYPES:
        raise BadRequest(f'rangeType must be one of {", ".join(RANGE_TYPES)}')
    return value


@kpi.route('/actuals')
@login_required
def actuals():
    """
    GET /kpi/actuals?rangeType=day|week|month|year&userId=<optional>

    BASIC: userId is rejected; returns own totals.
    ADMIN: userId omitted aggregates all active users.
    """
    user_ids = KpiService.resolve_target_user_ids(current_user, request.args.get('userId'))
    range_type = parse_range_type(request.args.get('rangeType'))
    return jsonify(KpiService.get_actuals(user_ids, range_type, clock.now()))


@kpi.route('/forecast')
@login_required
def forecast():
    """
    GET /kpi/forecast?rangeType=day|week|month|year&userId=<optional>

    Pacing against quota for the current period, same access rules as actuals.
    """
    user_ids = KpiService.resolve_target_user_ids(current_user, request.args.get('userId'))
    range_type = parse_range_type(request.args.get('rangeType'))
    return jsonify(KpiService.get_forecast(user_ids, range_type, clock.now()))

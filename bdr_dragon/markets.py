from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from .models import Market, UserMarket

markets = Blueprint('markets', __name__)


@markets.route('/me', methods=['GET'])
@login_required
def my_markets():
    """Markets assigned to the current user (read-only)."""
    assigned = Market.query.join(UserMarket, UserMarket.market_id == Market.id).filter(
        UserMarket.user_id == current_user.id
    ).order_by(Market.name).all()

    return jsonify({'markets': [market.to_dict() for market in assigned]})

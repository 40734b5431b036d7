"""Request payload validation helpers. All failures raise BadRequest naming the field."""

from flask import request
import dateutil.parser
from werkzeug.routing import IntegerConverter

from .errors import BadRequest

MIN_PASSWORD_LENGTH = 8
MAX_ID = 2 ** 63 - 1


def get_json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data


def require_string(data, field, message=None):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise BadRequest(message or f'{field} is required')
    return value


def optional_string(value):
    """Map an optional text field: None and '' clear it, strings pass through."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        return str(value)
    return value


def require_password(data, field):
    value = data.get(field)
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f'{field} must be at least {MIN_PASSWORD_LENGTH} characters')
    return value


def parse_quota(value, field):
    """Quotas are non-negative whole numbers. Missing values count as 0."""
    if value is None or value == '':
        return 0
    if isinstance(value, bool):
        raise BadRequest(f'{field} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise BadRequest(f'{field} must be a number')
    if number != number or number < 0:
        raise BadRequest(f'{field} must be zero or greater')
    if not number.is_integer():
        raise BadRequest(f'{field} must be a whole number')
    return int(number)


def parse_id(value, field):
    """Ids are positive integers that fit a 64-bit signed column."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise BadRequest(f'{field} must be an integer id')
    try:
        number = int(value)
    except ValueError:
        raise BadRequest(f'{field} must be an integer id')
    if not 0 < number <= MAX_ID:
        raise BadRequest(f'{field} must be an integer id')
    return number


class IdConverter(IntegerConverter):
    """``<id:...>`` URL segments; out-of-range ids do not match the route."""

    def __init__(self, url_map):
        super().__init__(url_map, min=1, max=MAX_ID)


def parse_id_list(value, field):
    if not isinstance(value, list):
        raise BadRequest(f'{field} must be a list')
    ids = []
    for item in value:
        item_id = parse_id(item, field)
        if item_id not in ids:
            ids.append(item_id)
    return ids


def parse_datetime(value, field):
    """Parse an ISO-ish date string into a naive local datetime. Empty values give None."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise BadRequest(f'{field} must be a date string')
    try:
        parsed = dateutil.parser.parse(value)
    except (ValueError, OverflowError):
        raise BadRequest(f'{field} is not a valid date')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed

"""Request body shape checks. Every failure is a ``ValidationError`` (400)."""
from flask import request

from companion.errors import ValidationError


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _is_int(value):
    # bool is an int subclass; JSON true/false is never a number here
    return isinstance(value, int) and not isinstance(value, bool)


def require_str(data, key):
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'Invalid {key}')
    return value


def require_int(data, key, minimum=None):
    value = data.get(key)
    if not _is_int(value):
        raise ValidationError(f'Invalid {key}')
    if minimum is not None and value < minimum:
        raise ValidationError(f'{key} must be at least {minimum}')
    return value


def require_bool(data, key):
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValidationError(f'Invalid {key}')
    return value


def require_int_list(data, key):
    value = data.get(key)
    if not isinstance(value, list) or not all(_is_int(v) for v in value):
        raise ValidationError(f'{key} must be a list of integers')
    return value

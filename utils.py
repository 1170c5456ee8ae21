"""
Utility Functions for the Storefront API

Helpers for input sanitization, JSON body handling and timestamps.
"""
import logging
import re
from datetime import datetime, timezone
from functools import wraps
from typing import Any

from flask import g, request

from errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 500

# Per-field length caps applied after validation
FIELD_MAX_LENGTHS = {
    'product_id': 100,
    'name': 100,
    'email': 100,
    'message': 1000,
    'note': 500,
    'currency': 3,
}

_UNSAFE_CHARS = re.compile(r'[<>"\']')


def sanitize_input(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> Any:
    """
    Normalize a client-supplied string

    Removes < > " ' characters, trims surrounding whitespace and truncates to
    max_length. Non-string values are returned unchanged.

    Args:
        value: Raw value from a request body or path
        max_length: Maximum length of the result

    Returns:
        Sanitized string, or the value untouched if it is not a string
    """
    if not isinstance(value, str):
        return value
    cleaned = _UNSAFE_CHARS.sub('', value).strip()
    return cleaned[:max_length].rstrip()


def sanitize_field(field: str, value: Any) -> Any:
    """Sanitize using the length cap registered for a field"""
    return sanitize_input(value, FIELD_MAX_LENGTHS.get(field, DEFAULT_MAX_LENGTH))


def sanitize_keys(data: Any, replace_with: str = '_') -> Any:
    """
    Rewrite dict keys that look like query operators

    Keys starting with '$' or containing '.' have those characters replaced,
    recursively through nested dicts and lists.
    """
    if isinstance(data, list):
        return [sanitize_keys(item, replace_with) for item in data]
    if not isinstance(data, dict):
        return data

    cleaned = {}
    for key, value in data.items():
        new_key = key
        if isinstance(key, str) and (key.startswith('$') or '.' in key):
            new_key = key.replace('$', replace_with).replace('.', replace_with)
            logger.warning(f'Sanitized {key} in request body')
        cleaned[new_key] = sanitize_keys(value, replace_with)
    return cleaned


def validate_json(f):
    """
    Decorator ensuring the request body is a JSON object

    The sanitized body is stored on flask.g.json_body for the view.

    Usage:
        @validate_json
        def my_endpoint():
            data = g.json_body
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError('Invalid JSON')
        g.json_body = sanitize_keys(data)
        return f(*args, **kwargs)
    return decorated_function


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string"""
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def client_address() -> str:
    """Network address of the caller"""
    return request.remote_addr or 'unknown'

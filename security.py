"""
Request Guard

Security headers, payload ceiling and origin restriction applied to every request.
"""
import logging

from flask import abort, current_app, request

from errors import AppError

logger = logging.getLogger(__name__)

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://recaptcha.net "
    "https://www.google.com/recaptcha/ https://www.gstatic.com/recaptcha/; "
    "frame-src https://recaptcha.net https://www.google.com/recaptcha/; "
    "style-src 'self' 'unsafe-inline'; "
    "frame-ancestors 'none'"
)

SECURITY_HEADERS = {
    'Content-Security-Policy': CONTENT_SECURITY_POLICY,
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains; preload',
    'X-Frame-Options': 'DENY',
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'no-referrer',
    'X-XSS-Protection': '0',
}


def reject_oversized_payload():
    """Refuse bodies whose declared length exceeds MAX_CONTENT_LENGTH"""
    limit = current_app.config.get('MAX_CONTENT_LENGTH')
    if limit and request.content_length and request.content_length > limit:
        logger.warning(
            f'Rejected {request.content_length} byte payload from {request.remote_addr}'
        )
        abort(413)


def reject_unknown_origin():
    """Refuse cross-origin requests from origins outside the allow-list"""
    origin = request.headers.get('Origin')
    if origin and origin not in current_app.config.get('ALLOWED_ORIGINS', []):
        logger.warning(f'Rejected request from origin {origin}')
        raise AppError('Origin not allowed', status_code=403)


def add_security_headers(response):
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


def register_security(app):
    """Attach the request guard hooks to an app"""
    app.before_request(reject_oversized_payload)
    app.before_request(reject_unknown_origin)
    app.after_request(add_security_headers)

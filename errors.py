"""
Application Errors

Exceptions raised by services and routes. Each carries the HTTP status code
and the public error text returned to the client; `detail` holds the
underlying cause and is only exposed in development mode.
"""
from typing import Optional


class AppError(Exception):
    """Base error with an HTTP status code"""

    status_code = 500
    public_message: Optional[str] = None

    def __init__(self, error: str, status_code: Optional[int] = None,
                 detail: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(error)
        self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        if public_message is not None:
            self.public_message = public_message


class ValidationError(AppError):
    """Client supplied a field that fails a stated constraint"""
    status_code = 400


class NotFoundError(AppError):
    """Requested resource does not exist upstream"""
    status_code = 404


class BotVerificationError(AppError):
    """Bot verification rejected the submission"""
    status_code = 400


class ConfigurationError(AppError):
    """Server is missing required configuration"""
    status_code = 500


class UpstreamError(AppError):
    """An upstream provider failed, timed out or returned garbage"""
    status_code = 502
    public_message = 'Internal server error'

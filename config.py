"""
Configuration for the Storefront API

Settings are read from environment variables (optionally from a .env file).
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    """Application settings loaded from the environment"""

    def __init__(self):
        # Square
        self.SQUARE_ACCESS_TOKEN = os.getenv('SQUARE_ACCESS_TOKEN')
        self.SQUARE_LOCATION_ID = os.getenv('SQUARE_LOCATION_ID')
        self.SQUARE_ENVIRONMENT = os.getenv('SQUARE_ENVIRONMENT', 'sandbox')
        self.SQUARE_API_VERSION = os.getenv('SQUARE_API_VERSION', '2024-10-17')

        # reCAPTCHA
        self.RECAPTCHA_SECRET_KEY = os.getenv('RECAPTCHA_SECRET_KEY')
        self.RECAPTCHA_MIN_SCORE = float(os.getenv('RECAPTCHA_MIN_SCORE', '0.5'))

        # Server
        self.APP_ENV = os.getenv('APP_ENV', 'production')
        self.PORT = int(os.getenv('PORT', '3000'))
        self.ALLOWED_ORIGINS = _split_origins(
            os.getenv('ALLOWED_ORIGINS', 'http://localhost:3000,http://localhost:5000')
        )
        self.SITE_ROOT = os.getenv('SITE_ROOT', 'public')
        self.UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', '10'))
        self.MAX_CONTENT_LENGTH = 10 * 1024

        # Logging
        self.LOG_FILE = os.getenv('LOG_FILE', 'logs/storefront.log')
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

        # Rate limiting
        self.RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
        self.RATELIMIT_GENERAL = os.getenv('RATELIMIT_GENERAL', '100 per 15 minutes')
        self.RATELIMIT_CONTACT = os.getenv('RATELIMIT_CONTACT', '5 per hour')
        self.RATELIMIT_CHECKOUT = os.getenv('RATELIMIT_CHECKOUT', '10 per minute')
        self.RATELIMIT_HEADERS_ENABLED = True


class TestingConfig(Config):
    """Deterministic settings for the test suite"""

    def __init__(self):
        super().__init__()
        self.TESTING = True
        self.APP_ENV = 'test'
        self.SQUARE_ACCESS_TOKEN = 'test-access-token'
        self.SQUARE_LOCATION_ID = 'LOCATION123'
        self.SQUARE_ENVIRONMENT = 'sandbox'
        self.RECAPTCHA_SECRET_KEY = 'test-recaptcha-secret'
        self.RECAPTCHA_MIN_SCORE = 0.5
        self.ALLOWED_ORIGINS = ['http://localhost:3000']
        self.LOG_FILE = None
        self.RATELIMIT_STORAGE_URI = 'memory://'
        self.RATELIMIT_GENERAL = '100 per 15 minutes'
        self.RATELIMIT_CONTACT = '5 per hour'
        self.RATELIMIT_CHECKOUT = '10 per minute'

"""Services package initialization"""
from .square_client import SquareClient
from .recaptcha_client import RecaptchaClient
from .catalog_service import CatalogService
from .payment_service import PaymentService
from .contact_service import ContactService

__all__ = [
    'SquareClient',
    'RecaptchaClient',
    'CatalogService',
    'PaymentService',
    'ContactService'
]

"""
Payment Service

Submits validated checkout requests to the payments provider.
"""
import logging
import uuid

from errors import UpstreamError
from models import PaymentConfirmation, PaymentRequest
from utils import sanitize_field, sanitize_input, utc_timestamp

logger = logging.getLogger(__name__)


class PaymentService:
    """Creates payments at the configured location"""

    def __init__(self, client, location_id: str):
        """
        Args:
            client: Payments provider with create_payment(...)
            location_id: Merchant location the payment is booked against
        """
        self.client = client
        self.location_id = location_id

    def create_payment(self, payment: PaymentRequest) -> PaymentConfirmation:
        """
        Charge a payment source

        A fresh idempotency key is generated for every attempt.

        Raises:
            UpstreamError: if the provider fails or returns no payment
        """
        idempotency_key = str(uuid.uuid4())
        result = self.client.create_payment(
            source_id=sanitize_input(payment.source_id),
            amount=payment.amount_minor_units,
            currency=sanitize_field('currency', payment.currency),
            note=sanitize_field('note', payment.note or ''),
            idempotency_key=idempotency_key,
            location_id=sanitize_input(self.location_id),
        )
        if not result:
            raise UpstreamError('Payment processing failed', detail='No payment in provider response')
        if not result.get('id') or not result.get('status'):
            logger.error(f'Payment response missing id or status (idempotency key {idempotency_key})')
            raise UpstreamError('Payment processing failed',
                                detail='Payment response missing id or status')

        money = result.get('amount_money') or {}
        confirmation = PaymentConfirmation(
            id=result.get('id'),
            status=result.get('status'),
            amount=money.get('amount'),
            currency=money.get('currency'),
            timestamp=utc_timestamp(),
        )
        logger.info(f'Payment {confirmation.id} created with status {confirmation.status}')
        return confirmation

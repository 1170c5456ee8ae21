"""
Checkout Routes

Payment submission. Rate limited by the checkout policy.
"""
from flask import Blueprint, current_app, g, jsonify

from errors import ConfigurationError, NotFoundError, UpstreamError
from models import PaymentRequest, parse_request
from utils import validate_json

checkout_bp = Blueprint('checkout', __name__)


@checkout_bp.route('/checkout', methods=['POST'])
@validate_json
def checkout():
    """Create a payment for the submitted source token"""
    payment = parse_request(PaymentRequest, g.json_body)

    if not current_app.config.get('SQUARE_LOCATION_ID'):
        raise ConfigurationError('Configuration Error', public_message='Location not configured')

    try:
        confirmation = current_app.payment_service.create_payment(payment)
    except (UpstreamError, NotFoundError) as e:
        current_app.logger.error(f'Payment error: {e.detail or e.error}')
        raise UpstreamError('Payment processing failed', status_code=400,
                            detail=e.detail or e.error,
                            public_message='Unable to process payment')

    return jsonify({'success': True, 'payment': confirmation.model_dump()})

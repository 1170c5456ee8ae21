"""
Contact Routes

Contact form submission with bot verification. Rate limited by the contact policy.
"""
from flask import Blueprint, current_app, g, jsonify

from errors import UpstreamError
from models import ContactSubmission, parse_request
from utils import client_address, validate_json

contact_bp = Blueprint('contact', __name__)


@contact_bp.route('/contact', methods=['POST'])
@validate_json
def contact():
    """Verify and record a contact form submission"""
    submission = parse_request(ContactSubmission, g.json_body)

    try:
        reference = current_app.contact_service.submit(submission, client_address())
    except UpstreamError as e:
        current_app.logger.error(f'Contact form error: {e.detail or e.error}')
        raise UpstreamError('Failed to process contact form', status_code=500,
                            detail=e.detail or e.error)

    return jsonify({
        'success': True,
        'message': 'Your message has been received. We will contact you soon!',
        'reference': reference,
    }), 200

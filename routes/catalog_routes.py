"""
Catalog Routes

Health check and product endpoints. Rate limited by the general policy.
"""
from flask import Blueprint, current_app, jsonify

from errors import ConfigurationError, NotFoundError, UpstreamError, ValidationError
from services.catalog_service import MIN_PRODUCT_ID_LENGTH
from utils import sanitize_field, utc_timestamp

catalog_bp = Blueprint('catalog', __name__)


def _require_square_token():
    if not current_app.config.get('SQUARE_ACCESS_TOKEN'):
        raise ConfigurationError(
            'Configuration Error', public_message='Square API not properly configured'
        )


@catalog_bp.route('/health')
def health():
    """Liveness probe"""
    return jsonify({
        'status': 'ok',
        'message': 'Sisters Promise API is running',
        'timestamp': utc_timestamp(),
        'environment': current_app.config.get('SQUARE_ENVIRONMENT', 'sandbox'),
    })


@catalog_bp.route('/products')
def list_products():
    """Get all products from the Square catalog"""
    _require_square_token()
    try:
        products = current_app.catalog_service.list_products()
    except (UpstreamError, NotFoundError) as e:
        current_app.logger.error(f'Error fetching products: {e.detail or e.error}')
        raise UpstreamError('Failed to fetch products', status_code=500,
                            detail=e.detail or e.error)

    return jsonify({
        'success': True,
        'count': len(products),
        'products': [product.to_dict() for product in products],
        'cached': False,
        'timestamp': utc_timestamp(),
    })


@catalog_bp.route('/products/<product_id>')
def get_product(product_id):
    """Get a single product by id"""
    product_id = sanitize_field('product_id', product_id)
    if not product_id or len(product_id) < MIN_PRODUCT_ID_LENGTH:
        raise ValidationError('Invalid product ID format')

    _require_square_token()
    try:
        product = current_app.catalog_service.get_product(product_id)
    except UpstreamError as e:
        current_app.logger.error(f'Error fetching product {product_id}: {e.detail or e.error}')
        raise UpstreamError('Failed to fetch product', status_code=500,
                            detail=e.detail or e.error)

    return jsonify({'success': True, 'product': product.to_dict()})

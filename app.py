"""
Storefront API Server

Flask application factory wiring the request guard, CORS, rate limiting,
upstream services and error handlers.
"""
import logging
import os
import traceback
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from config import Config
from errors import AppError
from routes import catalog_bp, checkout_bp, contact_bp, main_bp
from security import register_security
from services import (
    CatalogService, ContactService, PaymentService, RecaptchaClient, SquareClient
)
from utils import utc_timestamp

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'


def configure_logging(app):
    """Rotating file log plus level from LOG_LEVEL"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    app.logger.setLevel(level)

    log_file = app.config.get('LOG_FILE')
    if not log_file:
        return

    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    path = os.path.abspath(log_file)
    if any(getattr(h, 'baseFilename', None) == path for h in root.handlers):
        return

    handler = RotatingFileHandler(log_file, maxBytes=10000000, backupCount=3)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    root.addHandler(handler)


def configure_rate_limits(app) -> Limiter:
    """
    Build the limiter for this app and apply the three route policies

    Each policy is one shared counter per client address across every route
    of its blueprint; exhausting one policy leaves the others untouched.
    """
    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri=app.config['RATELIMIT_STORAGE_URI'],
        headers_enabled=app.config.get('RATELIMIT_HEADERS_ENABLED', True),
    )
    limiter.shared_limit(
        app.config['RATELIMIT_GENERAL'],
        scope='general',
        error_message='Too many requests from this IP, please try again later.',
    )(catalog_bp)
    limiter.shared_limit(
        app.config['RATELIMIT_CONTACT'],
        scope='contact',
        error_message='Too many contact form submissions, please try again later.',
    )(contact_bp)
    limiter.shared_limit(
        app.config['RATELIMIT_CHECKOUT'],
        scope='checkout',
        error_message='Too many checkout attempts, please try again later.',
    )(checkout_bp)
    return limiter


def is_development(app) -> bool:
    return app.config.get('APP_ENV') == 'development'


def register_error_handlers(app):
    """JSON error envelopes; detail and stack only in development"""

    @app.errorhandler(AppError)
    def handle_app_error(e):
        body = {'error': e.error}
        message = e.detail if (is_development(app) and e.detail) else e.public_message
        if message:
            body['message'] = message
        body['timestamp'] = utc_timestamp()
        return jsonify(body), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({
            'error': 'Not Found',
            'path': request.full_path.rstrip('?'),
            'method': request.method,
        }), 404

    @app.errorhandler(413)
    def handle_payload_too_large(e):
        return jsonify({'error': 'Payload too large', 'timestamp': utc_timestamp()}), 413

    @app.errorhandler(429)
    def handle_rate_limited(e):
        app.logger.warning(f'Rate limit exceeded for {get_remote_address()} on {request.path}')
        return jsonify({'error': e.description, 'timestamp': utc_timestamp()}), 429

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.name, 'timestamp': utc_timestamp()}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        app.logger.error(f'Unhandled error on {request.method} {request.path}: {e}', exc_info=True)
        body = {'error': 'Internal Server Error', 'timestamp': utc_timestamp()}
        if is_development(app):
            body['error'] = str(e) or body['error']
            body['stack'] = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
        return jsonify(body), 500


def create_app(config=None, square_client=None, recaptcha_client=None) -> Flask:
    """
    Create the storefront application

    Args:
        config: Config instance (default: read from the environment)
        square_client: Catalog/payments provider (default: SquareClient)
        recaptcha_client: Bot-verification provider (default: RecaptchaClient)

    Returns:
        Configured Flask app
    """
    config = config or Config()

    app = Flask(__name__, static_folder=None)
    app.config.from_object(config)
    configure_logging(app)

    # Request guard runs before CORS handling and the limiter
    register_security(app)
    CORS(
        app,
        resources={r'/api/*': {'origins': app.config['ALLOWED_ORIGINS']}},
        methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Content-Type', 'X-Requested-With'],
        supports_credentials=True,
        max_age=3600,
    )
    app.limiter = configure_rate_limits(app)

    if square_client is None:
        square_client = SquareClient(
            access_token=app.config['SQUARE_ACCESS_TOKEN'],
            environment=app.config['SQUARE_ENVIRONMENT'],
            api_version=app.config['SQUARE_API_VERSION'],
            timeout=app.config['UPSTREAM_TIMEOUT'],
        )
    if recaptcha_client is None:
        recaptcha_client = RecaptchaClient(timeout=app.config['UPSTREAM_TIMEOUT'])

    app.catalog_service = CatalogService(square_client)
    app.payment_service = PaymentService(square_client, app.config['SQUARE_LOCATION_ID'])
    app.contact_service = ContactService(
        recaptcha_client,
        app.config['RECAPTCHA_SECRET_KEY'],
        app.config['RECAPTCHA_MIN_SCORE'],
    )

    app.register_blueprint(catalog_bp, url_prefix='/api')
    app.register_blueprint(checkout_bp, url_prefix='/api')
    app.register_blueprint(contact_bp, url_prefix='/api')
    app.register_blueprint(main_bp)

    register_error_handlers(app)

    app.logger.info(f"Storefront API starting ({app.config['SQUARE_ENVIRONMENT']})")
    if not app.config.get('SQUARE_ACCESS_TOKEN'):
        app.logger.warning('SQUARE_ACCESS_TOKEN not configured')
    if not app.config.get('RECAPTCHA_SECRET_KEY'):
        app.logger.warning('RECAPTCHA_SECRET_KEY not configured for contact form')

    return app


if __name__ == '__main__':
    app = create_app()
    app.logger.info(f"Max payload size: {app.config['MAX_CONTENT_LENGTH'] // 1024}KB")
    app.run(host='0.0.0.0', port=app.config['PORT'], threaded=True,
            debug=is_development(app))

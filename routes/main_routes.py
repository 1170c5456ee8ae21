"""
Main Routes for the Storefront

Serves the static marketing site from SITE_ROOT.
"""
import os

from flask import Blueprint, abort, current_app, send_from_directory

main_bp = Blueprint('main', __name__)

STATIC_MAX_AGE = 3600


def _site_root() -> str:
    return os.path.abspath(current_app.config.get('SITE_ROOT', 'public'))


@main_bp.route('/')
def index():
    """Homepage"""
    return send_from_directory(_site_root(), 'index.html', max_age=STATIC_MAX_AGE)


@main_bp.route('/<path:filename>')
def static_file(filename):
    """Site assets; dotfiles are never served"""
    if any(part.startswith('.') for part in filename.split('/')):
        abort(404)
    return send_from_directory(_site_root(), filename, max_age=STATIC_MAX_AGE)

"""Routes package initialization"""
from .main_routes import main_bp
from .catalog_routes import catalog_bp
from .checkout_routes import checkout_bp
from .contact_routes import contact_bp

__all__ = ['main_bp', 'catalog_bp', 'checkout_bp', 'contact_bp']

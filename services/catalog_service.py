"""
Catalog Service

Reads products from the upstream catalog and reshapes them for the site.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from errors import NotFoundError
from models import Product
from utils import sanitize_field, sanitize_input

logger = logging.getLogger(__name__)

MAX_PRODUCTS = 100
MIN_PRODUCT_ID_LENGTH = 5


def _image_urls(objects: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Map IMAGE object ids to their URLs"""
    urls = {}
    for obj in objects:
        if obj.get('type') == 'IMAGE':
            url = (obj.get('image_data') or {}).get('url')
            if url:
                urls[obj.get('id')] = url
    return urls


def to_product(item: Dict[str, Any], image_urls: Optional[Dict[str, str]] = None) -> Product:
    """
    Convert a Square ITEM object into a Product

    Args:
        item: Raw catalog object of type ITEM
        image_urls: Known image id -> URL mapping

    Returns:
        Product with sanitized text fields
    """
    item_data = item.get('item_data') or {}
    image_ids = item_data.get('image_ids') or []
    image_url = None
    if image_ids:
        image_url = (image_urls or {}).get(image_ids[0])

    category_id = item_data.get('category_id')
    if not category_id and item_data.get('categories'):
        category_id = item_data['categories'][0].get('id')

    return Product(
        id=sanitize_field('product_id', item.get('id') or ''),
        name=sanitize_input(item_data.get('name') or 'Unnamed Product'),
        description=sanitize_input(item_data.get('description') or ''),
        variations=item_data.get('variations') or [],
        image_url=image_url,
        category_id=category_id,
    )


class CatalogService:
    """Product listing and lookup"""

    def __init__(self, client):
        """
        Args:
            client: Catalog provider with list_catalog_items() and get_catalog_item(id)
        """
        self.client = client

    def list_products(self) -> List[Product]:
        """All catalog items, at most MAX_PRODUCTS"""
        objects = self.client.list_catalog_items() or []
        image_urls = _image_urls(objects)
        products = [
            to_product(obj, image_urls)
            for obj in objects
            if obj.get('type') == 'ITEM' and obj.get('item_data')
        ]
        return products[:MAX_PRODUCTS]

    def get_product(self, product_id: str) -> Product:
        """
        Look up a single product

        Raises:
            NotFoundError: if the object is missing or is not an ITEM
        """
        result = self.client.get_catalog_item(product_id) or {}
        item = result.get('object')
        if not item or item.get('type') != 'ITEM':
            raise NotFoundError('Product not found')
        return to_product(item, _image_urls(result.get('related_objects') or []))

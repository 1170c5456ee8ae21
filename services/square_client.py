"""
Square API Client

Thin wrapper over Square's REST API for catalog reads and payment creation.
"""
import logging
from typing import Any, Dict, List, Optional

import requests
from requests.utils import quote

from errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

SQUARE_BASE_URLS = {
    'production': 'https://connect.squareup.com',
    'sandbox': 'https://connect.squareupsandbox.com',
}

# Upper bound on catalog pages followed in a single listing
MAX_CATALOG_PAGES = 10


class SquareClient:
    """Calls the Square Catalog and Payments APIs"""

    def __init__(self, access_token: str, environment: str = 'sandbox',
                 api_version: str = '2024-10-17', timeout: float = 10,
                 session: Optional[requests.Session] = None):
        """
        Initialize Square client

        Args:
            access_token: Square access token
            environment: 'production' or 'sandbox'
            api_version: Value of the Square-Version header
            timeout: Seconds before an outbound call is abandoned
            session: Optional requests session (tests pass a fake)
        """
        self.access_token = access_token
        self.environment = environment
        self.base_url = SQUARE_BASE_URLS.get(environment, SQUARE_BASE_URLS['sandbox'])
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.access_token}',
            'Square-Version': self.api_version,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.exceptions.Timeout:
            raise UpstreamError('Square request timed out', detail=f'{method} {path} timed out')
        except requests.exceptions.RequestException as e:
            raise UpstreamError('Square request failed', detail=str(e))

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 404:
            raise NotFoundError('Product not found', detail=_error_detail(data))
        if response.status_code >= 400:
            raise UpstreamError(
                f'Square API error ({response.status_code})',
                detail=_error_detail(data) or response.reason,
            )
        return data

    def list_catalog_items(self) -> List[Dict[str, Any]]:
        """
        List catalog ITEM and IMAGE objects

        Follows the pagination cursor for at most MAX_CATALOG_PAGES pages.

        Returns:
            Raw catalog objects
        """
        objects = []
        params = {'types': 'ITEM,IMAGE'}
        for _ in range(MAX_CATALOG_PAGES):
            data = self._request('GET', '/v2/catalog/list', params=params)
            objects.extend(data.get('objects') or [])
            cursor = data.get('cursor')
            if not cursor:
                break
            params = {'types': 'ITEM,IMAGE', 'cursor': cursor}
        logger.info(f'Fetched {len(objects)} catalog objects from Square')
        return objects

    def get_catalog_item(self, object_id: str) -> Dict[str, Any]:
        """
        Retrieve one catalog object with its related objects

        Returns:
            Dict with 'object' and 'related_objects' keys
        """
        # The id is a single path segment; '/', '?' and '#' must not reach Square unescaped
        path = '/v2/catalog/object/' + quote(object_id, safe='')
        data = self._request('GET', path, params={'include_related_objects': 'true'})
        return {
            'object': data.get('object'),
            'related_objects': data.get('related_objects') or [],
        }

    def create_payment(self, source_id: str, amount: int, currency: str, note: str,
                       idempotency_key: str, location_id: str) -> Optional[Dict[str, Any]]:
        """
        Create a payment

        Returns:
            The payment object, or None if Square returned none
        """
        body = {
            'source_id': source_id,
            'idempotency_key': idempotency_key,
            'amount_money': {'amount': amount, 'currency': currency},
            'location_id': location_id,
        }
        if note:
            body['note'] = note
        data = self._request('POST', '/v2/payments', json=body)
        return data.get('payment')


def _error_detail(data: Dict[str, Any]) -> Optional[str]:
    errors = data.get('errors') if isinstance(data, dict) else None
    if not errors:
        return None
    return '; '.join(
        f"{err.get('code', 'ERROR')}: {err.get('detail', '')}".strip() for err in errors
    )

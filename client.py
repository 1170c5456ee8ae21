"""
Storefront API Client

Python counterpart of the site's JavaScript integration: fetches products and
submits payments and contact messages, retrying failed fetches with linear
backoff.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:3000/api'


class StoreClientError(Exception):
    """Request to the storefront API failed after all attempts"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class StoreClient:
    """Client for the storefront API"""

    def __init__(self, api_url: str = DEFAULT_API_URL, max_attempts: int = 3,
                 retry_delay: float = 1.0, timeout: float = 10,
                 session: Optional[requests.Session] = None, sleep=time.sleep):
        """
        Args:
            api_url: Base URL of the API, including the /api prefix
            max_attempts: Tries per request before giving up
            retry_delay: Base delay in seconds, multiplied by the attempt number
            timeout: Per-request timeout in seconds
            session: Optional requests session
            sleep: Sleep function (tests pass a recorder)
        """
        self.api_url = api_url.rstrip('/')
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep

    def _fetch(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Send a request, retrying network failures and 5xx responses on GETs

        4xx responses are raised immediately. POSTs are sent once.
        """
        url = f'{self.api_url}{path}'
        last_error = None
        attempts = self.max_attempts if method == 'GET' else 1

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
                try:
                    data = response.json()
                except ValueError:
                    data = {}

                if response.status_code < 400:
                    return data
                message = data.get('error') or f'HTTP {response.status_code}'
                if response.status_code < 500:
                    raise StoreClientError(message, response.status_code, data)
                last_error = StoreClientError(message, response.status_code, data)
            except requests.exceptions.RequestException as e:
                last_error = StoreClientError(str(e))

            logger.warning(f'{method} {path} attempt {attempt}/{attempts} failed: {last_error}')
            if attempt < attempts:
                self.sleep(self.retry_delay * attempt)

        raise last_error

    def fetch_products(self) -> List[Dict[str, Any]]:
        """All products; an empty list if the API reports failure"""
        data = self._fetch('GET', '/products')
        if not data.get('success'):
            logger.error(f"Failed to fetch products: {data.get('error')}")
            return []
        return data.get('products', [])

    def fetch_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Single product, or None if it does not exist"""
        try:
            data = self._fetch('GET', f'/products/{product_id}')
        except StoreClientError as e:
            if e.status_code == 404:
                return None
            raise
        return data.get('product')

    def process_payment(self, source_id: str, amount: int, currency: str = 'USD',
                        note: str = 'Sisters Promise purchase') -> Dict[str, Any]:
        """Submit a payment; returns the payment confirmation"""
        data = self._fetch('POST', '/checkout', json={
            'sourceId': source_id,
            'amount': amount,
            'currency': currency,
            'note': note,
        })
        return data.get('payment', {})

    def submit_contact(self, name: str, email: str, message: str, recaptcha_token: str) -> str:
        """Send the contact form; returns the submission reference"""
        data = self._fetch('POST', '/contact', json={
            'name': name,
            'email': email,
            'message': message,
            'recaptchaToken': recaptcha_token,
        })
        return data.get('reference')

"""Pytest fixtures: test app with stub upstream providers."""
import time

import pytest
import requests

from app import create_app
from config import TestingConfig
from models import VerificationResult

ITEM = {
    'type': 'ITEM',
    'id': 'ITEM_ROSE_SOAP',
    'item_data': {
        'name': 'Rose Shea Soap',
        'description': 'Handmade shea butter soap',
        'category_id': 'CAT_SOAPS',
        'image_ids': ['IMG_ROSE'],
        'variations': [{
            'type': 'ITEM_VARIATION',
            'id': 'VAR_ROSE',
            'item_variation_data': {
                'price_money': {'amount': 1299, 'currency': 'USD'},
            },
        }],
    },
}

IMAGE = {
    'type': 'IMAGE',
    'id': 'IMG_ROSE',
    'image_data': {'url': 'https://items-images.example.com/rose.jpg'},
}

PAYMENT = {
    'id': 'pay_1',
    'status': 'COMPLETED',
    'amount_money': {'amount': 1299, 'currency': 'USD'},
}


class StubSquareClient:
    """Catalog/payments provider recording every call"""

    def __init__(self):
        self.calls = []
        self.objects = [ITEM, IMAGE]
        self.item = {'object': ITEM, 'related_objects': [IMAGE]}
        self.payment = dict(PAYMENT)
        self.error = None

    def list_catalog_items(self):
        self.calls.append(('list_catalog_items',))
        if self.error:
            raise self.error
        return self.objects

    def get_catalog_item(self, object_id):
        self.calls.append(('get_catalog_item', object_id))
        if self.error:
            raise self.error
        return self.item

    def create_payment(self, source_id, amount, currency, note, idempotency_key, location_id):
        self.calls.append(('create_payment', {
            'source_id': source_id,
            'amount': amount,
            'currency': currency,
            'note': note,
            'idempotency_key': idempotency_key,
            'location_id': location_id,
        }))
        if self.error:
            raise self.error
        return self.payment


class StubVerifier:
    """Bot-verification provider with a fixed verdict"""

    def __init__(self, success=True, score=0.9):
        self.success = success
        self.score = score
        self.error = None
        self.calls = []

    def verify(self, token, secret, remote_ip=None):
        self.calls.append((token, secret, remote_ip))
        if self.error:
            raise self.error
        return VerificationResult(success=self.success, score=self.score)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason='OK'):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f'{self.status_code} {self.reason}')


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def post(self, url, **kwargs):
        return self.request('POST', url, **kwargs)


class FakeClock:
    def __init__(self, start=1700000000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def square():
    return StubSquareClient()


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def config():
    return TestingConfig()


@pytest.fixture
def app(config, square, verifier):
    return create_app(config, square_client=square, recaptcha_client=verifier)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock(monkeypatch):
    """Controls time.time for the rate limiter's in-memory storage"""
    fake = FakeClock()
    monkeypatch.setattr(time, 'time', fake)
    return fake

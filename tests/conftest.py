import json

import pytest

from .fakes import TEST_KEY_SECRET, TEST_WEBHOOK_SECRET, FakeGateway
from .helpers import auth_header, order_body


@pytest.fixture(autouse=True)
def storefront_settings(settings):
    settings.DEBUG = False
    settings.PAYMENT_GATEWAY_BACKEND = 'tests.fakes.FakeGateway'
    settings.IDENTITY_VERIFIER_BACKEND = 'tests.fakes.FakeIdentityVerifier'
    settings.RAZORPAY_KEY_SECRET = TEST_KEY_SECRET
    settings.RAZORPAY_WEBHOOK_SECRET = TEST_WEBHOOK_SECRET
    settings.JWT_SECRET_KEY = 'test-jwt-secret-with-enough-length-for-hs256'
    FakeGateway.reset()
    yield settings
    FakeGateway.reset()


@pytest.fixture
def post_json(client):
    def _post(path, body, **extra):
        return client.post(path, data=json.dumps(body), content_type='application/json', **extra)
    return _post


@pytest.fixture
def create_order(post_json):
    """Creates an order through the API and returns its Razorpay order id."""
    def _create(uid='U1', **overrides):
        response = post_json('/api/create-order', order_body(**overrides), **auth_header(uid))
        assert response.status_code == 201, response.content
        return response.json()['order']['id']
    return _create

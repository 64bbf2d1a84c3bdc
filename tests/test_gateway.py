import json
from unittest import mock

import pytest
import requests
from django.core.exceptions import ImproperlyConfigured

from orders.gateway import RazorpayGateway, get_payment_gateway, hmac_sha256_hex
from storefront_backend.errors import GatewayError
from .fakes import FakeGateway


@pytest.fixture
def razorpay_settings(settings):
    settings.RAZORPAY_KEY_ID = 'rzp_test_key'
    settings.RAZORPAY_KEY_SECRET = 'rzp_test_secret'
    settings.RAZORPAY_API_BASE = 'https://api.razorpay.test'
    return settings


def _response(status_code, payload):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload).encode()
    return response


def test_create_remote_order_posts_to_orders_api(razorpay_settings):
    gateway = RazorpayGateway()

    with mock.patch('orders.gateway.requests.post', return_value=_response(200, {'id': 'order_abc', 'amount': 500})) as post:
        order = gateway.create_remote_order(500, 'INR', 'R1', notes={'userId': 'U1'})

    assert order['id'] == 'order_abc'
    args, kwargs = post.call_args
    assert args[0] == 'https://api.razorpay.test/v1/orders'
    assert kwargs['auth'] == ('rzp_test_key', 'rzp_test_secret')
    assert kwargs['json'] == {'amount': 500, 'currency': 'INR', 'receipt': 'R1', 'notes': {'userId': 'U1'}}


def test_http_error_becomes_gateway_error(razorpay_settings):
    gateway = RazorpayGateway()

    with mock.patch('orders.gateway.requests.post', return_value=_response(400, {'error': {'description': 'bad amount'}})):
        with pytest.raises(GatewayError):
            gateway.create_remote_order(500, 'INR', 'R1')


def test_network_error_becomes_gateway_error(razorpay_settings):
    gateway = RazorpayGateway()

    with mock.patch('orders.gateway.requests.post', side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(GatewayError):
            gateway.create_remote_order(500, 'INR', 'R1')


def test_response_without_id_is_rejected(razorpay_settings):
    gateway = RazorpayGateway()

    with mock.patch('orders.gateway.requests.post', return_value=_response(200, {'status': 'created'})):
        with pytest.raises(GatewayError):
            gateway.create_remote_order(500, 'INR', 'R1')


def test_missing_credentials_are_a_configuration_error(settings):
    settings.RAZORPAY_KEY_ID = None
    settings.RAZORPAY_KEY_SECRET = None

    with pytest.raises(ImproperlyConfigured):
        RazorpayGateway()


def test_payment_signature_is_hmac_of_order_and_payment(razorpay_settings):
    gateway = RazorpayGateway()
    expected = hmac_sha256_hex('rzp_test_secret', 'order_abc|pay_1')

    assert gateway.verify_payment_signature('order_abc', 'pay_1', expected)
    assert not gateway.verify_payment_signature('order_abc', 'pay_2', expected)
    assert not gateway.verify_payment_signature('order_abc', 'pay_1', None)


def test_backend_is_resolved_from_settings():
    assert isinstance(get_payment_gateway(), FakeGateway)

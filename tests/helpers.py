import json

from orders.gateway import hmac_sha256_hex
from .fakes import TEST_KEY_SECRET, TEST_WEBHOOK_SECRET


def auth_header(uid, phone='+919999999999'):
    return {'HTTP_AUTHORIZATION': f'Bearer valid:{uid}:{phone}'}


def payment_signature(order_id, payment_id):
    return hmac_sha256_hex(TEST_KEY_SECRET, f"{order_id}|{payment_id}")


def webhook_signature(raw_body):
    return hmac_sha256_hex(TEST_WEBHOOK_SECRET, raw_body)


def order_body(**overrides):
    body = {
        'amount': 500,
        'currency': 'INR',
        'receipt': 'R1',
        'items': [{'sku': 'A', 'qty': 1}],
        'address': [{'email': 'a@b.com', 'firstName': 'Asha', 'city': 'Pune', 'pincode': '411001'}],
    }
    body.update(overrides)
    return body


def refund_event(payment_id, event='refund.processed'):
    return json.dumps({
        'entity': 'event',
        'event': event,
        'payload': {
            'refund': {
                'entity': {'id': 'rfnd_1', 'payment_id': payment_id, 'amount': 500},
            },
        },
    }).encode()

import pytest

from orders.models import Order
from .helpers import auth_header, payment_signature

pytestmark = pytest.mark.django_db


@pytest.fixture
def verify(post_json):
    def _verify(order_id, payment_id='pay_1', signature=None, uid='U1'):
        if signature is None:
            signature = payment_signature(order_id, payment_id)
        body = {'order_id': order_id, 'payment_id': payment_id, 'signature': signature}
        return post_json('/api/verify-payment', body, **auth_header(uid))
    return _verify


def snapshot(order_id):
    order = Order.objects.get(razorpay_order_id=order_id)
    return (order.status, order.razorpay_payment_id, order.razorpay_signature, order.paid_at)


def test_valid_payment_marks_order_paid(create_order, verify, django_capture_on_commit_callbacks, mailoutbox):
    order_id = create_order()

    with django_capture_on_commit_callbacks(execute=True):
        response = verify(order_id)

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['order']['status'] == 'paid'
    assert body['order']['amount'] == 500
    assert body['order']['currency'] == 'INR'
    assert body['order']['paid_at'] is not None

    order = Order.objects.get(razorpay_order_id=order_id)
    assert order.status == Order.Status.PAID
    assert order.razorpay_payment_id == 'pay_1'
    assert order.razorpay_signature == payment_signature(order_id, 'pay_1')
    assert order.paid_at is not None

    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ['a@b.com']
    assert mailoutbox[0].subject == 'Thank you for your order!'


def test_second_verification_is_rejected_as_duplicate(create_order, verify):
    order_id = create_order()
    verify(order_id)
    after_first = snapshot(order_id)

    response = verify(order_id)

    assert response.status_code == 400
    assert response.json()['error'] == 'Payment already processed'
    assert snapshot(order_id) == after_first


def test_forged_signature_leaves_order_unchanged(create_order, verify):
    order_id = create_order()
    before = snapshot(order_id)

    response = verify(order_id, signature='0' * 64)

    assert response.status_code == 400
    assert response.json()['code'] == 'invalid_signature'
    assert snapshot(order_id) == before


def test_signature_for_another_payment_is_rejected(create_order, verify):
    order_id = create_order()

    response = verify(order_id, payment_id='pay_2', signature=payment_signature(order_id, 'pay_1'))

    assert response.status_code == 400
    assert Order.objects.get(razorpay_order_id=order_id).status == Order.Status.CREATED


def test_unknown_order_is_not_found(verify):
    response = verify('order_missing')

    assert response.status_code == 404
    assert response.json()['error'] == 'Order not found'


def test_other_users_order_is_forbidden(create_order, verify):
    order_id = create_order(uid='U1')
    before = snapshot(order_id)

    response = verify(order_id, uid='U2')

    assert response.status_code == 403
    assert response.json()['error'] == 'Unauthorized access to order'
    assert snapshot(order_id) == before


def test_missing_fields_are_validation_errors(post_json):
    response = post_json('/api/verify-payment', {'order_id': 'order_1'}, **auth_header('U1'))

    assert response.status_code == 400
    fields = {error['field'] for error in response.json()['errors']}
    assert fields == {'payment_id', 'signature'}


def test_requires_identity(create_order, post_json):
    order_id = create_order()
    body = {'order_id': order_id, 'payment_id': 'pay_1', 'signature': payment_signature(order_id, 'pay_1')}

    response = post_json('/api/verify-payment', body)

    assert response.status_code == 401
    assert Order.objects.get(razorpay_order_id=order_id).status == Order.Status.CREATED


def test_notification_failure_does_not_fail_payment(create_order, verify, django_capture_on_commit_callbacks, monkeypatch):
    def broken_send_mail(*args, **kwargs):
        raise ConnectionError("smtp down")

    monkeypatch.setattr('orders.notifications.send_mail', broken_send_mail)
    order_id = create_order()

    with django_capture_on_commit_callbacks(execute=True):
        response = verify(order_id)

    assert response.status_code == 200
    assert Order.objects.get(razorpay_order_id=order_id).status == Order.Status.PAID


def test_malformed_stored_address_quarantines_order(create_order, verify, django_capture_on_commit_callbacks, mailoutbox):
    order_id = create_order()
    Order.objects.filter(razorpay_order_id=order_id).update(address="{not json")

    with django_capture_on_commit_callbacks(execute=True):
        response = verify(order_id)

    assert response.status_code == 200
    order = Order.objects.get(razorpay_order_id=order_id)
    assert order.status == Order.Status.PAID
    assert order.needs_review is True
    assert order.review_reason.startswith('address:')
    assert mailoutbox == []


def test_refunded_order_cannot_be_paid_again(create_order, verify):
    order_id = create_order()
    verify(order_id)
    Order.objects.filter(razorpay_order_id=order_id).update(status=Order.Status.REFUNDED)

    response = verify(order_id, payment_id='pay_2')

    assert response.status_code == 400
    assert Order.objects.get(razorpay_order_id=order_id).status == Order.Status.REFUNDED

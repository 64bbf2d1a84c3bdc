import pytest
from django.contrib.auth import get_user_model

from accounts.auth import issue_admin_token
from .helpers import auth_header

pytestmark = pytest.mark.django_db


def test_customer_sees_own_orders(client, create_order):
    order_id = create_order(uid='U1')
    create_order(uid='U2', receipt='R2')

    response = client.get('/api/get-orders/U1', **auth_header('U1'))

    assert response.status_code == 200
    rows = response.json()
    assert [row['razorpay_order_id'] for row in rows] == [order_id]
    assert rows[0]['items'] == [{'sku': 'A', 'qty': 1}]


def test_customer_cannot_list_someone_elses_orders(client, create_order):
    create_order(uid='U1')

    response = client.get('/api/get-orders/U1', **auth_header('U2'))

    assert response.status_code == 403


def test_no_orders_is_not_found(client):
    response = client.get('/api/get-orders/U1', **auth_header('U1'))

    assert response.status_code == 404


def test_admin_lists_all_orders(client, create_order):
    create_order(uid='U1')
    create_order(uid='U2', receipt='R2')
    admin = get_user_model().objects.create_user('boss', password='pw', is_staff=True)

    response = client.get('/api/get-orders/allorders', HTTP_AUTHORIZATION=f'Bearer {issue_admin_token(admin)}')

    assert response.status_code == 200
    assert {row['user_id'] for row in response.json()} == {'U1', 'U2'}

from django.urls import path
from . import views

urlpatterns = [
    path('create-order', views.create_order, name='create-order'),
    path('verify-payment', views.verify_payment, name='verify-payment'),
    path('webhook', views.razorpay_webhook, name='razorpay-webhook'),
    path('get-orders/allorders', views.all_orders, name='all-orders'),
    path('get-orders/<str:uid>', views.orders_for_user, name='orders-for-user'),
]

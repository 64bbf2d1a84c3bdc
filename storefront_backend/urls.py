from django.urls import include, path

from . import views

urlpatterns = [
    path('', views.index, name='index'),
    path('db-health', views.db_health, name='db-health'),
    path('api/', include('accounts.urls')),
    path('api/', include('orders.urls')),
    path('api/coupon/', include('coupons.urls')),
    path('api/feedback/', include('feedback.urls')),
    path('admin/', include('accounts.admin_urls')),
]

handler404 = 'storefront_backend.views.not_found'
handler500 = 'storefront_backend.views.server_error'

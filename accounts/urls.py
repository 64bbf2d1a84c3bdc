from django.urls import path
from . import views

urlpatterns = [
    path('auth/', views.customers, name='customers'),
    path('address/', views.submit_address, name='submit-address'),
    path('get-address/<str:uid>', views.get_address, name='get-address'),
]

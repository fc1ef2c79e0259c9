from django.urls import path
from . import views

app_name = 'shopkeeper'

urlpatterns = [
    path('customers/<str:shop_id>/', views.shop_customers, name='customers'),
    path('quota/<int:user_id>/', views.customer_quota, name='quota'),
    path('quota-history/<int:user_id>/', views.quota_history, name='quota-history'),
]

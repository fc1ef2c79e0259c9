from django.urls import path
from . import views

app_name = 'stocks'

urlpatterns = [
    path('', views.stock_list, name='list'),
    path('update/', views.stock_delta, name='update'),
    path('allocate/', views.government_allocation, name='allocate'),
    path('audit/<str:shop_id>/', views.stock_audit, name='audit'),
    path('<str:item_code>/', views.stock_correction, name='correct'),
]

from django.urls import path
from . import views

app_name = 'allocations'

urlpatterns = [
    path('', views.period_allocations, name='period'),
    path('my/', views.my_allocations, name='my'),
    path('history/<int:user_id>/', views.allocation_history, name='history'),
]

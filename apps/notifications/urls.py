from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('', views.notifications, name='notifications'),
    path('<int:notification_id>/ack/', views.acknowledge, name='ack'),
    path('broadcast/card-type/', views.broadcast_card_type, name='broadcast-card-type'),
]

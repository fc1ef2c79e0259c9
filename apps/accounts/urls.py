from django.urls import path
from . import views

app_name = 'auth'

urlpatterns = [
    path('request-code/', views.request_code, name='request-code'),
    path('verify-code/', views.verify_code, name='verify-code'),
    path('me/', views.get_current_user, name='me'),
]

from django.urls import path
from . import views

app_name = 'tokens'

urlpatterns = [
    path('', views.tokens, name='tokens'),
    path('my/', views.my_token, name='my'),
    path('<str:token_id>/', views.token_status, name='status'),
]

from django.urls import path
from . import views

app_name = 'complaints'

urlpatterns = [
    path('', views.complaints, name='complaints'),
    path('<int:complaint_id>/', views.complaint_status, name='status'),
]

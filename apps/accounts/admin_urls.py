from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('', views.user_list, name='list'),
    path('stats/', views.user_stats, name='stats'),
    path('<int:user_id>/', views.user_detail, name='detail'),
    path('<int:user_id>/flag/', views.flag_user, name='flag'),
    path('<int:user_id>/active/', views.set_active, name='active'),
    path('<int:user_id>/allocations/', views.override_allocations, name='allocations'),
]

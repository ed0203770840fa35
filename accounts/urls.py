# accounts/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('auth/csrf/', views.csrf, name='csrf'),
    path('auth/register/', views.register, name='register'),
    path('auth/login/', views.login_view, name='login'),
    path('auth/logout/', views.logout_view, name='logout'),
    path('auth/me/', views.me, name='me'),                                   # GET, PATCH
    path('upload/', views.upload_asset, name='upload'),

    # admin console
    path('admin/overview/', views.admin_overview, name='admin_overview'),
    path('admin/users/', views.admin_users, name='admin_users'),
    path('admin/users/<int:user_id>/', views.admin_delete_user, name='admin_delete_user'),
]

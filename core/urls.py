"""Auth API URLs – JSON endpoints under /api/auth/."""
from django.urls import path

from . import views

app_name = 'auth_api'

urlpatterns = [
    path('csrf', views.csrf_view, name='csrf'),
    path('register', views.register_view, name='register'),
    path('login', views.login_view, name='login'),
    path('logout', views.logout_view, name='logout'),
    path('me', views.me_view, name='me'),
    path('change-password', views.change_password_view, name='change_password'),
]

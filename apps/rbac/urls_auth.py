"""
URL routing for authentication endpoints.
"""
from django.urls import path
from apps.rbac.views_auth import RegistrationView, LoginView, LogoutView, MeView

app_name = 'auth'

urlpatterns = [
    path('register', RegistrationView.as_view(), name='register'),
    path('login', LoginView.as_view(), name='login'),
    path('logout', LogoutView.as_view(), name='logout'),
    path('me', MeView.as_view(), name='me'),
]

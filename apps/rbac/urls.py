"""
URL routing for user management endpoints.
"""
from django.urls import path
from apps.rbac.views import UserListView, UserDetailView

app_name = 'users'

urlpatterns = [
    path('users', UserListView.as_view(), name='user-list'),
    path('users/<uuid:user_id>', UserDetailView.as_view(), name='user-detail'),
]

"""
URL routing for catalog endpoints.
"""
from django.urls import path
from apps.catalog.views import (
    AccountListView, AccountDetailView,
    EmployeeListView, EmployeeDetailView,
    ProjectListView, ProjectDetailView,
)

app_name = 'catalog'

urlpatterns = [
    path('accounts', AccountListView.as_view(), name='account-list'),
    path('accounts/<uuid:entity_id>', AccountDetailView.as_view(), name='account-detail'),
    path('employees', EmployeeListView.as_view(), name='employee-list'),
    path('employees/<uuid:entity_id>', EmployeeDetailView.as_view(), name='employee-detail'),
    path('projects', ProjectListView.as_view(), name='project-list'),
    path('projects/<uuid:entity_id>', ProjectDetailView.as_view(), name='project-detail'),
]

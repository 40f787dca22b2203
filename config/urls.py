"""
URL configuration for Ledger Keeper.
"""
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # Service index and health check
    path('', include('apps.core.urls')),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # Authentication endpoints
    path('api/auth/', include('apps.rbac.urls_auth')),  # Register, login, logout, me

    # User management (Admin)
    path('api/', include('apps.rbac.urls')),

    # Catalogs: accounts, employees, projects
    path('api/', include('apps.catalog.urls')),

    # Transaction records
    path('api/', include('apps.records.urls')),
]

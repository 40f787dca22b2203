"""
Core URLs.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('', views.ServiceIndexView.as_view(), name='service-index'),
    path('health', views.HealthCheckView.as_view(), name='health-check'),
]

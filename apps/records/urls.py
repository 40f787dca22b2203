"""
URL routing for record endpoints.
"""
from django.urls import path
from apps.records.views import RecordListView, RecordDetailView

app_name = 'records'

urlpatterns = [
    path('records', RecordListView.as_view(), name='record-list'),
    path('records/<uuid:record_id>', RecordDetailView.as_view(), name='record-detail'),
]

"""Reports App URLs - Event and parish reports.

Prefix: /api/
Routes:
    GET /api/reports/events/<event_id>/location/   - Patients seen at the event
    GET /api/reports/events/<event_id>/services/   - Patients per service (?service=<id>)
    GET /api/reports/parishes/                     - Patients per parish (?event=<id>&parish=<name>)
"""

from django.urls import path

from healthfair_backend.reports.views import LocationReportView, ParishReportView, ServiceReportView

app_name = 'reports'

urlpatterns = [
    path('reports/events/<int:event_id>/location/', LocationReportView.as_view(), name='location'),
    path('reports/events/<int:event_id>/services/', ServiceReportView.as_view(), name='services'),
    path('reports/parishes/', ParishReportView.as_view(), name='parishes'),
]

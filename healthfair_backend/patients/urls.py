"""Patients App URLs - Patients, registration, visits & screening.

Prefix: /api/
Routes:
    GET        /api/patients/                          - Search (?q=name|number|phone|email)
    GET/PATCH  /api/patients/<pk>/                     - Patient detail
    GET        /api/patients/<pk>/visits/              - Visit history (?event=<id>&location=<id>)
    POST       /api/events/<event_id>/registrations/   - Register new patient + queue (atomic)
    GET/POST   /api/events/<event_id>/visits/          - Event visits / check in known patient
    POST       /api/visits/<visit_id>/services/        - Queue a visit for more services
    GET/PUT    /api/visits/<visit_id>/screening/       - Basic screening results of a visit
"""

from django.urls import path

from healthfair_backend.patients.views import (
    BasicScreeningView,
    EventVisitListCreateView,
    PatientDetailView,
    PatientListView,
    PatientVisitHistoryView,
    RegistrationView,
    VisitServicesView,
)

app_name = 'patients'

urlpatterns = [
    path('patients/', PatientListView.as_view(), name='list'),
    path('patients/<int:pk>/', PatientDetailView.as_view(), name='detail'),
    path('patients/<int:pk>/visits/', PatientVisitHistoryView.as_view(), name='history'),
    path('events/<int:event_id>/registrations/', RegistrationView.as_view(), name='register'),
    path('events/<int:event_id>/visits/', EventVisitListCreateView.as_view(), name='visits'),
    path('visits/<int:visit_id>/services/', VisitServicesView.as_view(), name='visit-services'),
    path('visits/<int:visit_id>/screening/', BasicScreeningView.as_view(), name='visit-screening'),
]

"""Events App URLs - Fairs & reference data.

Prefix: /api/
Routes:
    GET/POST    /api/locations/      - Locations (GET cached)
    GET/POST    /api/services/       - Services (GET cached)
    GET/POST    /api/doctors/        - Doctors (GET cached)
    GET/POST    /api/nurses/         - Nurses (GET cached)
    GET/POST    /api/events/         - Events (?status=open|pending|closed)
    GET/PATCH   /api/events/<pk>/    - Event detail
"""

from django.urls import path

from healthfair_backend.events.views import (
    DoctorListCreateView,
    EventDetailView,
    EventListCreateView,
    LocationListCreateView,
    NurseListCreateView,
    ServiceListCreateView,
)

app_name = 'events'

urlpatterns = [
    path('locations/', LocationListCreateView.as_view(), name='locations'),
    path('services/', ServiceListCreateView.as_view(), name='services'),
    path('doctors/', DoctorListCreateView.as_view(), name='doctors'),
    path('nurses/', NurseListCreateView.as_view(), name='nurses'),
    path('events/', EventListCreateView.as_view(), name='list'),
    path('events/<int:pk>/', EventDetailView.as_view(), name='detail'),
]

"""HealthFair URL Configuration.

API routes:
    /api/health/, /api/auth/                      - Health check & authentication (core)
    /api/locations|services|doctors|nurses/       - Reference data (events)
    /api/events/                                  - Fairs (events)
    /api/patients/, /api/events/<id>/visits/ ...  - Patients & registration (patients)
    /api/events/<id>/queue/, /api/queue/<id>/...  - Queue boards & status (service_queue)
    /api/reports/                                 - Event & parish reports (reports)
"""

from django.http import HttpResponse
from django.urls import include, path

from healthfair_backend.core.admin import healthfair_admin_site


def root(request):
    """Plain-text root endpoint (doubles as a liveness check)."""
    return HttpResponse("HealthFair backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", healthfair_admin_site.urls),

    path("api/", include("healthfair_backend.core.urls")),
    path("api/", include("healthfair_backend.events.urls")),
    path("api/", include("healthfair_backend.patients.urls")),
    path("api/", include("healthfair_backend.service_queue.urls")),
    path("api/", include("healthfair_backend.reports.urls")),
]

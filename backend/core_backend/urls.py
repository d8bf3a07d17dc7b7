"""
URL configuration for core_backend project.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.conf.urls.static import static
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    # The orders app registers its own "orders" and "tables" prefixes.
    path("api/", include("orders.urls")),
    path("api/", include("products.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/kds/", include("kds.urls")),
    path("api/print-jobs/", include("printing.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

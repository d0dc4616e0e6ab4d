from django.conf import settings
from django.urls import path, include
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .settings.base import API_PREFIX, API_VERSION, HEALTH_INFO


def health_view(_request):
    return JsonResponse({"status": "ok", **HEALTH_INFO(settings.DEBUG)})


def index_view(_request):
    info = HEALTH_INFO(settings.DEBUG)
    return JsonResponse({
        "name": info["name"],
        "version": info["version"],
        "endpoints": {
            "POST /extract-nik": {
                "description": "Extract NIK from KTP image using base64 or URL",
                "body": {
                    "image": "Base64 string or image URL (required)",
                    "type": "base64 or url (optional, auto-detected)",
                },
            },
            "POST /extract": {
                "description": "Extract NIK from uploaded KTP file",
                "body": "multipart/form-data with file field",
                "query": {"crop": "true to keep only the top band", "cropHeight": "crop height in px (default 100)"},
            },
            "POST /debug-ocr": {
                "description": "Raw OCR text of an uploaded file, without extraction",
                "body": "multipart/form-data with file field",
            },
            "GET /health": {"description": "Health check endpoint"},
            f"GET /{API_PREFIX}/{API_VERSION}/docs/": {"description": "Swagger UI"},
        },
    })


urlpatterns = [
    path("", index_view, name="index"),
    path("health", health_view, name="health"),
    path("health/", health_view),

    # OpenAPI
    path(f"{API_PREFIX}/{API_VERSION}/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(f"{API_PREFIX}/{API_VERSION}/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("", include("kyc.ocr.urls.ocr_urls")),
]

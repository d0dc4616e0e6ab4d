"""
Base settings for KTP Scan : extraction du NIK depuis une image de KTP
- Django 5.x / DRF 3.x
- OCR externe (OCR.space) via httpx
- Compression d'image (Pillow) avant envoi
- drf-spectacular (Swagger)
- CORS (django-cors-headers)
- Logging structuré
"""


from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent.parent

# ------------------------------------------------------------------------------
# ENV
# ------------------------------------------------------------------------------
def env(key: str, default=None, cast=None):
    val = os.getenv(key, default)
    if cast and val is not None:
        try:
            return cast(val)
        except (TypeError, ValueError):
            return default
    return val

SECRET_KEY = env("SECRET_KEY", "change-me")
DEBUG = False  # override in dev.py

ALLOWED_HOSTS = [h.strip() for h in env("ALLOWED_HOSTS", "127.0.0.1,localhost").split(",") if h.strip()]

# ------------------------------------------------------------------------------
# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS = [
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "drf_spectacular_sidecar",
]

LOCAL_APPS = [
    "core",
    "kyc",
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "ktpscan.urls"
WSGI_APPLICATION = "ktpscan.wsgi.application"
ASGI_APPLICATION = "ktpscan.asgi.application"

# ------------------------------------------------------------------------------
# DATABASE
# ------------------------------------------------------------------------------
# Aucun état persistant : chaque requête est traitée de bout en bout en mémoire.
DATABASES = {}

# ------------------------------------------------------------------------------
# I18N / TZ
# ------------------------------------------------------------------------------
LANGUAGE_CODE = "id"
TIME_ZONE = env("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

# ------------------------------------------------------------------------------
# STATIC
# ------------------------------------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# ------------------------------------------------------------------------------
# CORS
# ------------------------------------------------------------------------------
CORS_ORIGIN = env("CORS_ORIGIN", "http://localhost:3000")
CORS_ALLOWED_ORIGINS = [CORS_ORIGIN]
CORS_ALLOW_CREDENTIALS = True

# ------------------------------------------------------------------------------
# REST FRAMEWORK (DRF)
# ------------------------------------------------------------------------------
REST_FRAMEWORK = {
    # API publique, pas de session ni d'utilisateur
    "DEFAULT_AUTHENTICATION_CLASSES": (),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.AllowAny",
    ),
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": (
        "rest_framework.renderers.JSONRenderer",
    ),
    "DEFAULT_PARSER_CLASSES": (
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.MultiPartParser",
        "rest_framework.parsers.FormParser",
    ),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.exceptions.envelope_exception_handler",
}

# Spectacular (OpenAPI)
SPECTACULAR_SETTINGS = {
    "TITLE": env("OPENAPI_TITLE", "KTP NIK Extractor API"),
    "DESCRIPTION": "Extraction du NIK et du nom depuis une image de KTP (OCR.space + heuristiques regex).",
    "VERSION": env("OPENAPI_VERSION", "1.0.0"),
    "SERVE_INCLUDE_SCHEMA": False,
    "SWAGGER_UI_DIST": "SIDECAR",
    "SWAGGER_UI_FAVICON_HREF": "SIDECAR",
    "COMPONENT_SPLIT_REQUEST": True,
    "SERVE_PERMISSIONS": ["rest_framework.permissions.AllowAny"],
    "SERVE_AUTHENTICATION": [],
}

# ------------------------------------------------------------------------------
# UPLOAD POLICIES
# ------------------------------------------------------------------------------
DATA_UPLOAD_MAX_MEMORY_SIZE = 50 * 1024 * 1024  # 50MB
FILE_UPLOAD_MAX_MEMORY_SIZE = 50 * 1024 * 1024

# ------------------------------------------------------------------------------
# OCR
# ------------------------------------------------------------------------------
OCR_PROVIDER = env("OCR_PROVIDER", "ocrspace")  # "ocrspace" | "mock"
OCR_API_KEY = env("OCR_API_KEY", "helloworld")
OCR_API_URL = env("OCR_API_URL", "https://api.ocr.space/parse/image")
OCR_LANGUAGE = env("OCR_LANGUAGE", "auto")  # "auto" n'est supporté que par le moteur 2
OCR_ENGINE = env("OCR_ENGINE", 2, cast=int)
OCR_TIMEOUT = env("OCR_TIMEOUT", 60.0, cast=float)  # secondes

# Limite OCR.space : 1024 KB par image
OCR_MAX_FILE_SIZE = env("OCR_MAX_FILE_SIZE", 1024 * 1024, cast=int)
OCR_COMPRESSION_QUALITY = env("OCR_COMPRESSION_QUALITY", 80, cast=int)  # JPEG 1-100
OCR_MAX_DIMENSION = env("OCR_MAX_DIMENSION", 2000, cast=int)
OCR_MAX_COMPRESSION_ATTEMPTS = env("OCR_MAX_COMPRESSION_ATTEMPTS", 5, cast=int)
OCR_DEFAULT_CROP_HEIGHT = env("OCR_DEFAULT_CROP_HEIGHT", 100, cast=int)  # px, bandeau NIK

# ------------------------------------------------------------------------------
# SECURITY
# ------------------------------------------------------------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# ------------------------------------------------------------------------------
# LOGGING (JSON friendly)
# ------------------------------------------------------------------------------
LOG_LEVEL = env("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "logging.Formatter",
            "format": '{"ts":"%(asctime)s","lvl":"%(levelname)s","name":"%(name)s","msg":"%(message)s","module":"%(module)s","line":%(lineno)d}',
        },
        "simple": {"format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if env("LOG_JSON", "1") == "1" else "simple",
        },
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "ktpscan": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

# ------------------------------------------------------------------------------
# API VERSIONING
# ------------------------------------------------------------------------------
API_PREFIX = "api"
API_VERSION = "v1"

# ------------------------------------------------------------------------------
# HEALTHCHECK
# ------------------------------------------------------------------------------
def HEALTH_INFO(debug: bool = False):
    return {
        "name": "KTP NIK Extractor API",
        "version": SPECTACULAR_SETTINGS["VERSION"],
        "env": "dev" if debug else "prod",
    }

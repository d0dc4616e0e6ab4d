from .base import *

DEBUG = False

SECRET_KEY = "test-secret"
ALLOWED_HOSTS = ["testserver", "localhost"]

# Jamais d'appel réseau en tests
OCR_PROVIDER = "mock"
OCR_API_KEY = "test-key"

MIDDLEWARE = [m for m in MIDDLEWARE if m != "whitenoise.middleware.WhiteNoiseMiddleware"]
STORAGES["staticfiles"]["BACKEND"] = "django.contrib.staticfiles.storage.StaticFilesStorage"

LOGGING["loggers"]["ktpscan"]["level"] = "WARNING"
LOGGING["loggers"]["django"]["level"] = "ERROR"

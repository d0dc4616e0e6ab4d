from .base import *

DEBUG = False

# À configurer explicitement en prod
ALLOWED_HOSTS = [h for h in ALLOWED_HOSTS if h]

SECURE_SSL_REDIRECT = env("SECURE_SSL_REDIRECT", "1") == "1"

# HSTS (ajuster selon politique)
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

# Headers sécurité supplémentaires
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CONTENT_TYPE_NOSNIFF = True

# La clé de démo OCR.space est fortement limitée
if OCR_API_KEY == "helloworld":
    import warnings
    warnings.warn("OCR_API_KEY non défini : utilisation de la clé de démo 'helloworld'")

# Logging JSON forcé
LOGGING["handlers"]["console"]["formatter"] = "json"

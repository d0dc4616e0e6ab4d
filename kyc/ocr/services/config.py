from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver


@dataclass(frozen=True)
class OcrConfig:
    """
    Configuration process-wide, figée au démarrage et passée explicitement
    aux services (aucune lecture de settings dans le coeur).
    """
    api_key: str
    api_url: str
    language: str
    engine: int
    timeout_s: float
    max_file_size: int
    compression_quality: int
    max_dimension: int
    max_compression_attempts: int
    default_crop_height: int
    provider: str

    @classmethod
    def from_settings(cls) -> "OcrConfig":
        return cls(
            api_key=settings.OCR_API_KEY,
            api_url=settings.OCR_API_URL,
            language=settings.OCR_LANGUAGE,
            engine=int(settings.OCR_ENGINE),
            timeout_s=float(settings.OCR_TIMEOUT),
            max_file_size=int(settings.OCR_MAX_FILE_SIZE),
            compression_quality=int(settings.OCR_COMPRESSION_QUALITY),
            max_dimension=int(settings.OCR_MAX_DIMENSION),
            max_compression_attempts=int(settings.OCR_MAX_COMPRESSION_ATTEMPTS),
            default_crop_height=int(settings.OCR_DEFAULT_CROP_HEIGHT),
            provider=settings.OCR_PROVIDER,
        )


@lru_cache(maxsize=1)
def get_config() -> OcrConfig:
    return OcrConfig.from_settings()


@receiver(setting_changed)
def _reset_config(*, setting, **kwargs):
    # override_settings en tests
    if setting.startswith("OCR_"):
        get_config.cache_clear()

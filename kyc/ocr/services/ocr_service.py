import base64
import logging
import re
from typing import Optional, Tuple

from django.core.exceptions import ImproperlyConfigured

from .compressor import compress_image, crop_top
from .config import OcrConfig, get_config
from .extractor import ExtractionResult, extract_ktp_info
from .provider import BaseOcrProvider, InvalidImageError, OcrProcessingError, OcrResult
from .provider_mock import MockOcrProvider
from .provider_ocrspace import OcrSpaceProvider

logger = logging.getLogger("ktpscan.ocr.service")

DEFAULT_MIME = "image/jpeg"
_DATA_URI = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)


def build_provider(config: OcrConfig) -> BaseOcrProvider:
    if config.provider == "mock":
        return MockOcrProvider()
    if config.provider == "ocrspace":
        return OcrSpaceProvider.from_config(config)
    raise ImproperlyConfigured(f"Unknown OCR_PROVIDER {config.provider!r}")


def resolve_input_kind(image: str, input_type: Optional[str] = None) -> str:
    """'base64' ou 'url' ; détection auto si le type n'est pas fourni."""
    if input_type == "base64" or image.startswith("data:"):
        return "base64"
    if image.startswith("http://") or image.startswith("https://"):
        return "url"
    if input_type == "url":
        raise InvalidImageError("INVALID_IMAGE_URL")
    return "base64"


def decode_base64_image(image: str) -> Tuple[bytes, str]:
    """Data URI ou base64 nu -> (octets, mime)."""
    mime_type, payload = DEFAULT_MIME, image
    if image.startswith("data:"):
        m = _DATA_URI.match(image)
        if not m:
            raise InvalidImageError("INVALID_IMAGE_BASE64")
        mime_type, payload = m.group(1), m.group(2)

    try:
        content = base64.b64decode("".join(payload.split()), validate=True)
    except ValueError:
        raise InvalidImageError("INVALID_IMAGE_BASE64")
    if not content:
        raise InvalidImageError("INVALID_IMAGE_SIZE")
    return content, mime_type


def to_data_uri(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


class OcrService:
    """
    Orchestrateur : décodage, recadrage/compression, appel provider, extraction.
    Un appel = un pipeline synchrone ; aucun état partagé entre requêtes.
    """

    def __init__(self, config: Optional[OcrConfig] = None, provider: Optional[BaseOcrProvider] = None) -> None:
        self.config = config or get_config()
        self.provider = provider or build_provider(self.config)

    def shrink(self, content: bytes, mime_type: str) -> str:
        """Compresse si nécessaire et renvoie la data URI à envoyer à l'OCR."""
        cfg = self.config
        if len(content) > cfg.max_file_size:
            logger.info("File size (%.2f KB) exceeds limit, compressing...", len(content) / 1024)
            compressed = compress_image(
                content,
                max_bytes=cfg.max_file_size,
                mime_type=mime_type,
                quality=cfg.compression_quality,
                max_dimension=cfg.max_dimension,
                max_attempts=cfg.max_compression_attempts,
            )
            content, mime_type = compressed.content, compressed.mime_type
        return to_data_uri(content, mime_type)

    def recognize(self, source: str) -> OcrResult:
        res = self.provider.recognize(source=source)
        if res.is_errored:
            logger.warning("OCR processing error: %s", res.error_message)
            raise OcrProcessingError(res.error_message or "")
        return res

    def extract_text(self, source: str) -> ExtractionResult:
        res = self.recognize(source)
        info = extract_ktp_info(res.text)
        logger.info(
            "Extraction done: nik=%s (strategy=%s), name=%s",
            "found" if info.identity_number else "not found", info.strategy,
            "found" if info.full_name else "not found",
        )
        return info

    def extract_from_payload(self, *, image: str, input_type: Optional[str] = None) -> ExtractionResult:
        if not image:
            raise InvalidImageError("IMAGE_REQUIRED")
        if resolve_input_kind(image, input_type) == "url":
            return self.extract_text(image)

        content, mime_type = decode_base64_image(image)
        logger.info("Original size: %.2f KB", len(content) / 1024)
        return self.extract_text(self.shrink(content, mime_type))

    def extract_from_upload(
        self,
        *,
        content: bytes,
        mime_type: Optional[str] = None,
        crop: bool = False,
        crop_height: Optional[int] = None,
    ) -> ExtractionResult:
        if not content:
            raise InvalidImageError("INVALID_IMAGE_SIZE")
        logger.info("Uploaded file size: %.2f KB", len(content) / 1024)
        if crop:
            content = crop_top(content, crop_height or self.config.default_crop_height)
        return self.extract_text(self.shrink(content, mime_type or DEFAULT_MIME))

    def recognize_upload(self, *, content: bytes, mime_type: Optional[str] = None) -> OcrResult:
        """Texte OCR brut, sans extraction ni levée sur erreur (debug)."""
        if not content:
            raise InvalidImageError("INVALID_IMAGE_SIZE")
        return self.provider.recognize(source=self.shrink(content, mime_type or DEFAULT_MIME))

"""
Réduction de taille d'image avant envoi à l'OCR.

OCR.space refuse les images au-delà de 1024 KB : on ré-encode en JPEG progressif
en baissant qualité et dimensions à chaque tentative, dans une limite de tentatives.
Un échec de décodage/encodage n'est jamais bloquant : on renvoie l'original.
"""
import io
import logging
from dataclasses import dataclass
from typing import Tuple

from PIL import Image, ImageOps

logger = logging.getLogger("ktpscan.ocr.compressor")

DEFAULT_MAX_BYTES = 1024 * 1024
QUALITY_STEP = 10
DIMENSION_FACTOR = 0.9


@dataclass(frozen=True)
class CompressedImage:
    content: bytes
    mime_type: str
    attempts: int
    original_size: int
    attempt_sizes: Tuple[int, ...] = ()  # meilleure taille après chaque tentative

    @property
    def size(self) -> int:
        return len(self.content)


def _kb(n: int) -> str:
    return f"{n / 1024:.2f} KB"


def _load_rgb(content: bytes) -> Image.Image:
    with Image.open(io.BytesIO(content)) as src:
        img = ImageOps.exif_transpose(src)
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.load()
    return img


def _encode_jpeg(img: Image.Image, *, quality: int, max_dimension: int) -> bytes:
    frame = img.copy()
    # thumbnail() conserve le ratio et n'agrandit jamais
    frame.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    buf = io.BytesIO()
    frame.save(buf, format="JPEG", quality=quality, progressive=True, optimize=True)
    return buf.getvalue()


def compress_image(
    content: bytes,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    mime_type: str = "image/jpeg",
    quality: int = 80,
    max_dimension: int = 2000,
    max_attempts: int = 5,
) -> CompressedImage:
    """
    Ré-encode `content` jusqu'à passer sous `max_bytes` ou épuiser `max_attempts`.

    Chaque tentative repart de l'image source décodée (pas du JPEG précédent) ;
    une tentative qui ne fait pas mieux que la meilleure courante est ignorée,
    donc la taille retenue ne croît jamais.
    """
    original_size = len(content)
    if original_size <= max_bytes:
        return CompressedImage(content=content, mime_type=mime_type, attempts=0, original_size=original_size)

    best, best_mime = content, mime_type
    attempts = 0
    sizes = []
    try:
        img = _load_rgb(content)
        # qualité et dimension baissent strictement : arrêt quand l'une ne peut plus descendre
        while len(best) > max_bytes and attempts < max_attempts and quality >= 1 and max_dimension >= 1:
            attempts += 1
            logger.info(
                "Compression attempt %d: size %s, quality %d, max_dim %d",
                attempts, _kb(len(best)), quality, max_dimension,
            )
            candidate = _encode_jpeg(img, quality=quality, max_dimension=max_dimension)
            if len(candidate) <= len(best):
                best, best_mime = candidate, "image/jpeg"
            sizes.append(len(best))

            quality -= QUALITY_STEP
            max_dimension = int(max_dimension * DIMENSION_FACTOR)
    except Exception as e:
        logger.warning("Compression failed (%s: %s), sending original image", type(e).__name__, e)
        return CompressedImage(content=content, mime_type=mime_type, attempts=attempts, original_size=original_size)

    logger.info("Image compressed to %s (from %s)", _kb(len(best)), _kb(original_size))
    if len(best) > max_bytes:
        logger.warning("Compressed image (%s) still exceeds limit, sending anyway", _kb(len(best)))

    return CompressedImage(
        content=best,
        mime_type=best_mime,
        attempts=attempts,
        original_size=original_size,
        attempt_sizes=tuple(sizes),
    )


def crop_top(content: bytes, height: int) -> bytes:
    """
    Garde le bandeau supérieur pleine largeur de `height` px (zone du NIK sur une KTP).
    En cas d'échec, renvoie l'image non recadrée.
    """
    try:
        if height <= 0:
            raise ValueError(f"invalid crop height {height}")
        with Image.open(io.BytesIO(content)) as src:
            fmt = src.format or "JPEG"
            img = ImageOps.exif_transpose(src)
            band = img.crop((0, 0, img.width, min(height, img.height)))
            if fmt == "JPEG" and band.mode not in ("RGB", "L"):
                band = band.convert("RGB")
            buf = io.BytesIO()
            band.save(buf, format=fmt)
    except Exception as e:
        logger.warning("Crop failed (%s: %s), using uncropped image", type(e).__name__, e)
        return content

    logger.info("Image cropped to height: %dpx", band.height)
    return buf.getvalue()

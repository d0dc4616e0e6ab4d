import logging
import time
from typing import Any, Dict, Optional

import httpx

from .config import OcrConfig
from .provider import BaseOcrProvider, OcrResult

logger = logging.getLogger("ktpscan.ocr.ocrspace")

DEFAULT_URL = "https://api.ocr.space/parse/image"
USER_AGENT = "KtpScan-OCR/1.0"


def detect_input(source: str) -> str:
    """Nom du champ de formulaire OCR.space correspondant à la source."""
    if source.startswith("http://") or source.startswith("https://"):
        return "url"
    if source.startswith("data:"):
        return "base64Image"
    raise ValueError("OCR source must be an http(s) URL or a base64 data URI")


def _flag(value) -> str:
    return "true" if value else "false"


def _confidence(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _error_message(data: Dict[str, Any]) -> Optional[str]:
    msg = data.get("ErrorMessage")
    if not msg:
        return None
    if isinstance(msg, (list, tuple)):
        return "; ".join(str(m) for m in msg)
    return str(msg)


def parse_response(data: Any) -> OcrResult:
    """
    OCR.space renvoie soit `ParsedText` à la racine, soit une liste `ParsedResults`
    (moteur 2) ; on ramène les deux formats à un OcrResult.
    """
    if not isinstance(data, dict):
        # ex: clé API refusée -> chaîne brute
        return OcrResult(text="", is_errored=True, error_message=str(data), raw={"response": data})

    text = data.get("ParsedText")
    confidence = data.get("Confidence")
    if text is None:
        results = data.get("ParsedResults") or []
        if results:
            first = results[0] or {}
            text = first.get("ParsedText")
            confidence = first.get("Confidence", confidence)

    return OcrResult(
        text=text or "",
        is_errored=bool(data.get("IsErroredOnProcessing")),
        error_message=_error_message(data),
        confidence=_confidence(confidence),
        raw=data,
    )


class OcrSpaceProvider(BaseOcrProvider):
    """
    Connecteur OCR.space (https://ocr.space/ocrapi).
    Un seul appel, borné par le timeout ; pas de retry. Les erreurs réseau et
    HTTP non-2xx remontent telles quelles (httpx.HTTPError).
    """

    def __init__(
        self,
        *,
        api_key: str = "helloworld",
        url: str = DEFAULT_URL,
        language: Optional[str] = None,
        engine: int = 2,
        timeout_s: float = 60.0,
        options: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        # seul le moteur 2 supporte "auto"
        self.language = language or ("auto" if int(engine) == 2 else "eng")
        self.engine = int(engine)
        self.timeout_s = timeout_s
        self.options = options or {}
        self.transport = transport

    @classmethod
    def from_config(cls, config: OcrConfig, **kwargs) -> "OcrSpaceProvider":
        return cls(
            api_key=config.api_key,
            url=config.api_url,
            language=config.language,
            engine=config.engine,
            timeout_s=config.timeout_s,
            **kwargs,
        )

    def build_form(self, source: str) -> Dict[str, str]:
        opts = self.options
        form = {
            detect_input(source): source,
            "language": str(self.language),
            "isOverlayRequired": _flag(opts.get("isOverlayRequired")),
            "detectOrientation": _flag(opts.get("detectOrientation")),
            "isCreateSearchablePdf": _flag(opts.get("isCreateSearchablePdf")),
            "isSearchablePdfHideTextLayer": _flag(opts.get("isSearchablePdfHideTextLayer")),
            "scale": _flag(opts.get("scale")),
            "isTable": _flag(opts.get("isTable")),
            "OCREngine": str(self.engine),
        }
        if opts.get("filetype"):
            form["filetype"] = str(opts["filetype"])
        return form

    def recognize(self, *, source: str) -> OcrResult:
        form = self.build_form(source)
        headers = {"apikey": self.api_key, "User-Agent": USER_AGENT}

        t0 = time.perf_counter()
        try:
            # multipart/form-data comme l'attend OCR.space
            files = {k: (None, v.encode("utf-8")) for k, v in form.items()}
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                resp = client.post(self.url, headers=headers, files=files)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.error("OCR.space request failed after %dms: %s", int((time.perf_counter() - t0) * 1000), e)
            raise

        result = parse_response(data)
        logger.info(
            "OCR.space answered in %dms (errored=%s, %d chars)",
            int((time.perf_counter() - t0) * 1000), result.is_errored, len(result.text),
        )
        return result

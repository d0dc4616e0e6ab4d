"""
Contrat provider-agnostic pour l'OCR.
Le service ne consomme que `text` et `is_errored` ; le reste sert au debug.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class OcrResult:
    text: str
    is_errored: bool = False
    error_message: Optional[str] = None
    confidence: Optional[float] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class OcrProcessingError(Exception):
    """Le service OCR a répondu mais n'a pas pu traiter l'image."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class BaseOcrProvider:
    def recognize(self, *, source: str) -> OcrResult:
        """`source` est une URL http(s) ou une data URI base64."""
        raise NotImplementedError


class InvalidImageError(ValueError):
    """Entrée image absente ou illisible (base64 invalide, URL invalide, fichier vide)."""

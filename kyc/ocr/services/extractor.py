"""
Heuristiques d'extraction du NIK (16 chiffres) et du nom depuis le texte OCR d'une KTP.

Les stratégies sont des fonctions pures essayées par ordre de précision ;
chacune renvoie le NIK ou None, la première qui trouve gagne.
"""
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

NIK_LENGTH = 16

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[\s\-]")
_NON_DIGITS = re.compile(r"\D")

# "NIK", séparateurs optionnels, puis 16 chiffres éventuellement coupés par espace/tiret ;
# un chiffre isolé après séparateur (bruit OCR) est ignoré ; 17 chiffres collés sont rejetés
_LABELED = re.compile(r"\bNIK\s*[:.\s\-]*(\d(?:[\s\-]?\d){15})(?!\d)", re.IGNORECASE)
# suite maximale de chiffres séparés par au plus un espace ou tiret
_DIGIT_RUN = re.compile(r"\d(?:[ \-]?\d)*")
_TOKEN_SPLIT = re.compile(r"[\s\-]+")

_NAME = re.compile(r"\bNama\s*:*\s*([^\r\n]+)", re.IGNORECASE)
_NAME_STOP = re.compile(r"Tempat|Jenis|Gol\.|Alamat", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionResult:
    identity_number: Optional[str] = None
    full_name: Optional[str] = None
    strategy: Optional[str] = None


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def match_labeled(text: str) -> Optional[str]:
    for m in _LABELED.finditer(text):
        digits = _SEPARATORS.sub("", m.group(1))
        if len(digits) == NIK_LENGTH:
            return digits
    return None


def match_digit_run(text: str) -> Optional[str]:
    for m in _DIGIT_RUN.finditer(text):
        digits = _NON_DIGITS.sub("", m.group(0))
        if len(digits) == NIK_LENGTH:
            return digits
        # premiers 16 chiffres d'une suite trop longue (NIK collé à un autre champ)
        if len(digits) > NIK_LENGTH:
            return digits[:NIK_LENGTH]
    return None


def match_token(text: str) -> Optional[str]:
    for token in _TOKEN_SPLIT.split(text):
        digits = _NON_DIGITS.sub("", token)
        if len(digits) == NIK_LENGTH:
            return digits
    return None


STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("labeled", match_labeled),
    ("digit_run", match_digit_run),
    ("token", match_token),
)


def find_identity_number(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Renvoie (nik, nom de la stratégie) ou (None, None)."""
    clean = normalize_text(text)
    if not clean:
        return None, None
    for name, matcher in STRATEGIES:
        nik = matcher(clean)
        if nik is not None:
            return nik, name
    return None, None


def extract_nik(text: str) -> Optional[str]:
    return find_identity_number(text)[0]


def extract_name(text: str) -> Optional[str]:
    """Nom après "Nama :", coupé avant le libellé du champ suivant s'il est sur la même ligne."""
    if not text:
        return None
    m = _NAME.search(text)
    if not m:
        return None
    name = _NAME_STOP.split(m.group(1), maxsplit=1)[0].strip()
    return name or None


def extract_ktp_info(text: str) -> ExtractionResult:
    nik, strategy = find_identity_number(text)
    return ExtractionResult(identity_number=nik, full_name=extract_name(text), strategy=strategy)

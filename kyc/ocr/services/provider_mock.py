import hashlib
import time

from .provider import BaseOcrProvider, OcrResult

MOCK_KTP_TEXT = (
    "PROVINSI DKI JAKARTA\r\n"
    "JAKARTA SELATAN\r\n"
    "NIK : 3174 0512 0890 0007\r\n"
    "Nama : BUDI SANTOSO\r\n"
    "Tempat/Tgl Lahir : JAKARTA, 12-08-1990\r\n"
    "Jenis Kelamin : LAKI-LAKI Gol. Darah : O\r\n"
    "Alamat : JL. MELATI NO. 7\r\n"
)


class MockOcrProvider(BaseOcrProvider):
    """
    Provider fake déterministe, sans réseau (dev / tests) :
    - renvoie toujours le même texte de KTP (ou celui passé au constructeur) ;
    - la "confiance" dépend d'un hash de la source, stable d'un appel à l'autre.
    """

    def __init__(self, text: str = MOCK_KTP_TEXT) -> None:
        self.text = text

    def recognize(self, *, source: str) -> OcrResult:
        t0 = time.perf_counter()
        h = hashlib.sha256(source[:4096].encode("utf-8")).hexdigest()
        confidence = 0.8 + (int(h[:2], 16) % 20) / 100.0
        dt_ms = int((time.perf_counter() - t0) * 1000)
        return OcrResult(
            text=self.text,
            is_errored=False,
            confidence=confidence,
            raw={
                "ParsedResults": [{"ParsedText": self.text, "FileParseExitCode": 1}],
                "OCRExitCode": 1,
                "IsErroredOnProcessing": False,
                "ProcessingTimeInMilliseconds": str(dt_ms),
                "Provider": "mock",
            },
        )

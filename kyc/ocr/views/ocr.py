from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiParameter, OpenApiResponse

from ..serializers.input import ExtractInputSerializer, FileInputSerializer, CropQuerySerializer
from ..serializers.output import ExtractOutputSerializer, ErrorOutputSerializer, DebugOcrOutputSerializer
from ..services.extractor import ExtractionResult, extract_ktp_info
from ..services.ocr_service import OcrService
from ..services.provider import InvalidImageError, OcrProcessingError

MSG_FOUND = "Data berhasil diekstraksi"
MSG_NOT_FOUND = "NIK tidak ditemukan"


def success_envelope(res: ExtractionResult) -> dict:
    return {
        "status": "success",
        "message": MSG_FOUND if res.identity_number else MSG_NOT_FOUND,
        "data": {
            "identity_number": res.identity_number,
            "fullname": res.full_name,
        },
    }


def error_response(message: str, error: str, code: int = status.HTTP_400_BAD_REQUEST) -> Response:
    return Response({"status": "error", "message": message, "error": error}, status=code)


def run_extraction(call):
    """Erreurs d'entrée et erreurs OCR -> 400 ; le reste remonte au handler global (500)."""
    try:
        res = call()
    except InvalidImageError as e:
        return error_response("Invalid image", str(e))
    except OcrProcessingError as e:
        return error_response("Error processing image", e.message)
    return Response(success_envelope(res), status=200)


ENVELOPE_EXAMPLE = OpenApiExample(
    "Réponse",
    value={
        "status": "success",
        "message": MSG_FOUND,
        "data": {"identity_number": "3174051208900007", "fullname": "BUDI SANTOSO"},
    },
    response_only=True,
)

EXTRACT_RESPONSES = {
    200: OpenApiResponse(response=ExtractOutputSerializer, description="NIK + nom (null si introuvable)"),
    400: OpenApiResponse(response=ErrorOutputSerializer, description="Image manquante/invalide ou erreur OCR"),
    500: OpenApiResponse(response=ErrorOutputSerializer, description="Erreur inattendue (réseau OCR, ...)"),
}


@extend_schema(
    tags=["KTP OCR"],
    request=ExtractInputSerializer,
    responses=EXTRACT_RESPONSES,
    examples=[
        OpenApiExample(
            "Requête base64",
            value={"image": "data:image/jpeg;base64,/9j/4AAQ...", "type": "base64"},
            request_only=True,
        ),
        OpenApiExample(
            "Requête URL",
            value={"image": "https://example.com/ktp.jpg", "type": "url"},
            request_only=True,
        ),
        ENVELOPE_EXAMPLE,
    ],
)
class ExtractNikView(APIView):
    """
    POST /extract-nik
    Body JSON : image (base64, data URI ou URL), type ("base64" | "url", auto sinon)
    """
    serializer_class = ExtractInputSerializer

    def post(self, request):
        ser = self.serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        svc = OcrService()
        return run_extraction(lambda: svc.extract_from_payload(image=data["image"], input_type=data.get("type")))


@extend_schema(
    tags=["KTP OCR"],
    request={"multipart/form-data": FileInputSerializer},
    parameters=[
        OpenApiParameter("crop", bool, description="Recadre le bandeau supérieur (zone NIK)"),
        OpenApiParameter("cropHeight", int, description="Hauteur du recadrage en px (défaut 100)"),
    ],
    responses=EXTRACT_RESPONSES,
    examples=[ENVELOPE_EXAMPLE],
)
class ExtractFileView(APIView):
    """
    POST /extract
    multipart/form-data, champ "file" ; ?crop=true&cropHeight=100 optionnels
    """
    parser_classes = (MultiPartParser, FormParser)
    serializer_class = FileInputSerializer

    def post(self, request):
        ser = self.serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        upload = ser.validated_data["file"]

        q = CropQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        svc = OcrService()
        return run_extraction(lambda: svc.extract_from_upload(
            content=upload.read(),
            mime_type=getattr(upload, "content_type", None),
            crop=q.validated_data["crop"],
            crop_height=q.validated_data.get("cropHeight"),
        ))


@extend_schema(
    tags=["Debug"],
    request={"multipart/form-data": FileInputSerializer},
    responses={200: OpenApiResponse(response=DebugOcrOutputSerializer, description="Texte OCR brut")},
)
class DebugOcrView(APIView):
    """
    POST /debug-ocr
    Texte OCR brut + réponse provider, pour ajuster les heuristiques.
    """
    parser_classes = (MultiPartParser, FormParser)
    serializer_class = FileInputSerializer

    def post(self, request):
        ser = self.serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        upload = ser.validated_data["file"]

        svc = OcrService()
        try:
            res = svc.recognize_upload(content=upload.read(), mime_type=getattr(upload, "content_type", None))
        except InvalidImageError as e:
            return error_response("Invalid image", str(e))

        info = extract_ktp_info(res.text)
        return Response({
            "success": True,
            "rawText": res.text,
            "ocrResult": res.raw,
            "textLength": len(res.text),
            "lines": res.text.split("\n") if res.text else [],
            "extracted": {
                "identity_number": info.identity_number,
                "fullname": info.full_name,
                "strategy": info.strategy,
                "is_errored": res.is_errored,
                "error_message": res.error_message,
                "confidence": res.confidence,
            },
        }, status=200)

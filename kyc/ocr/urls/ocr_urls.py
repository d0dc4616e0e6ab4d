from django.urls import path

from kyc.ocr.views.ocr import ExtractNikView, ExtractFileView, DebugOcrView

urlpatterns = [
    path("extract-nik", ExtractNikView.as_view(), name="extract-nik"),
    path("extract", ExtractFileView.as_view(), name="extract-file"),
    path("debug-ocr", DebugOcrView.as_view(), name="debug-ocr"),
]

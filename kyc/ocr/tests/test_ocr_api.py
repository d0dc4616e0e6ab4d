import base64
import json
from unittest import mock

import httpx
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, Client

from kyc.ocr.services import ocr_service
from kyc.ocr.services.provider import OcrResult
from kyc.ocr.services.provider_mock import MockOcrProvider
from kyc.ocr.tests.utils import image_bytes

PNG_B64 = base64.b64encode(image_bytes((40, 40), fmt="PNG")).decode()


class ExtractNikApiTest(SimpleTestCase):
    path = "/extract-nik"

    def setUp(self):
        self.client = Client()

    def _post(self, body: dict):
        return self.client.post(self.path, data=json.dumps(body), content_type="application/json")

    def test_ok(self):
        resp = self._post({"image": f"data:image/png;base64,{PNG_B64}", "type": "base64"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json(), {
            "status": "success",
            "message": "Data berhasil diekstraksi",
            "data": {"identity_number": "3174051208900007", "fullname": "BUDI SANTOSO"},
        })

    def test_url(self):
        with mock.patch.object(MockOcrProvider, "recognize", autospec=True,
                               return_value=OcrResult(text="NIK: 3201 0145 0390 0021")) as rec:
            resp = self._post({"image": "https://example.com/ktp.jpg"})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(rec.call_args.kwargs["source"], "https://example.com/ktp.jpg")
        self.assertEqual(resp.json()["data"], {"identity_number": "3201014503900021", "fullname": None})

    def test_not_found_is_still_200(self):
        with mock.patch.object(MockOcrProvider, "recognize",
                               return_value=OcrResult(text="PROVINSI JAWA BARAT\nRT/RW 001/002")):
            resp = self._post({"image": PNG_B64})
        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()
        self.assertEqual(data["message"], "NIK tidak ditemukan")
        self.assertIsNone(data["data"]["identity_number"])

    def test_missing_image(self):
        resp = self._post({})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["status"], "error")
        self.assertEqual(resp.json()["message"], "Image is required")

    def test_blank_image(self):
        resp = self._post({"image": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Image is required")

    def test_invalid_base64(self):
        resp = self._post({"image": "@@@invalid@@@"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "INVALID_IMAGE_BASE64")

    def test_invalid_type(self):
        resp = self._post({"image": PNG_B64, "type": "file"})
        self.assertEqual(resp.status_code, 400)

    def test_ocr_processing_error(self):
        errored = OcrResult(text="", is_errored=True, error_message="E301: Image parsing failed")
        with mock.patch.object(MockOcrProvider, "recognize", return_value=errored):
            resp = self._post({"image": PNG_B64})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {
            "status": "error",
            "message": "Error processing image",
            "error": "E301: Image parsing failed",
        })

    def test_transport_error_is_500(self):
        with mock.patch.object(MockOcrProvider, "recognize", side_effect=httpx.ConnectError("connection refused")):
            resp = self._post({"image": PNG_B64})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Internal server error")
        self.assertEqual(resp.json()["error"], "connection refused")


class ExtractFileApiTest(SimpleTestCase):
    path = "/extract"

    def setUp(self):
        self.client = Client()

    def _upload(self, content=None, name="ktp.png", query=""):
        data = {}
        if content is not None:
            data["file"] = SimpleUploadedFile(name, content, content_type="image/png")
        return self.client.post(self.path + query, data=data)

    def test_ok(self):
        resp = self._upload(image_bytes((40, 40), fmt="PNG"))
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["data"]["identity_number"], "3174051208900007")

    def test_missing_file(self):
        resp = self._upload()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "File is required")

    def test_empty_file(self):
        resp = self._upload(b"")
        self.assertEqual(resp.status_code, 400)

    def test_crop_query(self):
        with mock.patch.object(ocr_service, "crop_top", wraps=ocr_service.crop_top) as crop:
            resp = self._upload(image_bytes((300, 200), fmt="PNG"), query="?crop=true&cropHeight=60")
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(crop.call_args.args[1], 60)

    def test_no_crop_by_default(self):
        with mock.patch.object(ocr_service, "crop_top") as crop:
            resp = self._upload(image_bytes((300, 200), fmt="PNG"))
        self.assertEqual(resp.status_code, 200, resp.content)
        crop.assert_not_called()

    def test_bad_crop_height(self):
        resp = self._upload(image_bytes((40, 40), fmt="PNG"), query="?crop=true&cropHeight=abc")
        self.assertEqual(resp.status_code, 400)

    def test_large_upload_is_compressed_before_ocr(self):
        content = image_bytes((900, 900))  # BMP ~2.4 MB
        with mock.patch.object(MockOcrProvider, "recognize", autospec=True,
                               return_value=OcrResult(text="NIK 3201014503900021")) as rec:
            resp = self.client.post(self.path, data={
                "file": SimpleUploadedFile("ktp.bmp", content, content_type="image/bmp"),
            })
        self.assertEqual(resp.status_code, 200, resp.content)
        source = rec.call_args.kwargs["source"]
        self.assertTrue(source.startswith("data:image/jpeg;base64,"))
        self.assertLessEqual(len(base64.b64decode(source.split(",", 1)[1])), 1024 * 1024)


class DebugOcrApiTest(SimpleTestCase):
    def test_raw_text(self):
        resp = Client().post("/debug-ocr", data={
            "file": SimpleUploadedFile("ktp.png", image_bytes((40, 40), fmt="PNG"), content_type="image/png"),
        })
        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertIn("NIK : 3174 0512 0890 0007", data["rawText"])
        self.assertEqual(data["textLength"], len(data["rawText"]))
        self.assertGreater(len(data["lines"]), 1)
        self.assertEqual(data["extracted"]["strategy"], "labeled")
        self.assertEqual(data["ocrResult"]["Provider"], "mock")

    def test_missing_file(self):
        resp = Client().post("/debug-ocr", data={})
        self.assertEqual(resp.status_code, 400)


class MetaApiTest(SimpleTestCase):
    def test_health(self):
        resp = Client().get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    def test_index(self):
        resp = Client().get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("POST /extract-nik", resp.json()["endpoints"])

    def test_cors_preflight(self):
        resp = Client().options(
            "/extract-nik",
            HTTP_ORIGIN="http://localhost:3000",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )
        self.assertEqual(resp["Access-Control-Allow-Origin"], "http://localhost:3000")
        self.assertEqual(resp["Access-Control-Allow-Credentials"], "true")

    def test_cors_other_origin(self):
        resp = Client().options(
            "/extract-nik",
            HTTP_ORIGIN="http://evil.example",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )
        self.assertFalse(resp.has_header("Access-Control-Allow-Origin"))

    def test_openapi_schema(self):
        resp = Client().get("/api/v1/schema/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b"/extract-nik", resp.content)

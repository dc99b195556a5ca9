"""Tests for the /scan HTTP relay."""

import base64

import pytest
from fastapi.testclient import TestClient

from medside.application.services.analysis_client import AnalysisClient
from medside.application.services.scan_service import ScanService
from medside.config.settings import AppConfig
from medside.domain.exceptions import AnalysisTimeoutError, ProviderError, TransportError
from medside.main import create_app

from conftest import ScriptedVisionModel


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig.from_dict({"vision": {"provider": "dummy"}, "logging": {"level": "WARNING"}})


@pytest.fixture
def client(app_config, scan_service) -> TestClient:
    return TestClient(create_app(app_config, service=scan_service))


def client_for(app_config, script) -> TestClient:
    service = ScanService(AnalysisClient(ScriptedVisionModel(script)))
    return TestClient(create_app(app_config, service=service))


class TestUpload:

    def test_png_upload(self, client, png_bytes):
        response = client.post("/scan/upload", files=[("files", ("box.png", png_bytes, "image/png"))])

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["degraded"] is False
        assert body["missing_fields"] == []
        assert body["analysis"]["name"] == "Ibuprofen 400 mg (ibuprofen)"
        assert body["analysis"]["rating"] == 7.0
        assert body["disclaimer"]
        assert body["processing_time_ms"] >= 0

    def test_only_first_file_used(self, client, fake_model, png_bytes, jpeg_bytes):
        response = client.post(
            "/scan/upload",
            files=[
                ("files", ("first.png", png_bytes, "image/png")),
                ("files", ("second.jpg", jpeg_bytes, "image/jpeg")),
            ],
        )

        assert response.status_code == 200
        assert len(fake_model.calls) == 1
        assert fake_model.calls[0][1].mime_type == "image/png"

    def test_bmp_rejected_without_call(self, client, fake_model, bmp_bytes):
        response = client.post("/scan/upload", files=[("files", ("box.bmp", bmp_bytes, "image/bmp"))])

        assert response.status_code == 415
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "unsupported_format"
        assert fake_model.calls == []

    def test_corrupt_upload(self, client, fake_model):
        response = client.post("/scan/upload", files=[("files", ("box.png", b"broken", "image/png"))])

        assert response.status_code == 400
        assert response.json()["error_kind"] == "unreadable_file"
        assert fake_model.calls == []

    def test_degraded_result(self, app_config, png_bytes):
        client = client_for(app_config, ["Medicine Name: Aspirin"])

        response = client.post("/scan/upload", files=[("files", ("box.png", png_bytes, "image/png"))])

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["degraded"] is True
        assert "rating" in body["missing_fields"]


class TestCapture:

    def test_data_url_capture(self, client, jpeg_bytes):
        data_url = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode()

        response = client.post("/scan/capture", json={"image_base64": data_url})

        assert response.status_code == 200
        assert response.json()["analysis"]["availability"].startswith("Over the counter")

    def test_undecodable_capture(self, client, fake_model):
        response = client.post("/scan/capture", json={"image_base64": "%%% not base64 %%%"})

        assert response.status_code == 400
        assert fake_model.calls == []


class TestCallErrors:

    @pytest.mark.parametrize(
        "error, status_code, kind",
        [
            (TransportError(), 502, "transport"),
            (ProviderError(status_code=429, provider_message="quota exceeded for key abc"), 502, "provider"),
            (AnalysisTimeoutError(30.0), 504, "timeout"),
        ],
    )
    def test_status_codes(self, app_config, jpeg_bytes, error, status_code, kind):
        client = client_for(app_config, [error])

        response = client.post("/scan/capture", json={"image_base64": base64.b64encode(jpeg_bytes).decode()})

        assert response.status_code == status_code
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == kind
        assert body["analysis"] is None

    def test_provider_text_not_leaked(self, app_config, jpeg_bytes):
        client = client_for(app_config, [ProviderError(provider_message="quota exceeded for key abc")])

        response = client.post("/scan/capture", json={"image_base64": base64.b64encode(jpeg_bytes).decode()})

        assert "abc" not in response.text


class TestInfoEndpoints:

    def test_prompt(self, client):
        body = client.get("/scan/prompt").json()

        assert body["version"] == "v1"
        assert "1. Medicine Name:" in body["prompt"]

    def test_scan_health(self, client):
        body = client.get("/scan/health").json()

        assert body["provider"] == "fake"
        assert body["model"] == "fake-vision"
        assert body["prompt_version"] == "v1"

    def test_root_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_unconfigured_service(self, app_config, scan_service):
        app = create_app(app_config, service=scan_service)
        app.state.scan_service = None

        response = TestClient(app).get("/scan/health")

        assert response.status_code == 503


class TestAppFactory:

    def test_builds_service_from_config(self, app_config):
        client = TestClient(create_app(app_config))

        assert client.get("/scan/health").json()["provider"] == "dummy"

    def test_cors_headers(self, client):
        response = client.options(
            "/scan/health",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
        )
        assert response.headers["access-control-allow-origin"] == "*"

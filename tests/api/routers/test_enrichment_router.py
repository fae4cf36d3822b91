"""Tests for enrichment router."""

from tutor_reports.exceptions import CaptureDeviceError
from tutor_reports.services.enrichment.prompts import ANALYSIS_MARKER


def _upload(client, data):
    return client.post(
        "/api/v1/enrichment/upload",
        files={"file": ("worksheet.png", data, "image/png")},
    )


class TestStatus:
    def test_requires_login(self, anonymous_client):
        assert anonymous_client.get("/api/v1/enrichment").status_code == 401

    def test_initial_status(self, client):
        response = client.get("/api/v1/enrichment")

        assert response.status_code == 200
        assert response.json() == {"state": "idle", "has_image": False, "image_bytes": 0}


class TestCapture:
    def test_capture_snapshot(self, client, capture_handle):
        assert client.post("/api/v1/enrichment/capture").json()["state"] == "capturing"

        data = client.post("/api/v1/enrichment/snapshot").json()

        assert data["state"] == "image_ready"
        assert data["has_image"] is True
        capture_handle.release.assert_called_once()

    def test_capture_cancel(self, client, capture_handle):
        client.post("/api/v1/enrichment/capture")

        data = client.post("/api/v1/enrichment/cancel").json()

        assert data["state"] == "idle"
        capture_handle.release.assert_called_once()

    def test_device_unavailable(self, client, capture_device):
        capture_device.acquire.side_effect = CaptureDeviceError("busy")

        response = client.post("/api/v1/enrichment/capture")

        assert response.status_code == 503
        assert response.json()["error"]["message"] == "無法開啟相機，請確認權限設定。"
        assert client.get("/api/v1/enrichment").json()["state"] == "idle"

    def test_snapshot_without_capture_conflicts(self, client):
        response = client.post("/api/v1/enrichment/snapshot")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "WORKFLOW_STATE_ERROR"


class TestUpload:
    def test_upload_image(self, client, png_bytes):
        response = _upload(client, png_bytes)

        assert response.status_code == 200
        assert response.json()["state"] == "image_ready"

    def test_upload_invalid_image(self, client):
        response = _upload(client, b"not an image")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_IMAGE"
        assert client.get("/api/v1/enrichment").json()["state"] == "idle"

    def test_discard(self, client, png_bytes):
        _upload(client, png_bytes)

        data = client.post("/api/v1/enrichment/discard").json()

        assert data == {"state": "idle", "has_image": False, "image_bytes": 0}


class TestAnalyze:
    def test_analysis_merged_into_draft(self, client, png_bytes, report_payload, mock_llm_client):
        _upload(client, png_bytes)

        response = client.post("/api/v1/enrichment/analyze", json=report_payload(details="Original"))

        assert response.status_code == 200
        data = response.json()
        analysis = mock_llm_client.analyze_image.return_value
        assert data["merged"] is True
        assert data["state"] == "idle"
        assert data["draft"]["details"] == "Original" + ANALYSIS_MARKER + analysis

    def test_analysis_failure(self, client, png_bytes, report_payload, mock_llm_client):
        mock_llm_client.analyze_image.side_effect = RuntimeError("upstream down")
        _upload(client, png_bytes)

        response = client.post("/api/v1/enrichment/analyze", json=report_payload(details="Original"))

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "AI 分析失敗，請稍後再試。"
        assert client.get("/api/v1/enrichment").json()["state"] == "image_ready"

    def test_analyze_without_image_conflicts(self, client, report_payload):
        response = client.post("/api/v1/enrichment/analyze", json=report_payload())
        assert response.status_code == 409

    def test_enriched_draft_can_be_submitted(self, client, png_bytes, report_payload):
        """Test the full path: import, analyze, then submit the merged draft."""
        _upload(client, png_bytes)
        draft = client.post(
            "/api/v1/enrichment/analyze", json=report_payload(details="短")
        ).json()["draft"]

        response = client.post("/api/v1/reports", json=draft)

        assert response.status_code == 201
        assert ANALYSIS_MARKER.strip() in response.json()["details"]

"""Tests for API routes (routes.py + main.py)."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from fwinstaller.main import create_app


@pytest.fixture
def make_client(installer_config):
    """Create TestClient factories with logging setup mocked out."""
    clients = []

    def _make(extractor=None):
        app = create_app(installer_config, extractor=extractor)
        patcher = patch("fwinstaller.main.configure_logging", return_value=MagicMock())
        patcher.start()
        client = TestClient(app, raise_server_exceptions=True)
        client.__enter__()
        clients.append((client, patcher))
        return client

    yield _make
    for client, patcher in clients:
        client.__exit__(None, None, None)
        patcher.stop()


def _wait_completed(client):
    controller = client.app.state.controller
    assert controller.launcher.join(timeout=5)
    return client.get("/api/v1.0/progress").json()


@pytest.mark.unit
class TestRoutes:

    def test_health(self, make_client):
        response = make_client().get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_progress_idle(self, make_client):
        body = make_client().get("/api/v1.0/progress").json()

        assert body["code"] == 200
        assert body["data"]["phase"] == "idle"
        assert body["data"]["progress"] == 0
        assert body["data"]["outcome"] == "pending"

    def test_install_success(self, make_client, make_package):
        client = make_client()
        package = make_package(version="3.65")

        body = client.post("/api/v1.0/install", json={"package_path": str(package)}).json()
        assert body["code"] == 200
        assert body["phase"] in ("installing", "completed")

        progress = _wait_completed(client)
        assert progress["code"] == 200
        assert progress["data"]["phase"] == "completed"
        assert progress["data"]["outcome"] == "success"
        assert progress["data"]["result_version"] == "3.65"
        assert progress["data"]["font_package_missing"] is True
        assert progress["data"]["font_package_url"] == "https://bit.ly/2P2rb0r"

    def test_install_cancelled(self, make_client):
        body = make_client().post("/api/v1.0/install", json={}).json()

        assert body["code"] == 200
        assert body["phase"] == "idle"

    def test_install_missing_file(self, make_client, tmp_path):
        client = make_client()

        body = client.post(
            "/api/v1.0/install", json={"package_path": str(tmp_path / "nope.PUP")}
        ).json()

        assert body["code"] == 400
        assert body["phase"] == "idle"

    def test_install_while_busy(self, make_client, make_gated_extractor):
        extractor = make_gated_extractor()
        client = make_client(extractor)
        client.post("/api/v1.0/select")
        client.post("/api/v1.0/confirm", json={"package_path": "/tmp/first.PUP"})
        assert extractor.started.wait(timeout=5)

        body = client.post("/api/v1.0/confirm", json={"package_path": "/tmp/x.PUP"}).json()
        assert body["code"] == 409
        assert body["phase"] == "installing"
        assert body["progress"] == 70

        extractor.release.set()
        assert _wait_completed(client)["data"]["phase"] == "completed"

    def test_failed_install_reports_500(self, make_client, make_gated_extractor):
        extractor = make_gated_extractor(ok=False)
        extractor.release.set()
        client = make_client(extractor)

        client.post("/api/v1.0/select")
        client.post("/api/v1.0/confirm", json={"package_path": "/tmp/PSVUPDAT.PUP"})
        body = _wait_completed(client)

        assert body["code"] == 500
        assert "corrupt segment" in body["msg"]
        assert body["data"]["outcome"] == "failure"

    def test_select_and_cancel(self, make_client):
        client = make_client()

        assert client.post("/api/v1.0/select").json()["phase"] == "awaitingSelection"
        assert client.post("/api/v1.0/select").json()["code"] == 409
        assert client.post("/api/v1.0/cancel").json()["phase"] == "idle"
        assert client.post("/api/v1.0/cancel").json()["code"] == 409

    def test_confirm_without_select(self, make_client):
        body = make_client().post(
            "/api/v1.0/confirm", json={"package_path": "/tmp/PSVUPDAT.PUP"}
        ).json()

        assert body["code"] == 409
        assert body["phase"] == "idle"

    def test_acknowledge_not_completed(self, make_client):
        assert make_client().post("/api/v1.0/acknowledge").json()["code"] == 409

    def test_acknowledge_with_delete_source(self, make_client, make_package):
        client = make_client()
        package = make_package()
        client.post("/api/v1.0/install", json={"package_path": str(package)})
        _wait_completed(client)

        body = client.post("/api/v1.0/acknowledge", json={"delete_source": True}).json()

        assert body["code"] == 200
        assert body["phase"] == "idle"
        assert not package.exists()

    def test_delete_source_toggle(self, make_client, make_package):
        client = make_client()
        package = make_package()
        assert client.put("/api/v1.0/delete-source", json={"enabled": True}).json()["code"] == 409

        client.post("/api/v1.0/install", json={"package_path": str(package)})
        _wait_completed(client)
        body = client.put("/api/v1.0/delete-source", json={"enabled": True}).json()
        assert body["code"] == 200
        assert client.get("/api/v1.0/progress").json()["data"]["delete_source_on_finish"] is True

        client.post("/api/v1.0/acknowledge")
        assert not package.exists()

    def test_lifespan_removes_leftover_staging(self, make_client, installer_config):
        (installer_config.staging_dir / "PUP").mkdir(parents=True)

        make_client()

        assert not installer_config.staging_dir.exists()

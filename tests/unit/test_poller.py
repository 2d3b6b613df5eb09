"""Unit tests for ProgressPoller."""

import httpx
import pytest

from fwinstaller.models.status import OutcomeEnum, PhaseEnum
from fwinstaller.observer.poller import ProgressPoller


def _payload(phase, progress, outcome="pending", version=""):
    return {
        "code": 200,
        "msg": "success",
        "data": {
            "phase": phase,
            "progress": progress,
            "result_version": version,
            "outcome": outcome,
        },
    }


def _poller(handler, interval=0.0):
    client = httpx.Client(
        transport=httpx.MockTransport(handler), base_url="http://installer.test"
    )
    return ProgressPoller("http://installer.test", interval=interval, client=client)


@pytest.mark.unit
class TestProgressPoller:

    def test_fetch_progress(self):
        poller = _poller(lambda request: httpx.Response(200, json=_payload("installing", 45)))

        snapshot = poller.fetch_progress()

        assert snapshot.phase == PhaseEnum.INSTALLING
        assert snapshot.progress == 45

    def test_fetch_progress_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        snapshot = _poller(handler).fetch_progress()

        assert snapshot.phase == PhaseEnum.COMPLETED
        assert snapshot.outcome == OutcomeEnum.FAILURE
        assert "CONNECTION_FAILED" in snapshot.error

    def test_fetch_progress_http_error(self):
        snapshot = _poller(lambda request: httpx.Response(503)).fetch_progress()

        assert snapshot.outcome == OutcomeEnum.FAILURE

    def test_wait_for_completion(self):
        responses = iter([
            _payload("installing", 10),
            _payload("installing", 60),
            _payload("installing", 100),
            _payload("completed", 100, "success", "3.65"),
        ])
        poller = _poller(lambda request: httpx.Response(200, json=next(responses)))
        seen = []

        final = poller.wait_for_completion(on_update=lambda s: seen.append(s.progress))

        assert final.result_version == "3.65"
        assert final.outcome == OutcomeEnum.SUCCESS
        assert seen == [10, 60, 100, 100]

    def test_wait_for_completion_timeout(self):
        poller = _poller(
            lambda request: httpx.Response(200, json=_payload("installing", 5)),
            interval=0.01,
        )

        with pytest.raises(TimeoutError):
            poller.wait_for_completion(timeout=0.05)

    def test_acknowledge_posts_flag(self):
        captured = {}

        def handler(request):
            captured["path"] = request.url.path
            captured["body"] = request.content
            return httpx.Response(200, json={"code": 200, "msg": "success", "phase": "idle"})

        body = _poller(handler).acknowledge(delete_source=True)

        assert captured["path"] == "/api/v1.0/acknowledge"
        assert b"delete_source" in captured["body"]
        assert body["phase"] == "idle"

    def test_from_config_uses_port_and_interval(self, installer_config):
        config = installer_config.model_copy(update={"port": 9100, "poll_interval": 0.2})

        poller = ProgressPoller.from_config(config)
        try:
            assert poller.base_url == "http://localhost:9100"
            assert poller.interval == 0.2
        finally:
            poller.close()

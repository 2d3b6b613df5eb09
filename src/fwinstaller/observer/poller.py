"""HTTP observer that polls installer progress on its own schedule."""

import logging
import time
from typing import Callable, Optional

import httpx

from fwinstaller.config import InstallerConfig
from fwinstaller.models.session import SessionSnapshot
from fwinstaller.models.status import OutcomeEnum, PhaseEnum


class ProgressPoller:
    """Polls GET /api/v1.0/progress until the session completes.

    Transport errors never raise out of fetch_progress(); they come back as
    a failed snapshot so a redraw loop can keep running.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:12316",
        interval: float = 0.5,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize poller.

        Args:
            base_url: Installer API address
            interval: Seconds between polls
            client: httpx client to reuse (new one if None)
        """
        self.logger = logging.getLogger("fwinstaller.poller")
        self.base_url = base_url.rstrip("/")
        self.interval = interval
        self.client = client or httpx.Client(base_url=self.base_url, timeout=2.0)

    @classmethod
    def from_config(
        cls, config: InstallerConfig, client: Optional[httpx.Client] = None
    ) -> "ProgressPoller":
        """Poller for the local service using its configured port and interval."""
        return cls(config.api_url, interval=config.poll_interval, client=client)

    def fetch_progress(self) -> SessionSnapshot:
        """Fetch the current session snapshot.

        Returns:
            SessionSnapshot, or a completed/failure snapshot if unreachable
        """
        try:
            response = self.client.get("/api/v1.0/progress")
            response.raise_for_status()
            return SessionSnapshot(**response.json()["data"])
        except (httpx.HTTPError, KeyError, ValueError) as e:
            self.logger.warning(f"Failed to poll installer progress: {e}")
            return SessionSnapshot(
                phase=PhaseEnum.COMPLETED,
                progress=0,
                outcome=OutcomeEnum.FAILURE,
                error=f"CONNECTION_FAILED: {e}",
            )

    def wait_for_completion(
        self,
        on_update: Optional[Callable[[SessionSnapshot], None]] = None,
        timeout: Optional[float] = None,
    ) -> SessionSnapshot:
        """Poll until the session reaches completed.

        Args:
            on_update: Called with every fetched snapshot
            timeout: Give up after this many seconds (None waits forever)

        Returns:
            The completed snapshot

        Raises:
            TimeoutError: If timeout elapses first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        last_progress = -1

        while True:
            snapshot = self.fetch_progress()
            if on_update is not None:
                on_update(snapshot)

            if snapshot.progress != last_progress:
                last_progress = snapshot.progress
                self.logger.debug(
                    f"Observed phase={snapshot.phase.value}, progress={snapshot.progress}%"
                )

            if snapshot.phase == PhaseEnum.COMPLETED:
                return snapshot

            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(
                    f"Installation did not complete within {timeout} seconds"
                )
            time.sleep(self.interval)

    def acknowledge(self, delete_source: Optional[bool] = None) -> dict:
        """Dismiss the completed result."""
        payload = {} if delete_source is None else {"delete_source": delete_source}
        response = self.client.post("/api/v1.0/acknowledge", json=payload)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self.client.close()

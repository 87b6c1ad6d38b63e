"""Client for the cloud instance control API."""

from __future__ import annotations

from collections.abc import Sequence

from opsctl.clients.base import ServiceClient
from opsctl.models.records import Record

INSTANCE_ACTIONS = ("start", "stop", "reboot")


class InstanceClient(ServiceClient):
    service = "instance"

    def list(self, conditions: Sequence[str] = ()) -> list[Record]:
        params = [("q", c) for c in conditions]
        return self._records(self._request("GET", "/instances", params=params))

    def get(self, instance_id: str) -> Record:
        return self._record(self._request("GET", f"/instances/{instance_id}"))

    def action(self, instance_id: str, action: str) -> Record:
        """Ask the API to start, stop or reboot an instance. Returns the updated instance."""
        if action not in INSTANCE_ACTIONS:
            raise ValueError(f"Unknown instance action '{action}'")
        return self._record(self._request("POST", f"/instances/{instance_id}/{action}"))

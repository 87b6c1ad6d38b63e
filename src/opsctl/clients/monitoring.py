from __future__ import annotations

from collections.abc import Sequence

from opsctl.clients.base import ServiceClient
from opsctl.models.records import Record


class MonitorClient(ServiceClient):
    """Read-only client for the monitoring API."""

    service = "monitor"

    def services(self, host: str | None = None, conditions: Sequence[str] = ()) -> list[Record]:
        params = [("q", c) for c in conditions]
        if host:
            params.append(("host", host))
        return self._records(self._request("GET", "/services", params=params))

    def hosts(self, conditions: Sequence[str] = ()) -> list[Record]:
        params = [("q", c) for c in conditions]
        return self._records(self._request("GET", "/hosts", params=params))

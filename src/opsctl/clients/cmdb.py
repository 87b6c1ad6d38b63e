"""Client for the configuration-management database."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from opsctl.clients.base import ServiceClient
from opsctl.models.records import Record


class CmdbClient(ServiceClient):
    service = "cmdb"

    def query(self, record_type: str, conditions: Sequence[str] = ()) -> list[Record]:
        """Return records of ``record_type`` matching every ``field=value`` condition."""
        params = [("q", c) for c in conditions]
        return self._records(self._request("GET", f"/api/{record_type}", params=params))

    def get(self, record_type: str, name: str) -> Record:
        return self._record(self._request("GET", f"/api/{record_type}/{name}"))

    def update(self, record_type: str, name: str, values: dict[str, Any]) -> Record:
        return self._record(self._request("PATCH", f"/api/{record_type}/{name}", json=values))

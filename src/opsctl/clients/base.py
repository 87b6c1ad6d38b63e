"""Shared HTTP plumbing for the CMDB, instance and monitoring clients."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from opsctl.errors import UpstreamFailure
from opsctl.models.records import Record

log = structlog.get_logger()


class ServiceClient:
    """Synchronous JSON-over-HTTP client for one backing service.

    Failures are raised as UpstreamFailure and never retried.
    """

    service = "service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ServiceClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        log.debug("request", service=self.service, method=method, path=path)
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamFailure(
                self.service,
                f"HTTP {e.response.status_code} from {method} {e.request.url}",
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFailure(self.service, f"{method} {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFailure(self.service, f"Invalid JSON from {method} {path}") from e

    def _records(self, data: Any) -> list[Record]:
        """Accept a bare list or an object wrapping it under 'results'."""
        if isinstance(data, dict) and "results" in data:
            data = data["results"]
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise UpstreamFailure(self.service, "Expected a list of records")
        return data

    def _record(self, data: Any) -> Record:
        if not isinstance(data, dict):
            raise UpstreamFailure(self.service, "Expected a single record")
        return data

"""One handle on all three backing services, dispatching by record type."""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from opsctl.clients.cmdb import CmdbClient
from opsctl.clients.instances import InstanceClient
from opsctl.clients.monitoring import MonitorClient
from opsctl.config.schema import ServicesConfig
from opsctl.errors import UsageError
from opsctl.models.records import Record, RecordType, Service


class Collaborators:
    def __init__(
        self, services: ServicesConfig, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.cmdb = CmdbClient(services.cmdb_url, services.timeout, transport)
        self.instances = InstanceClient(services.instance_url, services.timeout, transport)
        self.monitor = MonitorClient(services.monitor_url, services.timeout, transport)

    def close(self) -> None:
        for client in (self.cmdb, self.instances, self.monitor):
            client.close()

    def query(self, record_type: RecordType, conditions: Sequence[str] = ()) -> list[Record]:
        match record_type.service:
            case Service.CMDB:
                return self.cmdb.query(record_type.value, conditions)
            case Service.INSTANCE:
                return self.instances.list(conditions)
            case Service.MONITOR if record_type is RecordType.HOST:
                return self.monitor.hosts(conditions)
            case _:
                return self.monitor.services(conditions=conditions)

    def get(self, record_type: RecordType, name: str) -> Record:
        match record_type.service:
            case Service.CMDB:
                return self.cmdb.get(record_type.value, name)
            case Service.INSTANCE:
                return self.instances.get(name)
            case _:
                raise UsageError(f"show is not supported for '{record_type}' records")

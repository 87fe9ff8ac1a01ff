"""Dependency Injection Container."""
from typing import Optional

import requests_cache

from sbomgate.core.client import get_http_client
from sbomgate.core.config import GatewayConfig
from sbomgate.core.config import get_config
from sbomgate.vex.clickhouse import ClickHouseVexIndex
from sbomgate.vex.index import MemoryVexIndex
from sbomgate.vex.index import VexIndex
from sbomgate.vex.loader import load_documents
from sbomgate.vex.shared import SharedIndex


class Container:
    """Simple DI Container to manage service lifecycles."""

    _instance: Optional['Container'] = None

    def __init__(self, config: GatewayConfig | None = None) -> None:
        self.config: GatewayConfig = config or get_config()
        self._vex_index: VexIndex | None = None
        self._shared_index: SharedIndex | None = None
        self._http_client: requests_cache.CachedSession | None = None

    @classmethod
    def get_instance(cls) -> 'Container':
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    # -- VEX index --

    def build_vex_index(self) -> VexIndex:
        """Build a fresh index for the configured backend."""
        vex = self.config.vex
        if vex.backend == 'clickhouse':
            return ClickHouseVexIndex(self.config.get_db_config(role='guest'))
        if vex.backend != 'memory':
            raise ValueError(f"Unknown VEX backend: {vex.backend!r}")
        documents = load_documents(vex.documents) if vex.documents else []
        return MemoryVexIndex(documents)

    def get_vex_index(self) -> VexIndex:
        if self._vex_index is None:
            self._vex_index = self.build_vex_index()
        return self._vex_index

    def get_shared_index(self) -> SharedIndex:
        if self._shared_index is None:
            self._shared_index = SharedIndex(self.get_vex_index())
        return self._shared_index

    def get_vex_repository(self) -> ClickHouseVexIndex:
        """ClickHouse index with write access (Admin), for ingestion."""
        return ClickHouseVexIndex(self.config.get_db_config(role='admin'))

    # -- CLI side --

    def get_http_client(self) -> requests_cache.CachedSession:
        if self._http_client is None:
            self._http_client = get_http_client()
        return self._http_client

# Global Accessor


def get_container() -> Container:
    return Container.get_instance()

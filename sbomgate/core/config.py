"""Configuration management for sbomgate."""
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Literal


@dataclass
class SbomConfig:
    """Upstream SBOM search backend."""
    base_url: str = field(
        default_factory=lambda: os.getenv(
            'SBOM_URL', 'http://localhost:8082',
        ),
    )
    timeout: float = field(
        default_factory=lambda: float(
            os.getenv('SBOM_TIMEOUT', '30'),
        ),
    )
    search_path: str = '/api/v1/sbom/search'
    fetch_path: str = '/api/v1/sbom'


@dataclass
class VexConfig:
    """VEX index backend selection and in-memory rebuild settings."""
    # 'memory' or 'clickhouse'
    backend: str = field(
        default_factory=lambda: os.getenv('VEX_BACKEND', 'memory'),
    )
    documents: Path | None = field(
        default_factory=lambda: Path(os.environ['VEX_DOCUMENTS'])
        if os.getenv('VEX_DOCUMENTS') else None,
    )
    reload_interval: float = field(
        default_factory=lambda: float(
            os.getenv('VEX_RELOAD_INTERVAL', '0'),
        ),
    )
    # Result window per package query
    search_limit: int = 1000


@dataclass
class DatabaseConfig:
    """ClickHouse connection configuration for the VEX table."""
    host: str = field(
        default_factory=lambda: os.getenv(
            'CLICKHOUSE_HOST', 'localhost',
        ),
    )
    port: int = field(
        default_factory=lambda: int(
            os.getenv('CLICKHOUSE_PORT', '8123'),
        ),
    )
    user: str = 'guest'
    password: str = 'guest'
    database: str = field(
        default_factory=lambda: os.getenv(
            'CLICKHOUSE_DB', 'sbomgate',
        ),
    )

    vulnerabilities_table: str = 'vulnerabilities'

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(host={self.host!r}, port={self.port!r}, "
            f"user={self.user!r}, password='*****', database={self.database!r}, "
            f"vulnerabilities_table={self.vulnerabilities_table!r})"
        )

    def get_connection_params(self) -> dict:
        return {
            'host': self.host,
            'port': self.port,
            'username': self.user,
            'password': self.password,
            'database': self.database,
            # Queries may run concurrently from worker threads
            'autogenerate_session_id': False,
        }


@dataclass
class ServerConfig:
    host: str = field(
        default_factory=lambda: os.getenv('SBOMGATE_HOST', '0.0.0.0'),
    )
    port: int = field(
        default_factory=lambda: int(os.getenv('SBOMGATE_PORT', '8083')),
    )
    # Where CLI client commands reach a running gateway
    url: str = field(
        default_factory=lambda: os.getenv('SBOMGATE_URL', 'http://localhost:8083'),
    )


@dataclass
class GatewayConfig:
    sbom: SbomConfig = field(default_factory=SbomConfig)
    vex: VexConfig = field(default_factory=VexConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Base DB config (defaults to env vars)
    _db_base: DatabaseConfig = field(default_factory=DatabaseConfig)

    def get_db_config(self, role: Literal['admin', 'guest'] = 'guest') -> DatabaseConfig:
        """Get database configuration for a specific role."""
        config = DatabaseConfig(
            host=self._db_base.host,
            port=self._db_base.port,
            database=self._db_base.database,
        )
        if role == 'admin':
            config.user = os.getenv('CLICKHOUSE_ADMIN_USER', 'admin')
            config.password = os.getenv('CLICKHOUSE_ADMIN_PASSWORD', 'admin')
        else:
            config.user = os.getenv('CLICKHOUSE_GUEST_USER', 'guest')
            config.password = os.getenv('CLICKHOUSE_GUEST_PASSWORD', 'guest')
        return config

    @classmethod
    def load(cls) -> 'GatewayConfig':
        return cls()


_config: GatewayConfig | None = None


def get_config() -> GatewayConfig:
    global _config
    if _config is None:
        _config = GatewayConfig.load()
    return _config

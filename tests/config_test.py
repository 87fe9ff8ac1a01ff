from pathlib import Path

from sbomgate.core.config import DatabaseConfig
from sbomgate.core.config import GatewayConfig
from sbomgate.core.config import SbomConfig
from sbomgate.core.config import VexConfig


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for var in ('SBOM_URL', 'SBOM_TIMEOUT', 'VEX_BACKEND', 'VEX_DOCUMENTS', 'VEX_RELOAD_INTERVAL'):
            monkeypatch.delenv(var, raising=False)
        config = GatewayConfig()
        assert config.sbom.base_url == 'http://localhost:8082'
        assert config.sbom.timeout == 30.0
        assert config.vex.backend == 'memory'
        assert config.vex.documents is None
        assert config.vex.reload_interval == 0
        assert config.vex.search_limit == 1000

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv('SBOM_URL', 'http://bombastic:8080')
        monkeypatch.setenv('SBOM_TIMEOUT', '5')
        monkeypatch.setenv('VEX_BACKEND', 'clickhouse')
        monkeypatch.setenv('VEX_DOCUMENTS', '/data/vex.jsonl')
        monkeypatch.setenv('VEX_RELOAD_INTERVAL', '300')

        assert SbomConfig().base_url == 'http://bombastic:8080'
        assert SbomConfig().timeout == 5.0
        vex = VexConfig()
        assert vex.backend == 'clickhouse'
        assert vex.documents == Path('/data/vex.jsonl')
        assert vex.reload_interval == 300.0

    def test_db_roles(self, monkeypatch):
        monkeypatch.setenv('CLICKHOUSE_ADMIN_USER', 'root')
        monkeypatch.setenv('CLICKHOUSE_ADMIN_PASSWORD', 's3cret')
        config = GatewayConfig()
        admin = config.get_db_config('admin')
        assert admin.user == 'root'
        assert admin.password == 's3cret'
        assert config.get_db_config('guest').user == 'guest'

    def test_password_masked(self):
        assert 'hunter2' not in repr(DatabaseConfig(password='hunter2'))

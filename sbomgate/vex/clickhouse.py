"""VEX index stored in a ClickHouse table."""
from collections.abc import Iterable
from typing import Any

import clickhouse_connect
import structlog
from clickhouse_connect.driver.client import Client
from clickhouse_connect.driver.exceptions import ClickHouseError

from sbomgate.core.config import DatabaseConfig
from sbomgate.core.exceptions import VexQueryError
from sbomgate.models.vex import VexDocument
from sbomgate.models.vex import VexMatch
from sbomgate.vex.query import parse_query

logger = structlog.get_logger('clickhouse_index')

VULNERABILITIES_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    advisory String COMMENT 'Advisory ID',
    cve String COMMENT 'Vulnerability ID',
    title String DEFAULT '' COMMENT 'Advisory Title',
    description String DEFAULT '' COMMENT 'Advisory Description',
    affected Array(String) COMMENT 'Affected Package URLs',
    updated_at DateTime DEFAULT now() COMMENT 'Last Updated Time'
) ENGINE = ReplacingMergeTree(updated_at)
ORDER BY (advisory, cve)
""".strip()

VEX_COLUMNS = ['advisory', 'cve', 'title', 'description', 'affected']
BATCH_SIZE = 1000


def build_where(query: str) -> tuple[str, dict[str, Any]]:
    """Translate a VEX query into a parameterized WHERE clause."""
    clauses = []
    params: dict[str, Any] = {}
    for i, term in enumerate(parse_query(query)):
        name = f"p{i}"
        if term.field == 'affected':
            clauses.append(f"has(affected, {{{name}:String}})")
            params[name] = term.value
        elif term.field in ('cve', 'advisory'):
            clauses.append(f"{term.field} = {{{name}:String}}")
            params[name] = term.value
        elif term.field is not None:
            clauses.append(
                f"positionCaseInsensitiveUTF8({term.field}, {{{name}:String}}) > 0",
            )
            params[name] = term.value
        else:
            clauses.append(
                '(' + ' OR '.join(
                    f"positionCaseInsensitiveUTF8({col}, {{{name}:String}}) > 0"
                    for col in ('cve', 'advisory', 'title', 'description')
                ) + ')',
            )
            params[name] = term.value
    return ' AND '.join(clauses), params


class ClickHouseVexIndex:
    """Read side answers VEX queries; write side (admin role) ingests documents."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = clickhouse_connect.get_client(
                **self.config.get_connection_params(),
            )
        return self._client

    @property
    def table(self) -> str:
        return self.config.vulnerabilities_table

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def search(self, query: str, offset: int, limit: int) -> list[VexMatch]:
        where, params = build_where(query)
        params.update({'offset': offset, 'limit': limit})
        sql = f"""
        SELECT cve, advisory, title
        FROM {self.table} FINAL
        WHERE {where}
        ORDER BY advisory, cve
        LIMIT {{limit:UInt32}} OFFSET {{offset:UInt32}}
        """
        try:
            rows = self.client.query(sql, parameters=params).result_rows
        except ClickHouseError as e:
            raise VexQueryError(f"ClickHouse query failed: {e}") from e
        return [VexMatch(cve=cve, advisory=advisory, title=title) for cve, advisory, title in rows]

    def count(self) -> int:
        return self.client.query(
            f'SELECT count() FROM {self.table} FINAL',
        ).result_rows[0][0]

    def ensure_schema(self) -> None:
        """Idempotent schema creation."""
        self.client.command(
            f"CREATE DATABASE IF NOT EXISTS {self.config.database}",
        )
        self.client.command(VULNERABILITIES_DDL.format(table=self.table))

    def insert_documents(self, documents: Iterable[VexDocument]) -> int:
        total = 0
        batch: list[list[Any]] = []
        for doc in documents:
            batch.append([doc.advisory, doc.cve, doc.title, doc.description, doc.affected])
            if len(batch) >= BATCH_SIZE:
                self.client.insert(self.table, batch, column_names=VEX_COLUMNS)
                total += len(batch)
                batch = []
        if batch:
            self.client.insert(self.table, batch, column_names=VEX_COLUMNS)
            total += len(batch)
        logger.info('Inserted VEX documents', table=self.table, count=total)
        return total

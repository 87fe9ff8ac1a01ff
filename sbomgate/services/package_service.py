from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
import structlog

from sbomgate.models.package import PackageSummary
from sbomgate.models.package import SearchResult
from sbomgate.services.deduplicator import deduplicate
from sbomgate.services.enricher import DEFAULT_LIMIT
from sbomgate.services.enricher import enrich
from sbomgate.services.sbom_client import SbomClient
from sbomgate.vex.shared import SharedIndex

logger = structlog.get_logger('package_service')


class PackageService:
    """Orchestrates package search: SBOM backend, deduplication, VEX enrichment."""

    def __init__(self, sbom: SbomClient, vex: SharedIndex, vex_limit: int = DEFAULT_LIMIT):
        self.sbom = sbom
        self.vex = vex
        self.vex_limit = vex_limit

    async def search(self, q: str, offset: int, limit: int) -> SearchResult[list[PackageSummary]]:
        """
        Search packages and return one enriched summary per distinct purl.

        Upstream failures propagate as GatewayError subclasses; the order of
        `result` is not stable across calls.
        """
        logger.debug('Querying SBOM', q=q, offset=offset, limit=limit)
        data = await self.sbom.search(q, offset, limit)

        packages = deduplicate(data.result)
        summaries = list(packages.values())
        await enrich(summaries, self.vex, limit=self.vex_limit)

        logger.info(
            'Search result', q=q,
            occurrences=len(data.result), packages=len(summaries),
        )
        return SearchResult[list[PackageSummary]](
            total=len(summaries),
            result=summaries,
        )

    @asynccontextmanager
    async def fetch(self, id: str) -> AsyncIterator[aiohttp.ClientResponse]:
        """Passthrough to the backend's document endpoint; no dedup or enrichment."""
        async with self.sbom.fetch(id) as response:
            yield response

import asyncio
from collections.abc import Iterable

import structlog

from sbomgate.models.package import PackageSummary
from sbomgate.vex.query import affected_query
from sbomgate.vex.shared import SharedIndex

logger = structlog.get_logger('enricher')

DEFAULT_LIMIT = 1000


async def enrich(
    packages: Iterable[PackageSummary],
    shared: SharedIndex,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """
    Attach vulnerability identifiers to each package in place.

    The read guard is taken once for the whole batch. Identifiers are kept
    in index order with repeats dropped. A failed query only costs that one
    package its vulnerabilities.
    """
    async with shared.read() as index:
        for package in packages:
            query = affected_query(package.purl)
            try:
                matches = await asyncio.to_thread(index.search, query, 0, limit)
            except Exception as e:
                logger.warning(
                    'VEX query failed', purl=package.purl, error=str(e),
                )
            else:
                for match in matches:
                    if match.cve not in package.vulnerabilities:
                        package.vulnerabilities.append(match.cve)

            logger.info(
                'Found vulnerabilities',
                count=len(package.vulnerabilities), purl=package.purl,
            )

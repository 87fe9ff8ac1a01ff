import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
import structlog
from pydantic import ValidationError
from yarl import URL

from sbomgate.core.config import SbomConfig
from sbomgate.core.exceptions import UpstreamDecodeError
from sbomgate.core.exceptions import UpstreamStatusError
from sbomgate.core.exceptions import UpstreamTransportError
from sbomgate.core.exceptions import UrlConstructionError
from sbomgate.models.package import SbomSearchResult

logger = structlog.get_logger('sbom_client')

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def create_session(config: SbomConfig) -> aiohttp.ClientSession:
    """Session shared by all requests; no total timeout so long documents can stream."""
    timeout = aiohttp.ClientTimeout(
        total=None,
        connect=config.timeout,
        sock_read=config.timeout,
    )
    return aiohttp.ClientSession(timeout=timeout, raise_for_status=False)


class SbomClient:
    """Client for the SBOM backend's search and fetch endpoints. Never retries."""

    def __init__(self, session: aiohttp.ClientSession, config: SbomConfig):
        self.session = session
        self.config = config

    def endpoint(self, path: str) -> URL:
        try:
            base = URL(self.config.base_url)
        except (TypeError, ValueError) as e:
            raise UrlConstructionError(f"Invalid SBOM base URL {self.config.base_url!r}: {e}") from e
        if not base.is_absolute() or base.scheme not in ('http', 'https'):
            raise UrlConstructionError(f"Invalid SBOM base URL {self.config.base_url!r}")
        return base.join(URL(path))

    async def search(self, q: str, offset: int, limit: int) -> SbomSearchResult:
        try:
            url = self.endpoint(self.config.search_path)
        except UrlConstructionError as e:
            logger.warning('Error constructing SBOM search URL', error=str(e))
            raise

        params = {'q': q, 'offset': str(offset), 'limit': str(limit)}
        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    logger.debug(
                        'SBOM search returned non-success status',
                        status=response.status,
                    )
                    raise UpstreamStatusError(response.status)
                body = await response.read()
        except TRANSPORT_ERRORS as e:
            logger.warning('Error searching SBOM backend', error=repr(e))
            raise UpstreamTransportError(str(e)) from e

        try:
            return SbomSearchResult.model_validate_json(body)
        except ValidationError as e:
            logger.warning(
                'Error deserializing SBOM search result',
                errors=e.error_count(), error=str(e),
            )
            raise UpstreamDecodeError(str(e)) from e

    @asynccontextmanager
    async def fetch(self, id: str) -> AsyncIterator[aiohttp.ClientResponse]:
        """Yield the open upstream response for `id`; the caller streams its body."""
        try:
            url = self.endpoint(self.config.fetch_path)
        except UrlConstructionError as e:
            logger.warning('Error constructing SBOM fetch URL', error=str(e))
            raise

        try:
            response = await self.session.get(url, params={'id': id})
        except TRANSPORT_ERRORS as e:
            logger.warning('Error fetching from SBOM backend', id=id, error=repr(e))
            raise UpstreamTransportError(str(e)) from e

        try:
            yield response
        finally:
            response.release()

import asyncio
import contextlib
import time
import uuid

import structlog
from aiohttp import web

from sbomgate.core.config import GatewayConfig
from sbomgate.core.container import Container
from sbomgate.gateway import handlers
from sbomgate.gateway.keys import CONFIG_KEY
from sbomgate.gateway.keys import INDEX_KEY
from sbomgate.gateway.keys import SERVICE_KEY
from sbomgate.services.package_service import PackageService
from sbomgate.services.sbom_client import create_session
from sbomgate.services.sbom_client import SbomClient
from sbomgate.vex.index import MemoryVexIndex
from sbomgate.vex.loader import load_documents
from sbomgate.vex.shared import SharedIndex

logger = structlog.get_logger('gateway')


@web.middleware
async def request_context(request: web.Request, handler):
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request.headers.get('X-Request-ID') or uuid.uuid4().hex[:12],
        path=request.path,
    )
    start = time.monotonic()
    status = 500
    try:
        response = await handler(request)
        status = response.status
        return response
    except web.HTTPException as e:
        status = e.status
        raise
    finally:
        logger.info(
            'Request', method=request.method, status=status,
            elapsed=f"{time.monotonic() - start:.3f}s",
        )


async def sbom_session(app: web.Application):
    config = app[CONFIG_KEY]
    session = create_session(config.sbom)
    app[SERVICE_KEY] = PackageService(
        SbomClient(session, config.sbom),
        app[INDEX_KEY],
        vex_limit=config.vex.search_limit,
    )
    logger.info('SBOM backend configured', base_url=config.sbom.base_url)
    yield
    await session.close()


async def reload_index(shared: SharedIndex, config: GatewayConfig) -> None:
    """Rebuild the in-memory index from the documents file on a fixed interval."""
    path = config.vex.documents
    while True:
        await asyncio.sleep(config.vex.reload_interval)
        if path is None or not path.exists():
            logger.warning('VEX documents missing, keeping current index', path=str(path))
            continue
        try:
            documents = await asyncio.to_thread(load_documents, path)
        except (OSError, ValueError) as e:
            # Undecodable bytes raise UnicodeDecodeError, a ValueError
            logger.warning('Failed to read VEX documents', path=str(path), error=str(e))
            continue
        await shared.replace(MemoryVexIndex(documents))


async def index_reloader(app: web.Application):
    config = app[CONFIG_KEY]
    vex = config.vex
    if vex.backend != 'memory' or vex.documents is None or vex.reload_interval <= 0:
        yield
        return

    task = asyncio.create_task(reload_index(app[INDEX_KEY], config))
    logger.info('VEX index reload enabled', interval=vex.reload_interval)
    yield
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


def create_app(
    config: GatewayConfig | None = None,
    index: SharedIndex | None = None,
) -> web.Application:
    container = Container(config) if config is not None else Container.get_instance()

    app = web.Application(middlewares=[request_context])
    app[CONFIG_KEY] = container.config
    app[INDEX_KEY] = index or container.get_shared_index()
    app.cleanup_ctx.append(sbom_session)
    app.cleanup_ctx.append(index_reloader)

    app.router.add_get('/api/v1/package/search', handlers.search)
    app.router.add_get('/api/v1/package', handlers.get_package)
    app.router.add_get('/healthz', handlers.health)
    return app

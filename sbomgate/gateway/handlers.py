import structlog
from aiohttp import web

from sbomgate.__version__ import __version__
from sbomgate.core.exceptions import GatewayError
from sbomgate.core.exceptions import UpstreamStatusError
from sbomgate.gateway.keys import SERVICE_KEY
from sbomgate.services.sbom_client import TRANSPORT_ERRORS

logger = structlog.get_logger('handlers')

CHUNK_SIZE = 64 * 1024
DEFAULT_LIMIT = 10
# Headers relayed from the document endpoint; the body arrives decoded,
# so Content-Encoding and Content-Length are not.
PASSTHROUGH_HEADERS = ('Content-Type', 'Content-Disposition')


def _int_param(request: web.Request, name: str, default: int) -> int:
    raw = request.query.get(name)
    if raw is None or raw == '':
        return default
    # int() alone would also take '1_0', ' 5' and '+5'
    if not (raw.isascii() and raw.isdigit()):
        raise web.HTTPBadRequest(text=f"{name} must be a non-negative integer")
    return int(raw)


async def search(request: web.Request) -> web.Response:
    q = request.query.get('q', '')
    offset = _int_param(request, 'offset', 0)
    limit = _int_param(request, 'limit', DEFAULT_LIMIT)

    service = request.app[SERVICE_KEY]
    try:
        result = await service.search(q, offset, limit)
    except UpstreamStatusError as e:
        # Relay the upstream status as-is, without a body
        return web.Response(status=e.status)
    except GatewayError:
        return web.Response(status=500)

    return web.json_response(text=result.model_dump_json(by_alias=True))


async def get_package(request: web.Request) -> web.StreamResponse:
    id = request.query.get('id')
    if not id:
        raise web.HTTPBadRequest(text='id is required')

    service = request.app[SERVICE_KEY]
    try:
        async with service.fetch(id) as upstream:
            response = web.StreamResponse(status=upstream.status)
            for header in PASSTHROUGH_HEADERS:
                if header in upstream.headers:
                    response.headers[header] = upstream.headers[header]
            await response.prepare(request)
            try:
                async for chunk in upstream.content.iter_chunked(CHUNK_SIZE):
                    await response.write(chunk)
            except TRANSPORT_ERRORS as e:
                logger.warning('SBOM document stream interrupted', id=id, error=repr(e))
                raise
            await response.write_eof()
            return response
    except GatewayError:
        return web.Response(status=500)


async def health(request: web.Request) -> web.Response:
    return web.json_response({'status': 'ok', 'version': __version__})

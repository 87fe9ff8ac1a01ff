import structlog
import typer
from aiohttp import web

from sbomgate.core.container import get_container
from sbomgate.core.decorators import handle_errors
from sbomgate.gateway.app import create_app

logger = structlog.get_logger('serve')


@handle_errors
def main(
    host: str = typer.Option(None, help='Bind address'),
    port: int = typer.Option(None, help='Bind port'),
    sbom_url: str = typer.Option(None, help='SBOM backend base URL'),
):
    """
    Run the package search gateway.
    """
    container = get_container()
    config = container.config

    # CLI Overrides
    if host:
        config.server.host = host
    if port:
        config.server.port = port
    if sbom_url:
        config.sbom.base_url = sbom_url

    logger.info(
        'Starting gateway',
        host=config.server.host, port=config.server.port,
        vex_backend=config.vex.backend,
    )
    web.run_app(
        create_app(),
        host=config.server.host,
        port=config.server.port,
        print=None,
    )

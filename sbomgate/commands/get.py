from pathlib import Path

import typer

from sbomgate.core.container import get_container
from sbomgate.core.decorators import handle_errors
from sbomgate.core.logging import console


CHUNK_SIZE = 64 * 1024


@handle_errors
def main(
    id: str = typer.Argument(..., help='SBOM identifier'),
    output: Path = typer.Option(..., '--output', '-o', help='Destination file'),
    url: str = typer.Option(None, help='Gateway URL'),
):
    """
    Download an SBOM document through a running gateway.
    """
    container = get_container()
    base_url = (url or container.config.server.url).rstrip('/')
    session = container.get_http_client()

    with session.cache_disabled(), session.get(
        f"{base_url}/api/v1/package",
        params={'id': id},
        stream=True,
        timeout=60,
    ) as response:
        response.raise_for_status()
        output.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        with open(output, 'wb') as f:
            for chunk in response.iter_content(CHUNK_SIZE):
                f.write(chunk)
                written += len(chunk)

    console.print(f"[green]Saved[/green] {id} to {output} ({written:,} bytes)")

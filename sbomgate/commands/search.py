import typer
from rich.table import Table

from sbomgate.core.container import get_container
from sbomgate.core.decorators import handle_errors
from sbomgate.core.logging import console
from sbomgate.models.package import PackageSummary
from sbomgate.models.package import SearchResult


def render_packages(result: SearchResult[list[PackageSummary]], q: str) -> Table:
    table = Table(title=f"Packages matching '{q}' ({result.total or 0} total)")
    table.add_column('Package URL', style='cyan')
    table.add_column('License', style='green')
    table.add_column('Supplier', style='yellow')
    table.add_column('Dependents', style='magenta', justify='right')
    table.add_column('Vulnerabilities', style='red')

    for package in sorted(result.result, key=lambda p: p.purl):
        table.add_row(
            package.purl,
            package.license or '-',
            package.supplier or '-',
            str(len(package.dependents)),
            ', '.join(package.vulnerabilities) or '-',
        )
    return table


@handle_errors
def main(
    query: str = typer.Argument(..., help='Free-text package query'),
    offset: int = typer.Option(0, help='Result offset'),
    limit: int = typer.Option(10, help='Max occurrences to fetch'),
    url: str = typer.Option(None, help='Gateway URL'),
    as_json: bool = typer.Option(False, '--json', help='Print raw JSON'),
):
    """
    Search packages through a running gateway.
    """
    container = get_container()
    base_url = (url or container.config.server.url).rstrip('/')
    session = container.get_http_client()

    response = session.get(
        f"{base_url}/api/v1/package/search",
        params={'q': query, 'offset': offset, 'limit': limit},
        timeout=60,
    )
    response.raise_for_status()

    if as_json:
        console.print_json(response.text)
        return

    result = SearchResult[list[PackageSummary]].model_validate_json(response.content)
    if not result.result:
        console.print(f"[yellow]No packages found for '{query}'.[/yellow]")
        return
    console.print(render_packages(result, query))

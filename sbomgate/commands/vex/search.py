import typer
from rich.table import Table

from sbomgate.core.container import get_container
from sbomgate.core.decorators import handle_errors
from sbomgate.core.logging import console


@handle_errors
def main(
    query: str = typer.Argument(..., help='Index query, e.g. affected:"pkg:npm/lodash@4.17.20"'),
    offset: int = typer.Option(0, help='Result offset'),
    limit: int = typer.Option(20, help='Max matches'),
):
    """
    Run a raw query against the configured VEX index backend.
    """
    index = get_container().get_vex_index()
    matches = index.search(query, offset, limit)

    if not matches:
        console.print(f"[yellow]No VEX matches for {query}.[/yellow]")
        return

    table = Table(title=f"VEX matches for {query}")
    table.add_column('Vulnerability', style='red')
    table.add_column('Advisory', style='cyan')
    table.add_column('Title', style='green')
    for match in matches:
        table.add_row(match.cve, match.advisory or '-', match.title or '-')
    console.print(table)

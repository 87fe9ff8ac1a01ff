from pathlib import Path

import structlog
import typer

from sbomgate.core.container import get_container
from sbomgate.core.decorators import handle_errors
from sbomgate.core.logging import console
from sbomgate.vex.loader import load_documents

logger = structlog.get_logger('vex_load')


@handle_errors
def main(
    input_file: Path = typer.Argument(..., help='JSONL file of VEX documents'),
):
    """
    Ingest VEX documents into the ClickHouse vulnerabilities table (Admin).
    """
    if not input_file.is_file():
        raise ValueError(f"Not a file: {input_file}")

    documents = load_documents(input_file)
    if not documents:
        console.print(f"[yellow]No valid VEX documents in {input_file}.[/yellow]")
        return

    with get_container().get_vex_repository() as repo:
        repo.ensure_schema()
        inserted = repo.insert_documents(documents)
        total = repo.count()

    console.print(
        f"[green]Inserted[/green] {inserted:,} documents; table now holds {total:,}",
    )

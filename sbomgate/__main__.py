import dotenv
import typer

from sbomgate.__version__ import __version__
from sbomgate.commands import get
from sbomgate.commands import search
from sbomgate.commands import serve
from sbomgate.commands import vex
from sbomgate.core.logging import setup_logging

dotenv.load_dotenv()

app = typer.Typer(
    help='sbomgate: package search over SBOMs, enriched with VEX data.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

app.command('serve')(serve.main)
app.command('search')(search.main)
app.command('get')(get.main)
app.add_typer(vex.app, name='vex')


def _print_version(value: bool):
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(False, '--debug', help='Enable debug logging'),
    version: bool = typer.Option(
        False, '--version', callback=_print_version, is_eager=True,
        help='Show version and exit',
    ),
):
    """
    sbomgate CLI.
    """
    level = 'DEBUG' if debug else 'INFO'
    setup_logging(level=level)


if __name__ == '__main__':
    app()

import typer

from . import load
from . import search

app = typer.Typer(help='VEX index operations', no_args_is_help=True)

app.command('load')(load.main)
app.command('search')(search.main)

import functools
from collections.abc import Callable
from typing import Any

import requests
import structlog
import typer

from sbomgate.core.exceptions import GatewayError
from sbomgate.core.logging import console
logger = structlog.get_logger('cli')


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to turn exceptions in CLI commands into readable messages and exit codes."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except ValueError as e:
            console.print(f"[bold red]Validation Error:[/] {e}")
            logger.debug('Validation error', exc_info=True)
            raise typer.Exit(1)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else '?'
            console.print(f"[bold red]Gateway Error:[/] HTTP {status}")
            raise typer.Exit(2)
        except (requests.RequestException, GatewayError) as e:
            console.print(f"[bold red]Connection Error:[/] {e}")
            logger.debug('Connection error', exc_info=True)
            raise typer.Exit(2)
        except KeyboardInterrupt:
            console.print('\n[yellow]Operation cancelled by user.[/]')
            raise typer.Exit(130)
        except Exception as e:
            console.print(f"[bold red]Unexpected Error:[/] {e}")
            logger.exception('Unexpected error')
            raise typer.Exit(1)
    return wrapper

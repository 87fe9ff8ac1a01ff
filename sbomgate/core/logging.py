import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console

# Shared console for CLI output
console = Console()


class RichConsoleRenderer:
    """
    Render structlog events on a rich console as `key=value` lines.

    Levels get a colour; an optional `_style` key in the event dict styles
    the whole line and is never printed itself.
    """

    LEVEL_STYLES = {
        'debug': 'dim',
        'info': 'green',
        'warning': 'yellow',
        'error': 'bold red',
        'critical': 'bold magenta',
    }

    def __init__(self):
        # Resolves sys.stderr at print time
        self._console = Console(stderr=True)

    def __call__(self, logger, name, event_dict):
        style = event_dict.pop('_style', None)
        event = event_dict.pop('event', '')
        level = event_dict.pop('level', 'info')
        logger_name = event_dict.pop('logger', None)
        timestamp = event_dict.pop('timestamp', None)
        exception = event_dict.pop('exception', None) or event_dict.pop('exc_info', None)
        stack = event_dict.pop('stack_info', None)

        level_style = self.LEVEL_STYLES.get(level, 'white')
        parts = []
        if timestamp:
            parts.append(f"[dim]{timestamp}[/dim]")
        if logger_name:
            parts.append(f"[bold]{logger_name}[/bold]")
        parts.append(f"[{level_style}]{level:<8}[/{level_style}]")
        parts.append(str(event))

        # request_id and path first so request lines read left to right
        for key in sorted(event_dict, key=lambda k: (k not in ('request_id', 'path'), k)):
            parts.append(f"[cyan]{key}[/cyan]=[green]{event_dict[key]!r}[/green]")

        line = ' '.join(parts)
        if exception:
            line += f"\n[red]{exception}[/red]"
        if stack:
            line += f"\n[dim]{stack}[/dim]"

        self._console.print(line, style=style, highlight=False)
        raise structlog.DropEvent


def drop_style_processor(logger, method_name, event_dict):
    """Strip the console-only `_style` hint before machine-readable rendering."""
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO') -> None:
    """
    Configure structlog for the CLI and the gateway.

    `ENV=production` switches to one JSON object per line; otherwise events
    go through RichConsoleRenderer.
    """
    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)
    # aiohttp's access log duplicates our request middleware
    logging.getLogger('aiohttp.access').setLevel(logging.WARNING)

    shared_processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if os.getenv('ENV') == 'production':
        processors = shared_processors + [
            drop_style_processor,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            RichConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

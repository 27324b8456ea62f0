"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .config import load_config
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)


def get_service(ctx: click.Context) -> SnapshotService:
    """Build the service stack from the CLI context (config and optional runner)."""
    obj = ctx.ensure_object(dict)
    if 'service' not in obj:
        config = obj.get('config') or load_config()
        obj['service'] = SnapshotService(config=config, runner=obj.get('runner'))
    return obj['service']


def render_table(rows: List[Dict[str, Any]], columns: Sequence[str], title: Optional[str] = None):
    """Render rows as a rich table on stdout."""
    console = Console()
    table = Table(title=title)
    for column in columns:
        table.add_column(column.replace('_', ' ').title())
    for row in rows:
        table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
    console.print(table)


def emit(result: Any, pretty: bool = False, columns: Optional[Sequence[str]] = None,
         title: Optional[str] = None):
    """
    Write command results to stdout.

    JSONL by default, one object per line; a rich table when pretty is set.
    """
    if result is None:
        return
    rows = [result] if isinstance(result, dict) else list(result)

    if pretty and rows:
        render_table(rows, columns or list(rows[0].keys()), title)
        return

    for row in rows:
        print(json.dumps(row, ensure_ascii=False), flush=True)


def standard_command(columns: Optional[Iterable[str]] = None, title: Optional[str] = None):
    """
    Decorator that provides standard CLI behavior:
    - Clean JSONL output on stdout, or a table with --pretty
    - Consistent error handling with meaningful exit codes

    The wrapped function returns a dict, a list of dicts, or None when it
    writes its own output.
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            pretty = kwargs.get('pretty', False)

            try:
                result = func(*args, **kwargs)
                emit(result, pretty=pretty, columns=list(columns) if columns else None, title=title)
                sys.exit(SUCCESS)

            except KeyboardInterrupt:
                logger.error("Interrupted by user")
                sys.exit(INTERRUPTED)
            except click.ClickException:
                # Click exceptions already have their exit code
                raise
            except (CommandError, OSError, ValueError) as e:
                exit_code = get_exit_code_for_exception(e)
                logger.error(str(e))
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": exit_code
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
                sys.exit(exit_code)

        return wrapper
    return decorator


def add_common_options(*options):
    """
    Add common options to a command.

    Available options:
    - 'pretty': --pretty flag for table output
    """
    def decorator(func):
        if 'pretty' in options:
            func = click.option('--pretty', is_flag=True, help='Display as formatted table')(func)
        return func
    return decorator

"""Console front-end for the scheduling core.

Usage:
    clocked run events.json      schedule the events and wait for them
    clocked actions              list the available actions
    clocked check-shutdown       report (and abort) an OS-level shutdown
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape as escape_rich_markup
from rich.table import Table

from clocked import __version__
from clocked.app import ClockedApp, create_app
from clocked.messaging.rich_renderer import RichNotificationRenderer
from clocked.settings import ClockedSettings, get_settings
from clocked.timing import format_when

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clocked", description="Clocked - schedule system actions"
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"{__version__}",
        help="Show version and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log OS commands instead of running them",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the console log level (e.g., --log-level DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    run_parser = subparsers.add_parser("run", help="Schedule events from a JSON file")
    run_parser.add_argument("file", type=Path, help="JSON file with event definitions")
    subparsers.add_parser("actions", help="List available actions")
    subparsers.add_parser("check-shutdown", help="Report an OS-level scheduled shutdown")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def load_definitions(path: Path) -> List[Dict[str, Any]]:
    """Read event definitions: a list, a single object, or ``{"events": [...]}``."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("events", [data])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of events")
    return data


async def run_events(
    app: ClockedApp, definitions: List[Dict[str, Any]], console: Console
) -> int:
    renderer = RichNotificationRenderer(app.bus, console)
    renderer.start()

    scheduled = 0
    for definition in definitions:
        result = await app.create_event(definition)
        raw_title = definition.get("title") if isinstance(definition, dict) else None
        title = escape_rich_markup(str(raw_title or "?"))
        if result.success and result.event:
            scheduled += 1
            console.print(
                f"[green]✓[/green] {title}: {result.message} "
                f"[dim]({format_when(result.event.target_datetime)})[/dim]"
            )
        else:
            console.print(f"[red]✗[/red] {title}: {escape_rich_markup(result.message)}")

    if not scheduled:
        renderer.stop()
        return 1

    try:
        while app.has_pending_work():
            await asyncio.sleep(POLL_INTERVAL_SECONDS)
        drain = getattr(app.scheduler, "drain", None)
        if drain is not None:
            await drain()
    finally:
        app.close()
        renderer.stop()
    console.print("[dim]Todos os eventos foram executados[/dim]")
    return 0


def render_actions(app: ClockedApp, console: Console) -> None:
    table = Table(title="Actions disponíveis")
    table.add_column("Tipo", style="cyan")
    table.add_column("Nome")
    table.add_column("Ícone", style="dim")
    for row in app.list_actions():
        table.add_row(row["type"], row["name"], row["icon"])
    console.print(table)


async def _main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings: ClockedSettings = get_settings()
    overrides: Dict[str, Any] = {}
    if args.dry_run:
        overrides["dry_run"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(settings.log_level)

    console = Console()
    app = create_app(settings)

    if args.command == "actions":
        render_actions(app, console)
        return 0

    if args.command == "check-shutdown":
        status = await app.check_os_shutdown()
        style = "yellow" if status.scheduled else "green"
        console.print(f"[{style}]{escape_rich_markup(status.message)}[/{style}]")
        return 0

    try:
        definitions = load_definitions(args.file)
    except (OSError, ValueError) as e:
        console.print(f"[red]Não foi possível ler {escape_rich_markup(str(args.file))}: {e}[/red]")
        return 2
    logger.debug(f"Loaded {len(definitions)} event definition(s) from {args.file}")
    return await run_events(app, definitions, console)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the installed CLI tool."""
    try:
        return asyncio.run(_main(argv))
    except KeyboardInterrupt:
        sys.stderr.write("Interrompido\n")
        return 130


if __name__ == "__main__":
    sys.exit(main())

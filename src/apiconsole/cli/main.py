"""Command-line entrypoint.

    apiconsole [CATALOG] [--base-url URL] [--script FILE] [--quit] [--verbose]
               [--print] [--print-length N]

Runs an optional script first, then the interactive shell unless `--quit`.
"""

from __future__ import annotations

import asyncio
import io
import logging
import time
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from apiconsole.adapters.catalog_loader import load_catalog
from apiconsole.adapters.http_client import build_async_client
from apiconsole.adapters.resource_fetcher import LocatorResourceFetcher
from apiconsole.cli.console_hosts import NullConsoleHost, RichConsoleHost
from apiconsole.cli.shells import InteractiveShell, ScriptedShell
from apiconsole.cli.ui_components import print_banner, print_failure
from apiconsole.core.config import AppSettings
from apiconsole.core.domain.catalog import OperationCatalog
from apiconsole.core.errors import ConsoleError
from apiconsole.core.parser import CommandParser
from apiconsole.core.processor import CommandProcessor
from apiconsole.core.session import Session

app = typer.Typer(add_completion=False, help="Call API operations with human-friendly commands.")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


async def run_session(
    *,
    settings: AppSettings,
    catalog: OperationCatalog,
    base_url: str | None,
    script: str | None,
    interactive: bool,
    verbose: bool,
    print_responses: bool,
    print_length: int,
    console: Console,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Wire one session (client, processor, shells) and run it to completion."""

    session = Session.from_settings(settings)
    parser = CommandParser()

    async with build_async_client(settings, base_url=base_url, transport=transport) as client:
        processor = CommandProcessor(
            parser,
            session.variables,
            catalog,
            client,
            LocatorResourceFetcher(settings),
        )

        if script is not None:
            if verbose:
                console.print("Running script... ", end="")
            host = RichConsoleHost(console, print_max_chars=-1) if print_responses else NullConsoleHost()
            await ScriptedShell(host, parser, processor, session, io.StringIO(script)).run()
            if verbose:
                console.print(" Done.")
            console.print()

        if interactive:
            host = RichConsoleHost(console, print_max_chars=print_length)
            await InteractiveShell(host, parser, processor, session).run()


@app.command()
def console(
    catalog: str | None = typer.Argument(
        None,
        help="Operation catalog reference 'package.module:attribute'.",
    ),
    base_url: str | None = typer.Option(None, "--base-url", "-u", help="Base URL of the API."),
    script: Path | None = typer.Option(None, "--script", "-s", help="Script file to run."),
    quit_after_script: bool = typer.Option(
        False,
        "--quit",
        "-q",
        help="Don't run the interactive shell (run script and quit).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output and debug logging."),
    print_responses: bool = typer.Option(False, "--print", "-p", help="Print responses when running a script."),
    print_length: int | None = typer.Option(
        None,
        "--print-length",
        "-l",
        help="Maximum response text length printed in interactive mode (-1 for no limit).",
    ),
) -> None:
    """Start the console for CATALOG (built-in services are always available)."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    show_progress = script is None or verbose

    try:
        script_text = None
        if script is not None:
            if not script.is_file():
                raise FileNotFoundError(f"Script file not found - '{script}'")
            script_text = script.read_text(encoding="utf-8-sig")

        started = time.perf_counter()
        if show_progress:
            _console.print(f"Loading catalog '{catalog or 'built-in'}'...", end="")
        operation_catalog = load_catalog(catalog)
        if show_progress:
            _console.print(f" Done ({(time.perf_counter() - started) * 1000:,.0f}ms).")
            _console.print()

        interactive = not quit_after_script
        if interactive and show_progress:
            print_banner(_console, services=len(operation_catalog), base_url=base_url)

        asyncio.run(
            run_session(
                settings=settings,
                catalog=operation_catalog,
                base_url=base_url,
                script=script_text,
                interactive=interactive,
                verbose=verbose,
                print_responses=print_responses,
                print_length=settings.print_max_chars if print_length is None else print_length,
                console=_console,
            )
        )
    except (ConsoleError, OSError, httpx.HTTPError) as exc:
        _console.print()
        print_failure(_console, exc)
        raise typer.Exit(code=1) from exc


def run() -> None:
    app()

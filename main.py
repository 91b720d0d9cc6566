#!/usr/bin/env python3
"""
Google Workspace Empty Group Cleanup - Main Entry Point

Lists groups without members and owners into a Google Sheet, emails a summary
and deletes the listed groups on confirmation.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
import colorlog

from empty_groups.auth import AuthManager
from empty_groups.commands import (
    CommandSurface, MENU_ITEMS, LIST_EMPTY_GROUPS, RESET_AND_START_OVER,
    DELETE_EMPTY_GROUPS, UnknownCommandError
)
from empty_groups.config import ConfigManager, AppConfig
from empty_groups.deletion import EmptyGroupDeleter
from empty_groups.directory import DirectoryClient
from empty_groups.dummy_data import DummyDataGenerator, InMemoryReportSheet, LoggingNotifier
from empty_groups.models import DeletionResult, ScanResult
from empty_groups.notifier import EmailNotifier
from empty_groups.reporting import ReportExporter
from empty_groups.scanner import EmptyGroupScanner
from empty_groups.sheet import ReportSheet
from empty_groups.state import JsonPropertyStore, TriggerRegistry


logger = logging.getLogger(__name__)


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        config: Application configuration
        verbose: Enable verbose logging
    """
    log_level = logging.DEBUG if verbose else getattr(logging, config.logging.level)

    console_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(log_level)

    handlers = [console_handler]
    if config.logging.file:
        file_formatter = logging.Formatter(config.logging.format)
        file_handler = logging.FileHandler(config.logging.file)
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        format=config.logging.format,
        force=True
    )

    # Reduce noise from external libraries
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class Runtime:
    """Lazily wires configuration, backends and the command surface."""

    def __init__(self, config_path: Path, verbose: bool, demo: bool):
        self.config_path = config_path
        self.verbose = verbose
        self.demo = demo
        self._config: Optional[AppConfig] = None
        self._surface: Optional[CommandSurface] = None
        self._sheet = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            if self.demo and not self.config_path.exists():
                self._config = AppConfig()
            else:
                self._config = ConfigManager(self.config_path).load_config()
            setup_logging(self._config, self.verbose)
            logger.info(f"Configuration loaded from: {self.config_path}")
        return self._config

    def _build_backends(self):
        config = self.config

        if self.demo:
            generator = DummyDataGenerator(seed=42)
            generator.generate_groups(count=450, empty_ratio=7 / 450)
            directory = generator.build_directory(page_size=config.directory.page_size)
            return directory, InMemoryReportSheet(config.sheet.sheet_name), LoggingNotifier(config.notification.recipient)

        if not config.sheet.spreadsheet_id:
            raise ValueError("sheet.spreadsheet_id is not configured")

        auth = AuthManager.from_environment()
        directory = DirectoryClient(
            auth.get_service("admin", "directory_v1"),
            customer_id=config.directory.customer_id,
            page_size=config.directory.page_size,
        )
        sheet = ReportSheet(
            auth.get_service("sheets", "v4"),
            spreadsheet_id=config.sheet.spreadsheet_id,
            sheet_name=config.sheet.sheet_name,
        )
        notifier = EmailNotifier(
            auth.get_service("gmail", "v1"),
            recipient=config.notification.recipient,
            subject=config.notification.subject,
            body_template=config.notification.body_template,
        )
        return directory, sheet, notifier

    def _build(self) -> None:
        config = self.config
        directory, sheet, notifier = self._build_backends()
        store = JsonPropertyStore(Path(config.state.path))

        self._sheet = sheet
        self._surface = CommandSurface(
            scanner=EmptyGroupScanner(directory, sheet, notifier, store=store, tz=config.tzinfo),
            deleter=EmptyGroupDeleter(directory, sheet, tz=config.tzinfo),
            store=store,
            triggers=TriggerRegistry(store),
            confirm=lambda prompt: click.confirm(prompt, default=False),
        )

    @property
    def surface(self) -> CommandSurface:
        if self._surface is None:
            self._build()
        return self._surface

    @property
    def sheet(self):
        if self._sheet is None:
            self._build()
        return self._sheet


def _report(result) -> None:
    """Echo a command result."""
    if isinstance(result, ScanResult):
        click.echo(f"[SUCCESS] Scan completed: {result.groups_evaluated} groups evaluated")
        click.echo(f"[INFO] Empty groups found: {result.empty_groups}")
        if result.notified:
            click.echo(f"[INFO] Report emailed for domain {result.domain}")
    elif isinstance(result, DeletionResult):
        click.echo(f"[SUCCESS] Deletion completed: {result.deleted} deleted, {result.failed} failed")
        for outcome in result.outcomes:
            if not outcome.succeeded:
                click.echo(f"  - {outcome.email}: {outcome.status} ({outcome.error})")
    elif result is None:
        click.echo("[INFO] Deletion cancelled")


def _run(runtime: Runtime, command_name: str) -> None:
    try:
        result = runtime.surface.dispatch(command_name)
    except UnknownCommandError as e:
        click.echo(f"[ERROR] Unknown command: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error during {command_name}: {e}")
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)
    _report(result)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    default="config/config.yaml",
    help="Configuration file path",
    type=click.Path(path_type=Path)
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging"
)
@click.option(
    "--demo",
    is_flag=True,
    help="Run against a generated in-memory directory instead of Google Workspace"
)
@click.pass_context
def cli(ctx, config_path, verbose, demo):
    """Find, report and delete Google Workspace groups with no members and no owners."""
    ctx.obj = Runtime(config_path, verbose, demo)


@cli.command()
@click.pass_obj
def scan(runtime: Runtime):
    """Start Listing Empty Groups."""
    _run(runtime, LIST_EMPTY_GROUPS)


@cli.command()
@click.pass_obj
def reset(runtime: Runtime):
    """Reset and Start Over."""
    _run(runtime, RESET_AND_START_OVER)


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Do not prompt for confirmation")
@click.option("--dry-run", is_flag=True, help="List the groups that would be deleted")
@click.pass_obj
def delete(runtime: Runtime, yes, dry_run):
    """Delete Found Empty Groups."""
    if dry_run:
        try:
            rows = runtime.sheet.read_all_rows()
        except Exception as e:
            click.echo(f"[ERROR] {e}", err=True)
            sys.exit(1)
        click.echo(f"[DRY RUN] Would delete {len(rows)} groups:")
        for row in rows:
            click.echo(f"  - {row.email} ({row.name})")
        return

    if yes:
        runtime.surface.confirm = lambda prompt: True
    _run(runtime, DELETE_EMPTY_GROUPS)


@cli.command()
@click.pass_obj
def menu(runtime: Runtime):
    """Interactive menu with the three commands."""
    while True:
        click.echo("\nEmpty Groups")
        for number, (label, _) in enumerate(MENU_ITEMS, start=1):
            click.echo(f"  {number}. {label}")
        click.echo("  q. Quit")

        choice = click.prompt("Select", default="q").strip().lower()
        if choice == "q":
            return
        if not choice.isdigit() or not 1 <= int(choice) <= len(MENU_ITEMS):
            click.echo(f"[ERROR] Invalid choice: {choice}", err=True)
            continue

        _run(runtime, MENU_ITEMS[int(choice) - 1][1])


@cli.command()
@click.option(
    "--format",
    "output_formats",
    type=click.Choice(["csv", "json", "excel"], case_sensitive=False),
    multiple=True,
    help="Output format(s) (overrides config file)"
)
@click.option(
    "--output",
    help="Output directory for exports (overrides config file)",
    type=click.Path(path_type=Path)
)
@click.pass_obj
def export(runtime: Runtime, output_formats, output):
    """Export the report sheet to local files."""
    try:
        config = runtime.config
        rows = runtime.sheet.read_all_rows()
        exporter = ReportExporter(
            output or config.output.directory,
            timestamp_format=config.output.timestamp_format,
        )
        generated_files = exporter.export(rows, list(output_formats) or config.output.formats)
    except Exception as e:
        logger.error(f"Error during export: {e}")
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)

    click.echo(f"[SUCCESS] Exported {len(rows)} rows")
    for format_type, file_path in generated_files.items():
        click.echo(f"  - {format_type.upper()}: {file_path.name}")


@cli.command("create-config")
@click.argument("path", type=click.Path(path_type=Path))
def create_config(path):
    """Create a default configuration file at PATH."""
    try:
        created_path = ConfigManager().create_default_config(path)
        click.echo(f"[SUCCESS] Default configuration created at: {created_path}")
    except Exception as e:
        click.echo(f"[ERROR] Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command("validate-config")
@click.pass_obj
def validate_config(runtime: Runtime):
    """Validate the configuration file and exit."""
    try:
        is_valid = ConfigManager(runtime.config_path).validate_config()
    except Exception as e:
        click.echo(f"[ERROR] Error validating configuration: {e}", err=True)
        sys.exit(1)

    if is_valid:
        click.echo("[SUCCESS] Configuration is valid")
    else:
        click.echo("[ERROR] Configuration validation failed", err=True)
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()

"""CLI interface for Resume Intake."""
import asyncio
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .models.results import ParsedResume, ParseError, ParseResult
from .parsers.base_parser import UploadedFile
from .services.configuration_manager import ConfigurationManager
from .services.error_handling import validate_file
from .services.parsing_service import ParsingService
from .services.summary import (
    ERROR_RECOVERY_GUIDE,
    create_parsing_summary,
    format_error_message,
    format_warning_message,
)
from .utils.exceptions import ResumeIntakeError
from .utils.logging import get_logger, setup_logging


console = Console()
logger = get_logger("cli")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, file_okay=False), help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool):
    """Resume Intake - turn resume documents into structured data."""
    ctx.ensure_object(dict)

    setup_logging("DEBUG" if verbose else "ERROR")

    try:
        config_manager = ConfigurationManager(config or "config")
        config_manager.initialize()
    except ResumeIntakeError as e:
        console.print(f"[red]Failed to load configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    logging_settings = config_manager.get_logging_config()
    if verbose:
        logging_settings["level"] = "DEBUG"
    elif not logging_settings["enable_file"]:
        # Keep the console quiet unless asked
        logging_settings["level"] = "ERROR"
    setup_logging(**logging_settings)

    ctx.obj["config_manager"] = config_manager
    logger.info("CLI initialized successfully")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the parse result as JSON")
@click.option("--media-type", "-m", default=None, help="Declared media type (guessed from the name by default)")
@click.pass_context
def parse(ctx: click.Context, file: str, as_json: bool, media_type: Optional[str]):
    """Parse a resume FILE and show what was extracted."""
    config_manager: ConfigurationManager = ctx.obj["config_manager"]
    service = ParsingService(
        config=config_manager.get_parser_config(),
        vocabulary=config_manager.build_vocabulary()
    )

    try:
        result = asyncio.run(service.parse_resume_file(file, media_type=media_type))
    except ResumeIntakeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
    else:
        _render_result(file, result)

    sys.exit(0 if result.success else 1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--media-type", "-m", default=None, help="Declared media type (guessed from the name by default)")
@click.pass_context
def validate(ctx: click.Context, file: str, media_type: Optional[str]):
    """Check whether FILE can be accepted for parsing."""
    config_manager: ConfigurationManager = ctx.obj["config_manager"]

    try:
        upload = asyncio.run(UploadedFile.from_path(file, media_type=media_type))
    except ResumeIntakeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    errors = validate_file(upload, max_size=config_manager.get_parser_config().max_file_size)
    if not errors:
        console.print(f"[green]✓ {escape(upload.name)} can be parsed[/green]")
        return

    _render_issues(errors, [])
    sys.exit(1)


@cli.command()
def guide():
    """Show how to recover from common parsing problems."""
    for topic in ERROR_RECOVERY_GUIDE.values():
        steps = "\n".join(f"• {step}" for step in topic["steps"])
        console.print(Panel(
            f"{topic['description']}\n\n{steps}",
            title=str(topic["title"]),
            border_style="blue"
        ))


def _render_result(file: str, result: ParseResult) -> None:
    """Print a human readable report of a parse."""
    parsed: Optional[ParsedResume] = result.data
    section_results = parsed.section_results if parsed else []

    status = "[green]Parsed successfully[/green]" if result.success else "[red]Parsing failed[/red]"
    confidence = f"{result.confidence:.0%}" if result.confidence is not None else "n/a"
    console.print(Panel(f"{status}\nConfidence: {confidence}", title=escape(file), border_style="blue"))

    if section_results:
        table = Table(title="Sections")
        table.add_column("Section")
        table.add_column("Entries", justify="right")
        table.add_column("Confidence", justify="right")
        for section_result in section_results:
            table.add_row(
                section_result.section.label,
                str(len(section_result.data)),
                f"{section_result.confidence:.0%}"
            )
        console.print(table)

    _render_issues(result.errors, result.warnings)

    summary = create_parsing_summary(section_results, result.errors, result.warnings)
    for recommendation in summary.recommendations:
        console.print(f"→ {escape(recommendation)}")


def _render_issues(errors: List[ParseError], warnings: List[ParseError]) -> None:
    for error in errors:
        console.print(f"[red]{escape(format_error_message(error))}[/red]")
        for suggestion in error.suggestions:
            console.print(f"   • {escape(suggestion)}")
    for warning in warnings:
        console.print(f"[yellow]{escape(format_warning_message(warning))}[/yellow]")


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        logger.error(f"Unexpected CLI error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

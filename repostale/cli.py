"""CLI entry point: list repositories, scan each, report outdated packages."""

import json
from pathlib import Path
from typing import List, Optional

import click
import typer

from .config import Settings, load_settings, require_token
from .errors import ListingError, MissingTokenError
from .fleet import audit
from .format import ConsoleReporter, RecordingReporter
from .log import configure_logging
from .registry import NuGetResolver
from .scanner.listing import ContentsClient

app = typer.Typer(help="Find outdated NuGet packages across your repositories.")


def _settings(config: Optional[Path]) -> Settings:
    settings = load_settings(config)
    try:
        require_token(settings)
    except MissingTokenError as e:
        typer.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise typer.Exit(code=2)
    return settings


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    ci: bool = typer.Option(False, "--ci", help="CI mode: exit 1 if any dependency is outdated"),
    repo: Optional[List[str]] = typer.Option(None, "--repo", "-r", help="Only scan OWNER/NAME (repeatable)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
    no_color: bool = typer.Option(False, "--no-color", help="Plain text output"),
) -> None:
    """Scan every repository of the token's user and report outdated packages."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return
    settings = _settings(config)

    if json_out:
        reporter = RecordingReporter()
    else:
        reporter = ConsoleReporter(extension=settings.extension, color=not no_color)

    with ContentsClient(settings) as client, NuGetResolver(settings) as resolver:
        try:
            summary = audit(client, resolver, reporter, settings, only=repo or None)
        except ListingError as e:
            typer.echo(f"HTTP Error: {e}", err=True)
            return

    if json_out:
        typer.echo(json.dumps(reporter.to_dict(), indent=2))

    if ci and summary.outdated_count:
        raise typer.Exit(1)


@app.command("latest")
def latest_cmd(
    package: str = typer.Argument(..., help="NuGet package id"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"),
) -> None:
    """Print the latest version the registry knows for a package."""
    with NuGetResolver(load_settings(config)) as resolver:
        typer.echo(resolver.latest_version(package) or "unknown")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()

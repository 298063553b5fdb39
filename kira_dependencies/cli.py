"""CLI entry point: kira-dependencies.

Subcommands:
    kira-dependencies run         # Open a merge request with pending updates (default)
    kira-dependencies managers    # List installed package-manager backends
    kira-dependencies config      # Show the parsed configuration, secrets masked

All configuration comes from environment variables (see ``core/config.py``).
"""

from __future__ import annotations

import json
import sys

import click

from kira_dependencies.backends.registry import create_default_registry
from kira_dependencies.core.config import Settings, load_settings
from kira_dependencies.core.logging import setup_logging
from kira_dependencies.exceptions import ConfigurationError
from kira_dependencies.updater.models import RunResult
from kira_dependencies.updater.runner import UpdateRunner


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Open dependency-update merge requests for GitLab-hosted projects."""
    setup_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command("run")
def run() -> None:
    """Check every selected dependency and open one merge request for the updates."""
    settings = _load_settings_or_exit()
    registry = create_default_registry()
    try:
        runner = UpdateRunner.from_registry(settings, registry)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Fetching {settings.package_manager} dependency files for {settings.project_path}")
    result = runner.run()
    _print_result(result)
    click.echo("Done!")


@main.command("managers")
def managers() -> None:
    """List the package managers and merge-request providers installed as plugins."""
    registry = create_default_registry()
    descriptors = registry.list_all()
    if not descriptors:
        click.echo("No package managers registered.")
    else:
        click.echo("Package managers:")
        for descriptor in descriptors:
            click.echo(f"  {descriptor.name}")

    providers = registry.pull_request_providers()
    if not providers:
        click.echo("No pull request creators registered.")
    else:
        click.echo("Pull request creators:")
        for provider in providers:
            click.echo(f"  {provider}")


@main.command("config")
def show_config() -> None:
    """Print the configuration read from the environment."""
    settings = _load_settings_or_exit()
    click.echo(json.dumps(settings.redacted(), indent=2, sort_keys=True))


def _load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _print_result(result: RunResult) -> None:
    for failure in result.failures:
        click.echo(f"error updating {failure.dependency} (continuing): {failure.error}")

    if result.status == "up_to_date":
        click.echo("Dependencies are up to date")
        return

    for dep in result.updated:
        click.echo(f"  {dep.name}: {dep.previous_version or '?'} -> {dep.version or '?'}")
    if result.status == "pull_request_created":
        click.echo("Pull request created.")
    else:
        click.echo(f"Pull request could not be created (continuing): {result.publish_error}")


if __name__ == "__main__":
    main()

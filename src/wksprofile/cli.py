# src/wksprofile/cli.py: Command-Line Interface (CLI) entry point.
# Implemented using Typer, this module provides the 'wksprofile' command and
# its 'profile' group (enable, disable, list). It is the single place where
# application errors are turned into messages and process exit codes.

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Config, load_config
from .gitwrap import GitClient
from .profiles import ProfileManager
from .util.errors import ExitCode, InvalidURLError, WksProfileError
from .util.log import setup_logging

app = typer.Typer(
    name="wksprofile",
    help="Manage the profiles of a cluster-definition repository.",
    add_completion=False,
)
profile_app = typer.Typer(help="Enable, disable and list profiles.", no_args_is_help=True)
app.add_typer(profile_app, name="profile")

console = Console(stderr=True)


class AppState:
    """Per-invocation settings shared by all subcommands."""

    def __init__(self, config: Config, repo_dir: Path, private_ssh_key_path: Optional[str]):
        self.config = config
        self.repo_dir = repo_dir
        self.private_ssh_key_path = private_ssh_key_path

    def manager(self) -> ProfileManager:
        git_settings = self.config.git
        client = GitClient(
            private_ssh_key_path=self.private_ssh_key_path or git_settings.resolved_key_path(),
            timeout=git_settings.timeout_sec,
        )
        return ProfileManager(
            self.repo_dir,
            settings=self.config.profiles,
            git_client=client,
            git_settings=git_settings,
        )


def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        print(f"wksprofile version: {__version__}")
        raise typer.Exit()


def fail(e: WksProfileError):
    console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
    raise typer.Exit(code=int(e.exit_code))


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the config.yaml configuration file."
    ),
    repo_dir: Path = typer.Option(
        Path("."), "--repo-dir", help="Root of the cluster-definition repository.",
        file_okay=False, resolve_path=True,
    ),
    private_ssh_key_path: Optional[str] = typer.Option(
        None, "--private-ssh-key-path", help="SSH private key git should use for remotes.",
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """
    wksprofile CLI.
    """
    try:
        cfg = load_config(config_path)
    except WksProfileError as e:
        fail(e)
    setup_logging(cfg.logging.level, cfg.logging.json_format)
    ctx.obj = AppState(cfg, repo_dir, private_ssh_key_path)


def _require_repository(repository: Optional[str]) -> str:
    if not repository or not repository.strip():
        raise InvalidURLError("profile repository must be specified")
    return repository


@profile_app.command()
def enable(
    ctx: typer.Context,
    repository: Optional[str] = typer.Option(
        None, "--repository", help="Enable profile from the repository."
    ),
    revision: Optional[str] = typer.Option(
        None, "--revision", help="Use this revision of the profile. [default: master]"
    ),
    no_commit: bool = typer.Option(
        False, "--no-commit", help="No auto commit and push behaviour."
    ),
):
    """Enable a profile."""
    state: AppState = ctx.obj
    try:
        result = state.manager().enable(
            _require_repository(repository), revision=revision, no_commit=no_commit
        )
    except WksProfileError as e:
        fail(e)
    console.print(f"[bold green]Enabled profile[/bold green] {result.url} in '{result.path}'")


@profile_app.command()
def disable(
    ctx: typer.Context,
    repository: Optional[str] = typer.Option(
        None, "--repository", help="Disable the profile enabled from the repository."
    ),
    no_commit: bool = typer.Option(
        False, "--no-commit", help="No auto commit and push behaviour."
    ),
):
    """Disable a profile."""
    state: AppState = ctx.obj
    try:
        result = state.manager().disable(_require_repository(repository), no_commit=no_commit)
    except WksProfileError as e:
        fail(e)
    console.print(f"[bold green]Disabled profile[/bold green] {result.url}")


@profile_app.command("list")
def list_profiles(ctx: typer.Context):
    """Show the profiles present in the repository."""
    state: AppState = ctx.obj
    manager = state.manager()
    profiles = manager.list_enabled()
    if not profiles:
        console.print("No profiles enabled.")
        return

    table = Table("Host", "Repository", "Path")
    for profile in profiles:
        table.add_row(profile.host, profile.repo_path, manager.relative(profile.path))
    Console().print(table)


def run_cli():
    """Main entry point for the CLI application."""
    try:
        app()
    except WksProfileError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[bold red]An unexpected error occurred:[/bold red] {e}")
        sys.exit(ExitCode.UNKNOWN_ERROR)


if __name__ == "__main__":
    run_cli()

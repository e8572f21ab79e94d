#!/usr/bin/env python3
"""
Command-line interface for oura-cli.

This module provides a command-line interface using Typer for authenticating
with the Oura cloud API and inspecting the stored credential.
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Coroutine, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from oura_cli.auth import (
    AuthError,
    AuthTimeoutError,
    ConfigStore,
    ConfigStoreError,
    CredentialManager,
    NotAuthenticatedError,
    OAuthDeniedError,
    PortUnavailableError,
    TokenExchangeError,
    TokenRefreshError,
)
from oura_cli.auth.models import mask_credential
from oura_cli.config import LogLevel, Settings, get_settings, load_settings

# Create Typer app
app = typer.Typer(
    name="oura",
    help="Command-line client for the Oura Ring API",
    add_completion=False,
)

# Rich console for pretty output
console = Console()
err_console = Console(stderr=True)

# Configure logger
logger = logging.getLogger(__name__)

DEVELOPER_PORTAL_URL = "https://developer.ouraring.com"


def configure_logging(level: LogLevel) -> None:
    """Send log records to stderr at ``level``."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def run_async(coro: Coroutine) -> Any:
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


def build_manager(settings: Settings) -> CredentialManager:
    """Wire the credential manager from settings."""
    store = ConfigStore(settings.config_path)
    return CredentialManager(settings.auth, store)


def describe_error(error: Exception) -> str:
    """Map each failure kind to an actionable message."""
    if isinstance(error, PortUnavailableError):
        return (
            f"Port {error.port} is already in use. Close the application using it, "
            "or retry later, then run 'oura auth' again."
        )
    if isinstance(error, OAuthDeniedError):
        return f"Authorization was denied by the provider ({error.error}). Run 'oura auth' to try again."
    if isinstance(error, AuthTimeoutError):
        return (
            "No authorization callback was received within "
            f"{error.timeout_seconds / 60:g} minutes. Run 'oura auth' to try again."
        )
    if isinstance(error, TokenRefreshError):
        return (
            f"Token refresh was rejected by the provider: {error.body}\n"
            "Your refresh token may have been revoked. Re-run 'oura auth' to authorize again."
        )
    if isinstance(error, TokenExchangeError):
        return f"The provider rejected the authorization code: {error.body}"
    if isinstance(error, NotAuthenticatedError):
        return "Not authenticated. Run 'oura auth' first to authenticate."
    if isinstance(error, ConfigStoreError):
        return f"Could not access the credential file: {error.message}"
    if isinstance(error, AuthError):
        return error.message
    if isinstance(error, ValidationError):
        return f"Invalid settings: {error}"
    return str(error) or error.__class__.__name__


def fail(error: Exception) -> None:
    """Print the error and exit with status 1."""
    logger.debug("Command failed", exc_info=error)
    err_console.print(f"[bold red]Error:[/bold red] {escape(describe_error(error))}", style="red")
    raise typer.Exit(code=1)


@app.callback()
def main_options(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a JSON settings file",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: Optional[LogLevel] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level",
        case_sensitive=False,
    ),
    home_dir: Optional[Path] = typer.Option(
        None,
        "--home",
        help="Configuration root (defaults to your home directory)",
        file_okay=False,
    ),
) -> None:
    """Load settings and configure logging for every command."""
    try:
        settings = load_settings(config_file)
    except (ValidationError, ValueError, OSError) as e:
        fail(e)

    if log_level:
        settings.app.log_level = log_level
    if home_dir:
        settings.app.home_dir = home_dir

    configure_logging(settings.app.log_level)
    ctx.obj = settings


@app.command("auth")
def authenticate(
    ctx: typer.Context,
    client_id: Optional[str] = typer.Option(None, "--client-id", help="OAuth2 Client ID"),
    client_secret: Optional[str] = typer.Option(None, "--client-secret", help="OAuth2 Client Secret"),
) -> None:
    """Authenticate with the Oura API via OAuth2."""
    settings: Settings = ctx.obj
    manager = build_manager(settings)

    try:
        saved = manager.store.load()
    except ConfigStoreError as e:
        fail(e)

    # Options, then environment, then the saved config
    client_id = client_id or settings.client_id or saved.client_id
    client_secret = (
        client_secret
        or (settings.client_secret.get_secret_value() if settings.client_secret else None)
        or saved.client_secret
    )

    if not client_id or not client_secret:
        err_console.print(
            Panel.fit(
                "OAuth2 credentials are required.\n"
                f"Create an application at [blue underline]{DEVELOPER_PORTAL_URL}[/blue underline]\n"
                f"with the redirect URI [yellow]{settings.auth.redirect_uri}[/yellow], then pass\n"
                "--client-id/--client-secret or set OURA_CLIENT_ID/OURA_CLIENT_SECRET.",
                title="Oura Authentication Setup",
                border_style="red",
            )
        )
        raise typer.Exit(code=1)

    if client_id == saved.client_id:
        console.print(f"[dim]Using Client ID: {mask_credential(client_id)}[/dim]")

    try:
        run_async(manager.authenticate(client_id, client_secret))
    except KeyboardInterrupt:
        err_console.print("[yellow]\nAuthentication cancelled.[/yellow]")
        raise typer.Exit(code=130)
    except Exception as e:
        fail(e)

    console.print("\n[green bold]✓ Authentication complete![/green bold]\n")
    console.print("[dim]Your credentials and tokens are saved at:[/dim]")
    console.print(f"[cyan]  {manager.store.path}[/cyan]\n")


@app.command("status")
def show_status(ctx: typer.Context) -> None:
    """Show the stored credential status without contacting the API."""
    settings: Settings = ctx.obj
    manager = build_manager(settings)

    try:
        status = run_async(manager.status())
    except Exception as e:
        fail(e)

    table = Table(title="Authentication Status")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Status", "✓ Authenticated" if status.authenticated else "✗ Not authenticated")
    table.add_row("Client ID", status.client_id or "N/A")
    table.add_row("Expires", status.expires_at.isoformat() if status.expires_at else "N/A")
    table.add_row("Needs refresh", "Yes" if status.stale else "No")
    table.add_row("Refresh Token", "Present" if status.has_refresh_token else "Missing")
    table.add_row("Config file", str(status.config_path))

    console.print(table)


@app.command("token")
def print_token(ctx: typer.Context) -> None:
    """Print a currently valid access token, refreshing it if needed."""
    settings: Settings = ctx.obj
    manager = build_manager(settings)

    try:
        credential = run_async(manager.get_valid_credential())
    except Exception as e:
        fail(e)

    typer.echo(credential.access_token)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    settings = get_settings()

    table = Table(title=f"{settings.app.app_name} v{settings.app.version}")
    table.add_column("Component", style="cyan")
    table.add_column("Version/Status", style="green")

    table.add_row("Python", sys.version.split()[0])
    table.add_row("Log Level", settings.app.log_level.value)
    table.add_row("Redirect URI", settings.auth.redirect_uri)
    table.add_row("Config file", str(settings.config_path))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

"""Session commands: status, login, logout, token, backends, me."""

import asyncio

import httpx
import typer
from rich.table import Table

from bank_client.api import BankApiClient
from bank_client.auth import CredentialError, SessionGate, SessionStatus
from bank_client.storage import FileBackend, KeyringBackend
from bank_client.utils.logger import token_preview

from . import shared
from .shared import console, logger, styled_status


def status() -> None:
    """Resolve and print the session status from stored credentials."""
    gate = shared.get_gate()
    resolved = asyncio.run(gate.initialize())
    console.print(f"Session: {styled_status(resolved.value)}")
    if gate.store.revoked:
        console.print(f"[yellow]Stale credential may remain in: {', '.join(sorted(gate.store.revoked))}[/yellow]")
    logger.info("status.done", status=resolved.value)


def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True, help="Account username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Sign in against the bank API and store the session token."""
    log = logger.bind(username=username)
    log.info("login.start")
    gate = shared.get_gate()

    async def run() -> None:
        async with BankApiClient(gate) as client:
            await client.login(username, password)

    try:
        asyncio.run(run())
    except CredentialError as e:
        console.print(f"[red]Could not establish session: {e}[/red]")
        log.error("login.credential_error", error=str(e))
        raise typer.Exit(1) from e
    except httpx.HTTPError as e:
        console.print(f"[red]Login request failed: {e}[/red]")
        log.error("login.http_error", error=str(e))
        raise typer.Exit(1) from e
    console.print(f"[green]Signed in as {username}.[/green]")
    log.info("login.done")


def logout() -> None:
    """Sign out: remove the stored token from every backend."""
    gate = shared.get_gate()
    report = asyncio.run(gate.on_logout())
    console.print(f"Session: {styled_status(gate.status.value)}")
    for name, error in report.failed.items():
        console.print(f"[yellow]Could not erase credential from {name}: {error}[/yellow]")
    logger.info("logout.done", cleared=report.cleared, failed=list(report.failed))


def token(
    reveal: bool = typer.Option(False, "--reveal", help="Print the full token instead of a preview"),
) -> None:
    """Print the stored bearer token (redacted by default)."""
    gate = shared.get_gate()
    value = asyncio.run(gate.get_current_token())
    if value is None:
        console.print("[red]No stored token.[/red]")
        raise typer.Exit(1)
    console.print(value if reveal else token_preview(value), markup=False)


def backends() -> None:
    """List credential backends in priority order."""
    gate = shared.get_gate()
    table = Table(title="Credential backends")
    table.add_column("#", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Kind", style="white")
    table.add_column("Available", justify="center")
    table.add_column("Location", style="dim")
    for i, backend in enumerate(gate.store.backends, 1):
        if isinstance(backend, KeyringBackend):
            kind, available, location = "keyring", backend.is_available(), "OS keychain"
        elif isinstance(backend, FileBackend):
            kind, available, location = "file", True, str(backend.path)
        else:
            kind, available, location = type(backend).__name__, True, "-"
        table.add_row(str(i), backend.name, kind, "yes" if available else "no", location)
    console.print(table)


def me() -> None:
    """Fetch the signed-in user's profile."""
    gate: SessionGate = shared.get_gate()

    async def run():
        if await gate.initialize() is not SessionStatus.AUTHENTICATED:
            return None
        async with BankApiClient(gate) as client:
            return await client.get_my_profile()

    try:
        profile = asyncio.run(run())
    except CredentialError as e:
        console.print(f"[red]{e}. Please sign in again.[/red]")
        logger.warning("me.session_expired")
        raise typer.Exit(1) from e
    except httpx.HTTPError as e:
        console.print(f"[red]Profile request failed: {e}[/red]")
        logger.error("me.http_error", error=str(e))
        raise typer.Exit(1) from e
    if profile is None:
        console.print("[red]Not signed in.[/red]")
        raise typer.Exit(1)
    console.print(f"[cyan]{profile.username}[/cyan] balance: {profile.balance if profile.balance is not None else '-'}")

"""CLI commands for inspecting and managing the stored session."""

import typer
from typer import Typer

from bank_client.cli import session_mode
from bank_client.utils.logger import bind_context, clear_context

app = Typer(help="Bank client session credentials")


@app.callback()
def main(ctx: typer.Context) -> None:
    """Tag every log entry of this invocation with the command name."""
    bind_context(command=ctx.invoked_subcommand)
    ctx.call_on_close(clear_context)


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(session_mode.status)
    app.command()(session_mode.login)
    app.command()(session_mode.logout)
    app.command()(session_mode.token)
    app.command()(session_mode.backends)
    app.command()(session_mode.me)


register_commands()

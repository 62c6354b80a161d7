"""Shared CLI helpers: console, logger, session gate construction."""

from rich.console import Console

from bank_client.auth import SessionGate, build_session_gate
from bank_client.utils.logger import get_logger

console = Console()
logger = get_logger("bank_client.cli")

STATUS_STYLES = {
    "unknown": "yellow",
    "authenticated": "green",
    "unauthenticated": "red",
}


def get_gate() -> SessionGate:
    """New gate over the configured backends (one per command invocation)."""
    return build_session_gate()


def styled_status(value: str) -> str:
    style = STATUS_STYLES.get(value, "white")
    return f"[{style}]{value}[/{style}]"

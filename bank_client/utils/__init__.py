"""Utility modules."""

from bank_client.utils.logger import (
    bind_context,
    clear_context,
    get_logger,
    token_preview,
)

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "token_preview",
]

"""Assemble the credential store and session gate from configuration."""

from pathlib import Path

from bank_client.auth.credential_store import CredentialStore
from bank_client.auth.session_gate import SessionGate
from bank_client.config import GENERAL_STORE_PATH, KEYRING_SERVICE, SECURE_STORE_ENABLED, TOKEN_KEY
from bank_client.storage import FileBackend, KeyringBackend, MemoryBackend, StorageBackend
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.auth.factory")


def build_backends(
    secure_enabled: bool = SECURE_STORE_ENABLED,
    general_path: Path | None = None,
    ephemeral: bool = False,
) -> list[StorageBackend]:
    """Backends in priority order: keychain (when enabled), then the JSON file.

    ``ephemeral`` swaps both for in-memory cells (nothing survives the process).
    """
    if ephemeral:
        return [MemoryBackend("secure"), MemoryBackend("general")]
    backends: list[StorageBackend] = []
    if secure_enabled:
        backends.append(KeyringBackend(service=KEYRING_SERVICE))
    else:
        logger.info("factory.secure_store_disabled")
    backends.append(FileBackend(general_path or GENERAL_STORE_PATH))
    return backends


def build_credential_store(**kwargs) -> CredentialStore:
    return CredentialStore(build_backends(**kwargs), key=TOKEN_KEY)


def build_session_gate(**kwargs) -> SessionGate:
    """Return a new SessionGate. Callers own it and pass it to consumers."""
    return SessionGate(build_credential_store(**kwargs))

"""Storage backend protocol (single-key credential cells)."""

from typing import Protocol


class BackendError(Exception):
    """A storage backend failed to complete an operation."""

    def __init__(self, backend: str, message: str):
        super().__init__(f"{backend}: {message}")
        self.backend = backend
        self.message = message


class BackendUnavailable(BackendError):
    """The backend cannot operate on this platform (e.g. no OS keychain)."""


class StorageBackend(Protocol):
    """Async key/value cell used by CredentialStore. Errors are raised as BackendError."""

    name: str

    async def write(self, key: str, value: str) -> None:
        """Persist value under key, replacing any previous value."""
        ...

    async def read(self, key: str) -> str | None:
        """Return the value under key, or None when absent."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Deleting an absent key is not an error."""
        ...

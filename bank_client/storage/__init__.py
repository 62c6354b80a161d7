"""Storage backends for the session credential: secure keychain, JSON file, in-memory."""

from bank_client.storage.protocol import BackendError, BackendUnavailable, StorageBackend
from bank_client.storage.keyring_backend import KeyringBackend
from bank_client.storage.file_backend import FileBackend
from bank_client.storage.memory_backend import MemoryBackend

__all__ = [
    "BackendError",
    "BackendUnavailable",
    "StorageBackend",
    "KeyringBackend",
    "FileBackend",
    "MemoryBackend",
]

"""Secure backend: OS keychain through the keyring library."""

import asyncio
from typing import Any, Callable

import keyring
from keyring.backend import KeyringBackend as KeyringImpl
from keyring.backends import fail
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

from bank_client.storage.protocol import BackendError, BackendUnavailable
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.storage.keyring")


class KeyringBackend:
    """Credential cell in the platform keychain (Keychain, Credential Locker, Secret Service).

    Blocking keyring calls run in a worker thread. When the platform offers no usable
    keychain every operation raises BackendUnavailable so callers fall back.
    """

    name = "secure"

    def __init__(self, service: str, keyring_impl: KeyringImpl | None = None):
        self._service = service
        self._keyring_impl = keyring_impl

    def _impl(self) -> KeyringImpl:
        impl = self._keyring_impl or keyring.get_keyring()
        if isinstance(impl, fail.Keyring):
            raise BackendUnavailable(self.name, "no keyring backend available on this platform")
        return impl

    def is_available(self) -> bool:
        try:
            self._impl()
        except BackendUnavailable:
            return False
        return True

    def _call(self, op: str, fn: Callable[[KeyringImpl], Any]) -> Any:
        impl = self._impl()
        try:
            return fn(impl)
        except NoKeyringError as e:
            raise BackendUnavailable(self.name, str(e)) from e
        except KeyringError as e:
            raise BackendError(self.name, f"{op} failed: {e}") from e

    def _delete_sync(self, impl: KeyringImpl, key: str) -> None:
        try:
            impl.delete_password(self._service, key)
        except PasswordDeleteError as e:
            # Raised for missing entries and for refused deletes alike
            if impl.get_password(self._service, key) is not None:
                raise BackendError(self.name, f"delete failed: {e}") from e
            logger.debug("keyring.delete.absent", service=self._service, key=key)

    async def write(self, key: str, value: str) -> None:
        await asyncio.to_thread(
            self._call, "write", lambda impl: impl.set_password(self._service, key, value)
        )
        logger.debug("keyring.write", service=self._service, key=key)

    async def read(self, key: str) -> str | None:
        value = await asyncio.to_thread(
            self._call, "read", lambda impl: impl.get_password(self._service, key)
        )
        logger.debug("keyring.read", service=self._service, key=key, hit=value is not None)
        return value

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._call, "delete", lambda impl: self._delete_sync(impl, key))
        logger.debug("keyring.delete", service=self._service, key=key)

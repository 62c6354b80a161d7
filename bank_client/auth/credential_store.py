"""Durable storage of the single session token across an ordered list of backends.

The first backend is preferred (secure keychain), later ones are fallbacks (plain
file). Writes are verified by reading back from the same backend before the next
backend is tried, and reads return the first backend that holds a value; values
from different backends are never merged.

A backend whose delete fails is remembered as revoked for the lifetime of this
object. Reads skip it until a retried delete succeeds, so a stale copy left behind
by a failed logout cannot bring the session back. A successful store onto a
backend clears that mark and purges every other backend.
"""

from typing import Sequence

from bank_client.auth.errors import InvalidCredential, PersistenceFailure
from bank_client.auth.models import ClearReport
from bank_client.config import TOKEN_KEY
from bank_client.storage.protocol import BackendUnavailable, StorageBackend
from bank_client.utils.logger import get_logger, token_preview

logger = get_logger("bank_client.auth.credential_store")


class CredentialStore:
    """Resilient key/value cell for exactly one opaque token."""

    def __init__(self, backends: Sequence[StorageBackend], key: str = TOKEN_KEY):
        if not backends:
            raise ValueError("CredentialStore needs at least one backend")
        names = [b.name for b in backends]
        if len(set(names)) != len(names):
            raise ValueError(f"Backend names must be unique: {names}")
        self._backends = list(backends)
        self._key = key
        self._revoked: set[str] = set()

    @property
    def backends(self) -> list[StorageBackend]:
        return list(self._backends)

    @property
    def revoked(self) -> frozenset[str]:
        """Backends whose last delete failed and may still hold a stale token."""
        return frozenset(self._revoked)

    async def store(self, token: str) -> str:
        """Persist token in the first backend that verifies it; return that backend's name."""
        if not isinstance(token, str) or not token:
            raise InvalidCredential("Token must be a non-empty string")

        errors: dict[str, str] = {}
        for index, backend in enumerate(self._backends):
            log = logger.bind(backend=backend.name, token=token_preview(token))
            try:
                await backend.write(self._key, token)
                verification = await backend.read(self._key)
            except BackendUnavailable as e:
                errors[backend.name] = str(e)
                log.info("credential_store.store.backend_unavailable", error=str(e))
                continue
            except Exception as e:
                errors[backend.name] = str(e)
                log.warning("credential_store.store.backend_failed", error=str(e))
                continue
            if verification != token:
                errors[backend.name] = "read-back verification failed"
                log.warning("credential_store.store.verification_failed", found=verification is not None)
                continue

            self._revoked.discard(backend.name)
            log.info("credential_store.store.verified", fallback=index > 0)
            for other in self._backends:
                if other is not backend:
                    await self._purge(other)
            return backend.name

        logger.error("credential_store.store.all_backends_failed", errors=errors)
        raise PersistenceFailure(errors)

    async def retrieve(self) -> str | None:
        """Return the token from the first backend holding one, or None."""
        for backend in self._backends:
            if backend.name in self._revoked and not await self._purge(backend):
                logger.warning("credential_store.retrieve.skipping_revoked", backend=backend.name)
                continue
            try:
                value = await backend.read(self._key)
            except BackendUnavailable as e:
                logger.debug("credential_store.retrieve.backend_unavailable", backend=backend.name, error=str(e))
                continue
            except Exception as e:
                logger.warning("credential_store.retrieve.backend_failed", backend=backend.name, error=str(e))
                continue
            if value:
                logger.debug("credential_store.retrieve.hit", backend=backend.name, token=token_preview(value))
                return value
        logger.debug("credential_store.retrieve.absent")
        return None

    async def clear(self) -> ClearReport:
        """Delete the token from every backend, best-effort. Never raises for backend errors."""
        report = ClearReport()
        for backend in self._backends:
            error = await self._delete(backend)
            if error is None:
                report.cleared.append(backend.name)
            else:
                report.failed[backend.name] = error
        if report.failed:
            logger.warning("credential_store.clear.partial", cleared=report.cleared, failed=report.failed)
        else:
            logger.info("credential_store.clear.done", cleared=report.cleared)
        return report

    async def _purge(self, backend: StorageBackend) -> bool:
        return await self._delete(backend) is None

    async def _delete(self, backend: StorageBackend) -> str | None:
        """Delete from one backend and track revocation. Returns the error text on failure."""
        try:
            await backend.delete(self._key)
        except BackendUnavailable as e:
            # Nothing can be read from an unavailable backend either
            logger.debug("credential_store.delete.backend_unavailable", backend=backend.name, error=str(e))
            self._revoked.add(backend.name)
            return str(e)
        except Exception as e:
            logger.warning("credential_store.delete.backend_failed", backend=backend.name, error=str(e))
            self._revoked.add(backend.name)
            return str(e)
        self._revoked.discard(backend.name)
        return None

"""In-memory backend: ephemeral sessions and failure injection for tests."""

import asyncio

from bank_client.storage.protocol import BackendError, BackendUnavailable
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.storage.memory")


class MemoryBackend:
    """Dict-backed credential cell whose failure modes can be toggled at runtime."""

    def __init__(
        self,
        name: str = "memory",
        *,
        unavailable: bool = False,
        fail_writes: bool = False,
        fail_reads: bool = False,
        fail_deletes: bool = False,
        drop_writes: bool = False,
    ):
        self.name = name
        self.unavailable = unavailable
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.fail_deletes = fail_deletes
        # Accept writes without persisting them (read-back verification fails)
        self.drop_writes = drop_writes
        self.data: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    def _check(self, op: str, failing: bool) -> None:
        self.calls.append((op, self.name))
        if self.unavailable:
            raise BackendUnavailable(self.name, "backend disabled")
        if failing:
            raise BackendError(self.name, f"injected {op} failure")

    async def write(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        self._check("write", self.fail_writes)
        if not self.drop_writes:
            self.data[key] = value
        logger.debug("memory_backend.write", backend=self.name, key=key)

    async def read(self, key: str) -> str | None:
        await asyncio.sleep(0)
        self._check("read", self.fail_reads)
        return self.data.get(key)

    async def delete(self, key: str) -> None:
        await asyncio.sleep(0)
        self._check("delete", self.fail_deletes)
        self.data.pop(key, None)

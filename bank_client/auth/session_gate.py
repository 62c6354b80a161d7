"""Process-wide session status, resolved once from the credential store.

Consumers never read a bare flag: they await ``wait_until_resolved()`` (or
``initialize()``) or subscribe to transitions, so nothing can make a routing
decision while the status is still UNKNOWN.
"""

import asyncio
from typing import Callable

from bank_client.auth.credential_store import CredentialStore
from bank_client.auth.models import ClearReport, SessionStatus
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.auth.session_gate")

StatusListener = Callable[[SessionStatus], None]


class SessionGate:
    """Owns the UNKNOWN -> AUTHENTICATED/UNAUTHENTICATED state machine."""

    def __init__(self, store: CredentialStore):
        self._store = store
        self._status = SessionStatus.UNKNOWN
        self._resolved = asyncio.Event()
        self._init_task: asyncio.Task | None = None
        self._listeners: list[StatusListener] = []

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def status(self) -> SessionStatus:
        """Current status. Rendering decisions should await wait_until_resolved() instead."""
        return self._status

    @property
    def is_resolved(self) -> bool:
        return self._resolved.is_set()

    async def initialize(self) -> SessionStatus:
        """Resolve the initial status from storage. Runs the lookup once; every caller awaits it."""
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._resolve_initial_status())
        # shield: a cancelled awaiter must not cancel the shared lookup
        await asyncio.shield(self._init_task)
        return self._status

    async def _resolve_initial_status(self) -> None:
        try:
            token = await self._store.retrieve()
        except Exception as e:
            # Fail closed
            logger.error("session_gate.initialize.retrieve_failed", error=str(e))
            token = None
        self._transition(SessionStatus.AUTHENTICATED if token else SessionStatus.UNAUTHENTICATED)
        self._resolved.set()
        logger.info("session_gate.initialize.resolved", status=self._status.value)

    async def wait_until_resolved(self) -> SessionStatus:
        """Suspend until the initial status is known, then return the current status."""
        await self._resolved.wait()
        return self._status

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Call listener on every status transition. If already resolved, call it once now.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)
        if self.is_resolved:
            self._notify(listener, self._status)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def on_login_success(self, token: str) -> SessionStatus:
        """Persist the token and mark the session authenticated.

        InvalidCredential and PersistenceFailure propagate and leave the status unchanged:
        a session that cannot be recorded durably is not established.
        """
        await self.initialize()
        backend = await self._store.store(token)
        self._transition(SessionStatus.AUTHENTICATED)
        logger.info("session_gate.login", backend=backend)
        return self._status

    async def on_logout(self) -> ClearReport:
        """Clear stored credentials and mark the session unauthenticated, whatever the clear reported."""
        await self.initialize()
        report = await self._store.clear()
        self._transition(SessionStatus.UNAUTHENTICATED)
        logger.info("session_gate.logout", cleared=report.cleared, failed=list(report.failed))
        return report

    async def get_current_token(self) -> str | None:
        """Token for outbound requests (proxies CredentialStore.retrieve)."""
        return await self._store.retrieve()

    def _transition(self, status: SessionStatus) -> None:
        if status is SessionStatus.UNKNOWN:
            raise ValueError("Session status cannot return to UNKNOWN")
        previous = self._status
        self._status = status
        logger.debug("session_gate.transition", previous=previous.value, status=status.value)
        for listener in list(self._listeners):
            self._notify(listener, status)

    def _notify(self, listener: StatusListener, status: SessionStatus) -> None:
        try:
            listener(status)
        except Exception as e:
            logger.error("session_gate.listener_failed", listener=repr(listener), error=str(e))

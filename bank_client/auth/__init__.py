"""Session credential persistence and the session status gate."""

from bank_client.auth.errors import (
    CredentialError,
    InvalidCredential,
    PersistenceFailure,
    SessionExpired,
)
from bank_client.auth.models import ClearReport, SessionStatus
from bank_client.auth.credential_store import CredentialStore
from bank_client.auth.session_gate import SessionGate
from bank_client.auth.factory import build_backends, build_credential_store, build_session_gate

__all__ = [
    "CredentialError",
    "InvalidCredential",
    "PersistenceFailure",
    "SessionExpired",
    "ClearReport",
    "SessionStatus",
    "CredentialStore",
    "SessionGate",
    "build_backends",
    "build_credential_store",
    "build_session_gate",
]

"""Errors surfaced by the session credential subsystem."""


class CredentialError(Exception):
    """Base class for credential/session errors callers are expected to handle."""


class InvalidCredential(CredentialError, ValueError):
    """An empty or non-string token was handed to the store."""


class PersistenceFailure(CredentialError):
    """No backend durably accepted and verified the token."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{name}: {msg}" for name, msg in self.errors.items()) or "no backends configured"
        super().__init__(f"Failed to persist credential in any backend ({detail})")


class SessionExpired(CredentialError):
    """The server rejected the bearer token; the local session has been revoked."""

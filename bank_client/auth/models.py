"""Session status and storage outcome models."""

from enum import Enum

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Tri-state session status. UNKNOWN only until the first retrieval resolves."""

    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class ClearReport(BaseModel):
    """Per-backend outcome of CredentialStore.clear()."""

    cleared: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def fully_cleared(self) -> bool:
        return not self.failed

    @property
    def any_cleared(self) -> bool:
        return bool(self.cleared)

"""Bank API client: consumes the session token, never manages it."""

from bank_client.api.client import BankApiClient
from bank_client.api.models import Credentials, TokenResponse, UserProfile

__all__ = [
    "BankApiClient",
    "Credentials",
    "TokenResponse",
    "UserProfile",
]

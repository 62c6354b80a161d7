"""Request/response bodies for the bank auth API."""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Body of /auth/login and /auth/register."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Login/register response. Register may omit the token."""

    token: str | None = None

    model_config = {"extra": "ignore"}


class UserProfile(BaseModel):
    """Response of /auth/me."""

    id: str | None = Field(None, alias="_id")
    username: str
    balance: float | None = None
    image: str | None = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

"""Identity Provider schemas."""

from pydantic import BaseModel


class User(BaseModel):
    """An authenticated user as returned by the Identity Provider."""

    id: str
    email: str | None = None
    role: str | None = None

    model_config = {"extra": "allow"}


class Session(BaseModel):
    """Tokens issued by the Identity Provider after sign-in."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user: User | None = None

    model_config = {"extra": "allow"}

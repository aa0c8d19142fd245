"""Identity Provider client (hosted auth service)."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from schemas.user import Session, User

from .client import Client
from .exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


class IdentityClient(Client):
    """Client for the Identity Provider's REST interface under ``/auth/v1``.

    Authentication is only ever used as a gate: callers ask for the current
    user and expose authoring actions when one is returned.
    """

    API_PATH = "/auth/v1"

    def fetch(self, access_token: str) -> User | None:
        return self.get_current_user(access_token)

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange credentials for a session.

        Raises:
            AuthenticationError: If the credentials are rejected
            ValidationError: If the answer is not a session
        """
        response = self.post(
            f"{self.API_PATH}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        try:
            session = Session.model_validate(response.json())
        except PydanticValidationError as e:
            raise ValidationError(
                "Sign-in response failed validation",
                errors=[str(err) for err in e.errors()],
            ) from e
        logger.info(f"Signed in {email}")
        return session

    def get_current_user(self, access_token: str | None) -> User | None:
        """Return the user owning access_token, or None.

        A missing, expired or rejected token yields None rather than an
        error; network and server failures still raise.
        """
        if not access_token:
            return None
        try:
            response = self.get(
                f"{self.API_PATH}/user",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except AuthenticationError as e:
            logger.warning(f"Rejected access token: {e}")
            return None
        return User.model_validate(response.json())

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind access_token."""
        self.post(
            f"{self.API_PATH}/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        logger.info("Signed out")


def session_from_cookies(cookies: dict[str, Any]) -> Session | None:
    """Rebuild a session from the cookies set at sign-in, if present."""
    access_token = cookies.get(ACCESS_TOKEN_COOKIE)
    if not access_token:
        return None
    return Session(
        access_token=access_token,
        refresh_token=cookies.get(REFRESH_TOKEN_COOKIE),
    )


def session_cookies(session: Session) -> dict[str, str]:
    """Cookies persisting a session between requests."""
    cookies = {ACCESS_TOKEN_COOKIE: session.access_token}
    if session.refresh_token:
        cookies[REFRESH_TOKEN_COOKIE] = session.refresh_token
    return cookies

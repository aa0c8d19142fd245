"""Clients for the hosted Content Store and Identity Provider."""

from .client import Client
from .content_store import ContentStoreClient
from .exceptions import (
    APIError,
    AuthenticationError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
    StoreError,
    ValidationError,
)
from .identity import IdentityClient, session_cookies, session_from_cookies

__all__ = [
    "Client",
    "ContentStoreClient",
    "IdentityClient",
    "session_cookies",
    "session_from_cookies",
    "StoreError",
    "ConnectionError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "NotFoundError",
    "ValidationError",
]

"""Client configuration loaded from the environment."""

import os
from typing import Mapping

STORE_URL_VAR = "EPROPULSE_STORE_URL"
STORE_KEY_VAR = "EPROPULSE_STORE_KEY"
STORE_TIMEOUT_VAR = "EPROPULSE_STORE_TIMEOUT"

USER_AGENT = "epropulse/1.0"


def load_store_config(environ: Mapping[str, str] | None = None) -> dict:
    """Build the dict config shared by ContentStoreClient and IdentityClient.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Client config dict

    Raises:
        ValueError: If the store URL is not set
    """
    if environ is None:
        environ = os.environ

    base_url = environ.get(STORE_URL_VAR)
    if not base_url:
        raise ValueError(f"{STORE_URL_VAR} is not set")

    config: dict = {
        "base_url": base_url,
        "headers": {"User-Agent": USER_AGENT},
    }
    api_key = environ.get(STORE_KEY_VAR)
    if api_key:
        config["api_key"] = api_key
    timeout = environ.get(STORE_TIMEOUT_VAR)
    if timeout:
        config["timeout"] = float(timeout)
    return config

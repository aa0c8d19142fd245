"""Route gating for the authoring area.

Authentication is a boolean gate: a request for the authoring area without a
user is sent to the login page, and a signed-in user opening the login page
is sent to the authoring area.
"""

from urllib.parse import quote

from schemas.user import User

PROTECTED_PREFIX = "/player"
LOGIN_PATH = "/login"


def is_protected_path(path: str) -> bool:
    return path == PROTECTED_PREFIX or path.startswith(f"{PROTECTED_PREFIX}/")


def guard_route(path: str, user: User | None) -> str | None:
    """Return the redirect target for path, or None to let it through.

    Examples:
        >>> guard_route("/player/blog", None)
        '/login?redirectedFrom=/player/blog'
        >>> guard_route("/blog", None) is None
        True
    """
    if is_protected_path(path) and user is None:
        return f"{LOGIN_PATH}?redirectedFrom={quote(path, safe='/')}"
    if path == LOGIN_PATH and user is not None:
        return PROTECTED_PREFIX
    return None


def can_author(user: User | None) -> bool:
    return user is not None

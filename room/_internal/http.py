"""Shared HTTP client configuration."""

import httpx

from room._version import __version__

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"room/{__version__}"


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
) -> httpx.Client:
    """Create configured HTTP client.

    Base URLs are merged into each Request's path instead of being set on
    the client, so none is configured here.

    Args:
        timeout: Fallback timeout in seconds for requests sent without one.
        user_agent: Optional User-Agent overriding the default.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": user_agent or DEFAULT_USER_AGENT},
    )

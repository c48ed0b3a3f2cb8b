"""Request URI resolution and base-URL merging."""

from dataclasses import dataclass

import httpx

QUERY_SEPARATOR = "?"
PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class URI:
    """A resolved request target: path plus optional query string."""

    value: str

    def __str__(self) -> str:
        return self.value

    @property
    def path(self) -> str:
        """Everything before the query separator."""
        return self.value.partition(QUERY_SEPARATOR)[0]

    @property
    def query(self) -> str:
        """The raw query string, without the leading '?'."""
        return self.value.partition(QUERY_SEPARATOR)[2]

    def to_httpx(self) -> httpx.URL:
        """Parse into an httpx.URL.

        Raises:
            httpx.InvalidURL: If the value cannot be parsed.
        """
        return httpx.URL(self.value)


def resolve_uri(path: str, query_string: str = "") -> URI:
    """Combine a path and a serialized query set into one URI.

    An empty query string means there is nothing to append.
    """
    if query_string:
        return URI(path + QUERY_SEPARATOR + query_string)
    return URI(path)


def merge_base_url(path: str, base_url: str) -> str:
    """Prefix `path` with `base_url` exactly once.

    Merging the same base twice yields the same result as merging it once,
    whatever the slash style of either side.

    Args:
        path: The current request path.
        base_url: The base to prefix, e.g. "http://localhost:8080/api/".

    Returns:
        The merged path, "<base>/<path>".
    """
    if path.startswith(PATH_SEPARATOR):
        path = path[1:]

    if base_url.endswith(PATH_SEPARATOR):
        base_url = base_url[:-1]

    # A path resolved against "/api" no longer carries its leading slash.
    # For a bare "/" base the remaining prefix is empty and only the
    # separator is left to match.
    prefix = base_url[1:] if base_url.startswith(PATH_SEPARATOR) else base_url
    if base_url:
        if path == prefix:
            path = ""
        elif path.startswith(prefix + PATH_SEPARATOR):
            path = path[len(prefix) + 1 :]

    return base_url + PATH_SEPARATOR + path

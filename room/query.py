"""Query parameters serialized onto the request URI."""

import httpx

from room._multimap import MultiValueMap


class Query(MultiValueMap):
    """Ordered multimap of query parameters.

    `str(query)` gives the canonical query string: keys sorted, values in
    insertion order, reserved characters escaped. An empty set renders as "".
    """

    @classmethod
    def parse(cls, query_string: str) -> "Query":
        """Build a query set from an existing query string."""
        return cls(httpx.QueryParams(query_string.lstrip("?")).multi_items())

    def __str__(self) -> str:
        pairs = sorted(self.properties(), key=lambda pair: pair[0])
        return str(httpx.QueryParams(pairs))

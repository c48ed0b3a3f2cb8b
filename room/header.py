"""Header set attached to outbound requests."""

from room._multimap import MultiValueMap


class Header(MultiValueMap):
    """Ordered, case-insensitive multimap of header names to values.

    Example:
        header = Header({"Accept": "application/json"})
        header.add("X-Trace", "a")
        header.merge(Header({"x-trace": "b"}))
        header.get_list("X-Trace")  # ["a", "b"]
    """

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lower()

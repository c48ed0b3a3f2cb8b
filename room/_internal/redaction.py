"""Redaction of sensitive header values before they are logged."""

from collections.abc import Iterable

REDACT_HEADERS: frozenset[str] = frozenset({
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "api-key",
    "x-auth-token",
    "x-access-token",
    "x-csrf-token",
})

REDACTED_VALUE = "[REDACTED]"


def redact_headers(
    pairs: Iterable[tuple[str, str]], *, skip_redaction: bool = False
) -> list[tuple[str, str]]:
    """Copy header pairs, masking the values of sensitive headers.

    The input is never mutated.

    Args:
        pairs: (name, value) header pairs.
        skip_redaction: If True, returns a copy without redacting.

    Returns:
        A new list with sensitive values replaced by "[REDACTED]".
    """
    if skip_redaction:
        return list(pairs)
    return [
        (name, REDACTED_VALUE if name.lower() in REDACT_HEADERS else value)
        for name, value in pairs
    ]


def format_headers(pairs: Iterable[tuple[str, str]]) -> str:
    """Render redacted header pairs on one line for debug output."""
    return ", ".join(f"{name}: {value}" for name, value in redact_headers(pairs))

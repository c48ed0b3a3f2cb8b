"""Pydantic records used by requests."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Characters a cookie name may not contain (RFC 6265 token separators).
_NAME_FORBIDDEN = frozenset('()<>@,;:\\"/[]?={} \t\r\n')
_VALUE_FORBIDDEN = frozenset('";\\, \t\r\n')


class Cookie(BaseModel):
    """A cookie attached to an outbound request.

    Only `name=value` travels in the request's Cookie header; the remaining
    attributes are carried for the caller's bookkeeping.
    """

    name: str
    value: str = ""

    path: str | None = None
    domain: str | None = None
    expires: datetime | None = None
    max_age: int | None = Field(default=None, ge=0)
    secure: bool = False
    http_only: bool = False
    same_site: Literal["lax", "strict", "none"] | None = None

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def name_is_token(cls, v: str) -> str:
        if not v:
            raise ValueError("cookie name must not be empty")
        if any(ch in _NAME_FORBIDDEN for ch in v):
            raise ValueError(f"invalid character in cookie name {v!r}")
        return v

    @field_validator("value")
    @classmethod
    def value_is_safe(cls, v: str) -> str:
        if any(ch in _VALUE_FORBIDDEN for ch in v):
            raise ValueError("cookie value must not contain quotes, separators or whitespace")
        return v

    def header_value(self) -> str:
        """Render as it appears in a Cookie request header."""
        return f"{self.name}={self.value}"

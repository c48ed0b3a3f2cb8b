"""Uniform results of a dispatch attempt.

Every dispatch ends in exactly one of:
    SuccessResponse - the transport returned a response, whatever its status
    ErrorResponse   - the round trip failed (connect, DNS, timeout, cancel)

Both are immutable and carry the Request that produced them.
"""

import codecs
import json
from abc import abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from room.exceptions import RoomStatusError, RoomTransportError
from room.request import Request

DEFAULT_ENCODING = "utf-8"


def _known_encoding(charset: str) -> str:
    try:
        codecs.lookup(charset)
    except LookupError:
        return DEFAULT_ENCODING
    return charset


class Response(BaseModel):
    """Common shape of both outcomes."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request: Request
    raw_request: httpx.Request | None = None

    @property
    @abstractmethod
    def ok(self) -> bool:
        """True when a response was received."""


class SuccessResponse(Response):
    """A response received from the transport.

    4xx and 5xx statuses are still successful dispatches; use
    `is_success` or `raise_for_status()` to classify them.
    """

    status_code: int
    headers: httpx.Headers
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return True

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding, errors="replace")

    @property
    def encoding(self) -> str:
        """Charset declared in Content-Type, or utf-8 when absent or unknown."""
        content_type = self.headers.get("Content-Type", "")
        for param in content_type.split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return _known_encoding(value.strip('"'))
        return DEFAULT_ENCODING

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body)

    def raise_for_status(self) -> "SuccessResponse":
        """Raise RoomStatusError unless the status is 2xx."""
        if not self.is_success:
            raise RoomStatusError(
                f"{self.request.method} {self.request.uri} returned {self.status_code}",
                status_code=self.status_code,
            )
        return self

    @classmethod
    def from_httpx(cls, response: httpx.Response, request: Request) -> "SuccessResponse":
        return cls(
            request=request,
            raw_request=response.request,
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )


class ErrorResponse(Response):
    """A dispatch that did not complete the round trip."""

    error: Exception
    message: str

    @property
    def ok(self) -> bool:
        return False

    def raise_for_error(self) -> None:
        """Re-raise the wrapped failure as RoomTransportError."""
        if isinstance(self.error, RoomTransportError):
            raise self.error
        raise RoomTransportError(self.message, request=self.request) from self.error

    @classmethod
    def from_error(
        cls,
        error: Exception,
        request: Request,
        raw_request: httpx.Request | None = None,
    ) -> "ErrorResponse":
        message = str(error) or type(error).__name__
        return cls(request=request, raw_request=raw_request, error=error, message=message)

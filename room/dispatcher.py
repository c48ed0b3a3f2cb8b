"""Single-attempt dispatcher for built requests."""

import os
import sys

import httpx

from room._internal.http import DEFAULT_USER_AGENT, create_http_client
from room._internal.redaction import format_headers
from room.exceptions import RoomTransportError
from room.request import Request
from room.response import ErrorResponse, Response, SuccessResponse


class Dispatcher:
    """Sends a Request exactly once and normalizes the outcome.

    Transport failures are returned as ErrorResponse values and never raised.
    Every received status, 4xx and 5xx included, is a SuccessResponse. No
    retries are attempted.

    Use `Dispatcher.from_env()` to pick up debug and User-Agent settings from
    environment variables.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        user_agent: str | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            client: Client to send through. It is reused across dispatches and
                never closed here. When omitted, a client is created and closed
                for every dispatch.
            user_agent: User-Agent for clients created by the dispatcher.
            debug: Enable debug logging to stderr.
        """
        self._client = client
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._debug = debug

    @classmethod
    def from_env(cls) -> "Dispatcher":
        """Create a dispatcher from environment variables.

        Optional environment variables:
            ROOM_HTTP_DEBUG: Set to "1" to enable debug logging.
            ROOM_HTTP_USER_AGENT: User-Agent sent with every request.

        Returns:
            A configured Dispatcher.
        """
        debug = os.environ.get("ROOM_HTTP_DEBUG", "") == "1"
        user_agent = os.environ.get("ROOM_HTTP_USER_AGENT") or None
        return cls(user_agent=user_agent, debug=debug)

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[room] {message}", file=sys.stderr)

    def send(self, request: Request) -> Response:
        """Dispatch `request` once.

        Args:
            request: The request to build and send.

        Returns:
            SuccessResponse if any response was received, ErrorResponse if
            the round trip failed.

        Raises:
            RoomBuildError: If the request cannot be built (caller error).
        """
        if self._client is not None:
            return self._send(self._client, request)
        with create_http_client(user_agent=self._user_agent) as client:
            return self._send(client, request)

    def _send(self, client: httpx.Client, request: Request) -> Response:
        raw_request, context = request.build(client)
        self._log_debug(f"Sending {raw_request.method} {raw_request.url}")
        self._log_debug(f"Headers: {format_headers(raw_request.headers.multi_items())}")

        try:
            reason = context.error()
            if reason is not None:
                self._log_debug(f"Dispatch skipped: {reason}")
                return ErrorResponse.from_error(
                    RoomTransportError(reason, request=request), request, raw_request
                )

            try:
                response = client.send(raw_request)
            except httpx.TimeoutException as e:
                self._log_debug(f"Dispatch timed out: {e}")
                return ErrorResponse.from_error(e, request, raw_request)
            except httpx.RequestError as e:
                self._log_debug(f"Dispatch error: {e}")
                return ErrorResponse.from_error(e, request, raw_request)

            self._log_debug(f"Received {response.status_code}")
            return SuccessResponse.from_httpx(response, request)
        finally:
            context.cancel()


def get_dispatcher() -> Dispatcher:
    """Get a dispatcher configured from environment variables."""
    return Dispatcher.from_env()

"""Public exceptions for room."""


class RoomError(Exception):
    """Base exception for all room errors."""


class RoomConfigError(RoomError):
    """Configuration error (invalid builder arguments, malformed env vars)."""


class RoomBuildError(RoomError):
    """The outbound request could not be constructed from the Request state.

    This signals a caller contract violation (bad method, unparseable URI)
    rather than a runtime condition, so it is raised instead of being folded
    into an error response.
    """


class RoomTransportError(RoomError):
    """A dispatch attempt did not complete the round trip."""

    def __init__(self, message: str, request: object | None = None) -> None:
        super().__init__(message)
        self.request = request


class RoomStatusError(RoomError):
    """Raised on demand for a received response with a non-2xx status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code

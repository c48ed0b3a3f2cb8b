"""room: a fluent builder for outbound HTTP requests.

Describe a request with composable options, dispatch it once, and get back a
uniform response value:

    from room import HTTPMethod, JsonBody, Request, with_body, with_method

    response = (
        Request("users", with_method(HTTPMethod.POST), with_body(JsonBody({"name": "ada"})))
        .set_base_url("http://localhost:8080")
        .send()
    )
    if response.ok:
        print(response.status_code)
    else:
        print(response.message)
"""

from http import HTTPMethod

from room._version import __version__
from room.body import (
    BodyParser,
    DumpBody,
    FormBody,
    JsonBody,
    MultipartBody,
    RawBody,
    XmlBody,
)
from room.context import (
    DEFAULT_CONTEXT_TIMEOUT,
    Context,
    ContextBuilder,
    DeadlineContextBuilder,
    TimeoutContextBuilder,
)
from room.dispatcher import Dispatcher, get_dispatcher
from room.exceptions import (
    RoomBuildError,
    RoomConfigError,
    RoomError,
    RoomStatusError,
    RoomTransportError,
)
from room.header import Header
from room.models import Cookie
from room.query import Query
from room.request import (
    OptionRequest,
    Request,
    with_body,
    with_context_builder,
    with_cookies,
    with_header,
    with_method,
    with_query,
)
from room.response import ErrorResponse, Response, SuccessResponse
from room.uri import URI, merge_base_url, resolve_uri

__all__ = [
    "__version__",
    "HTTPMethod",
    # Request
    "Request",
    "OptionRequest",
    "with_method",
    "with_body",
    "with_query",
    "with_header",
    "with_context_builder",
    "with_cookies",
    "Header",
    "Query",
    "Cookie",
    "URI",
    "resolve_uri",
    "merge_base_url",
    # Body parsers
    "BodyParser",
    "DumpBody",
    "RawBody",
    "FormBody",
    "JsonBody",
    "XmlBody",
    "MultipartBody",
    # Contexts
    "Context",
    "ContextBuilder",
    "TimeoutContextBuilder",
    "DeadlineContextBuilder",
    "DEFAULT_CONTEXT_TIMEOUT",
    # Dispatch
    "Dispatcher",
    "get_dispatcher",
    "Response",
    "SuccessResponse",
    "ErrorResponse",
    # Exceptions
    "RoomError",
    "RoomConfigError",
    "RoomBuildError",
    "RoomTransportError",
    "RoomStatusError",
]

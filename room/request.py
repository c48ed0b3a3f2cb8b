"""Fluent request builder.

A Request is created from a path plus options applied in caller order:

    request = Request(
        "users",
        with_method(HTTPMethod.POST),
        with_body(JsonBody({"name": "ada"})),
        with_header(Header({"Accept": "application/json"})),
    ).set_base_url("http://localhost:8080")

    response = request.send()

The Request keeps its configuration between dispatches; every build resolves
the URI again and produces a fresh transport request and context.
"""

import re
from collections.abc import Callable
from http import HTTPMethod
from typing import TYPE_CHECKING

import httpx

from room.body import HEADER_KEY_CONTENT_TYPE, BodyParser, DumpBody
from room.context import Context, ContextBuilder, default_context_builder
from room.exceptions import RoomBuildError
from room.header import Header
from room.models import Cookie
from room.query import Query
from room.uri import URI, merge_base_url, resolve_uri

if TYPE_CHECKING:
    from room.dispatcher import Dispatcher
    from room.response import Response

HEADER_KEY_COOKIE = "Cookie"
COOKIE_SEPARATOR = "; "

# RFC 9110 token characters.
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

OptionRequest = Callable[["Request"], None]


class Request:
    """An outbound HTTP request under construction.

    Attributes:
        uri: The URI resolved by the most recent build, None before that.
        method: Upper-case HTTP method, GET unless configured.
        header: Header set, or None when no headers were configured.
        query: Query set, or None when no query was configured.
        body_parser: Body strategy; a no-op parser unless configured.
        cookies: Cookies attached in order.
    """

    def __init__(self, path: str, *opts: OptionRequest) -> None:
        self._path = path
        self.uri: URI | None = None
        self.method: str = ""
        self.header: Header | None = None
        self.query: Query | None = None
        self.body_parser: BodyParser | None = None
        self._context_builder: ContextBuilder | None = None
        self.cookies: list[Cookie] = []

        for opt in opts:
            opt(self)

        if self.body_parser is None:
            self.body_parser = DumpBody()

        if not self.method:
            self.method = HTTPMethod.GET.value

    @property
    def path(self) -> str:
        """The raw path, before query appending."""
        return self._path

    @property
    def context_builder(self) -> ContextBuilder | None:
        return self._context_builder

    def set_base_url(self, base_url: str) -> "Request":
        """Prefix the path with `base_url`; repeating the call is a no-op."""
        self._path = merge_base_url(self._path, base_url)
        return self

    def merge_header(self, header: Header | None) -> "Request":
        """Adopt `header` if none is set yet, otherwise fold it into the current set."""
        if header is not None:
            if self.header is None:
                self.header = header
            else:
                self.header.merge(header)
        return self

    def set_context_builder(self, context_builder: ContextBuilder | None) -> "Request":
        if context_builder is not None:
            self._context_builder = context_builder
        return self

    def build(self, client: httpx.Client | None = None) -> tuple[httpx.Request, Context]:
        """Assemble the transport request for one dispatch.

        Args:
            client: Client whose default headers the request starts from.

        Returns:
            The httpx request and the context bound to it.

        Raises:
            RoomBuildError: If the method, URI, headers or cookies cannot form a request.
        """
        builder = self._context_builder or default_context_builder()
        context = builder.build()

        query_string = str(self.query) if self.query is not None else ""
        self.uri = resolve_uri(self._path, query_string)

        if not _METHOD_TOKEN.match(self.method):
            raise RoomBuildError(f"invalid method {self.method!r}")

        body_parser = self.body_parser or DumpBody()

        try:
            headers = httpx.Headers(list(client.headers.multi_items()) if client else [])
            if self.header is not None:
                headers = httpx.Headers(headers.multi_items() + self.header.properties())

            # Rebuilt through the constructor so cookie values are held to the
            # same ASCII encoding as every other header.
            if self.cookies:
                values = [cookie.header_value() for cookie in self.cookies]
                existing = headers.get(HEADER_KEY_COOKIE)
                if existing:
                    values.insert(0, existing)
                kept = [
                    (key, value)
                    for key, value in headers.multi_items()
                    if key.lower() != HEADER_KEY_COOKIE.lower()
                ]
                headers = httpx.Headers(
                    kept + [(HEADER_KEY_COOKIE, COOKIE_SEPARATOR.join(values))]
                )

            request = httpx.Request(
                self.method,
                self.uri.to_httpx(),
                headers=headers,
                content=body_parser.parse() or None,
                extensions={"timeout": context.timeout().as_dict()},
            )

            content_type = body_parser.content_type()
            if content_type:
                request.headers[HEADER_KEY_CONTENT_TYPE] = content_type
        except (httpx.InvalidURL, UnicodeEncodeError, TypeError, ValueError) as e:
            raise RoomBuildError(f"cannot build request for {self.uri}: {e}") from e

        return request, context

    def send(self, dispatcher: "Dispatcher | None" = None) -> "Response":
        """Dispatch once and return the normalized response.

        Transport failures come back as an ErrorResponse, never as an
        exception.
        """
        if dispatcher is None:
            from room.dispatcher import get_dispatcher

            dispatcher = get_dispatcher()
        return dispatcher.send(self)

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, path={self._path!r})"


# =============================================================================
# Options
# =============================================================================


def with_method(method: HTTPMethod | str) -> OptionRequest:
    def apply(request: Request) -> None:
        request.method = str(method).upper()

    return apply


def with_body(body_parser: BodyParser) -> OptionRequest:
    def apply(request: Request) -> None:
        request.body_parser = body_parser

    return apply


def with_query(query: Query) -> OptionRequest:
    def apply(request: Request) -> None:
        request.query = query

    return apply


def with_header(header: Header) -> OptionRequest:
    def apply(request: Request) -> None:
        request.header = header

    return apply


def with_context_builder(context_builder: ContextBuilder) -> OptionRequest:
    def apply(request: Request) -> None:
        request._context_builder = context_builder

    return apply


def with_cookies(*cookies: Cookie) -> OptionRequest:
    def apply(request: Request) -> None:
        request.cookies = list(cookies)

    return apply

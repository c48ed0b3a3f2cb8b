"""Tests for Dispatcher."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import httpx
import pytest
import respx

from room._internal.http import DEFAULT_USER_AGENT
from room.body import JsonBody
from room.context import CONTEXT_DEADLINE_EXCEEDED, Context, DeadlineContextBuilder
from room.dispatcher import Dispatcher, get_dispatcher
from room.exceptions import RoomBuildError, RoomTransportError
from room.header import Header
from room.request import Request, with_body, with_context_builder, with_header, with_method
from room.response import ErrorResponse, SuccessResponse


class RecordingContextBuilder:
    """Context builder that keeps every context it builds."""

    def __init__(self) -> None:
        self.built: list[Context] = []

    def build(self) -> Context:
        context = Context(5.0)
        self.built.append(context)
        return context


class TestDispatcherFromEnv:
    """Tests for Dispatcher.from_env()."""

    def test_defaults(self):
        """Should default to no debug and the package User-Agent."""
        with patch.dict(os.environ, {}, clear=True):
            dispatcher = Dispatcher.from_env()
            assert dispatcher._debug is False
            assert dispatcher.user_agent == DEFAULT_USER_AGENT

    def test_with_settings(self):
        """Should read debug and User-Agent from env."""
        env = {"ROOM_HTTP_DEBUG": "1", "ROOM_HTTP_USER_AGENT": "custom/1.0"}
        with patch.dict(os.environ, env, clear=True):
            dispatcher = Dispatcher.from_env()
            assert dispatcher._debug is True
            assert dispatcher.user_agent == "custom/1.0"

    def test_get_dispatcher(self):
        """Should return a Dispatcher configured from env."""
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(get_dispatcher(), Dispatcher)


class TestDispatcherSuccess:
    """Tests for received responses."""

    @respx.mock
    def test_created(self):
        """Should return a SuccessResponse for a 201."""
        route = respx.post("http://echo.test/users").mock(
            return_value=httpx.Response(201, json={"id": 1})
        )

        request = Request(
            "users",
            with_method("POST"),
            with_body(JsonBody({"name": "ada"})),
        ).set_base_url("http://echo.test")
        response = Dispatcher().send(request)

        assert isinstance(response, SuccessResponse)
        assert response.ok is True
        assert response.status_code == 201
        assert response.json() == {"id": 1}
        assert response.request is request
        assert route.called
        sent = route.calls.last.request
        assert sent.headers["content-type"] == "application/json"
        assert sent.content == b'{"name":"ada"}'

    @respx.mock
    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_error_status_is_success_response(self, status):
        """Should not treat 4xx/5xx as dispatch failures."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(status))

        response = Dispatcher().send(Request("http://echo.test/x"))

        assert isinstance(response, SuccessResponse)
        assert response.status_code == status
        assert response.is_success is False

    @respx.mock
    def test_sends_user_agent_and_headers(self):
        """Should send the configured User-Agent alongside header-set entries."""
        route = respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))

        request = Request("http://echo.test/x", with_header(Header({"X-Trace": "abc"})))
        Dispatcher(user_agent="room-test/1").send(request)

        sent = route.calls.last.request
        assert sent.headers["user-agent"] == "room-test/1"
        assert sent.headers["x-trace"] == "abc"

    @respx.mock
    def test_request_reusable(self):
        """Should dispatch the same Request more than once."""
        route = respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))

        request = Request("http://echo.test/x")
        dispatcher = Dispatcher()
        assert dispatcher.send(request).ok
        assert dispatcher.send(request).ok
        assert route.call_count == 2

    @respx.mock
    def test_injected_client_not_closed(self):
        """Should reuse an injected client and leave it open."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(204))

        with httpx.Client() as client:
            dispatcher = Dispatcher(client=client)
            assert dispatcher.send(Request("http://echo.test/x")).ok
            assert dispatcher.send(Request("http://echo.test/x")).ok
            assert client.is_closed is False

    @respx.mock
    def test_context_cancelled_after_dispatch(self):
        """Should cancel the bound context once the dispatch completes."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))
        builder = RecordingContextBuilder()

        Dispatcher().send(Request("http://echo.test/x", with_context_builder(builder)))

        assert len(builder.built) == 1
        assert builder.built[0].cancelled


class TestDispatcherErrors:
    """Tests for transport failures."""

    @respx.mock
    def test_connect_error(self):
        """Should wrap connection failures in an ErrorResponse."""
        respx.post("http://unreachable.test/users").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        request = Request(
            "users", with_method("POST"), with_body(JsonBody({"name": "ada"}))
        ).set_base_url("http://unreachable.test")
        response = Dispatcher().send(request)

        assert isinstance(response, ErrorResponse)
        assert response.ok is False
        assert response.request.method == "POST"
        assert response.request.path == "http://unreachable.test/users"
        assert "connection refused" in response.message
        assert isinstance(response.error, httpx.ConnectError)

    @respx.mock
    def test_timeout(self):
        """Should wrap timeouts in an ErrorResponse."""
        respx.get("http://slow.test/x").mock(side_effect=httpx.ReadTimeout("timed out"))

        response = Dispatcher().send(Request("http://slow.test/x"))

        assert isinstance(response, ErrorResponse)
        assert isinstance(response.error, httpx.TimeoutException)

    def test_relative_path_without_base(self):
        """Should report a missing scheme as an ErrorResponse."""
        request = Request("users", with_method("POST"), with_body(JsonBody({"name": "ada"})))

        response = Dispatcher().send(request)

        assert isinstance(response, ErrorResponse)
        assert response.request is request
        assert response.request.method == "POST"
        assert response.request.path == "users"
        assert response.message

    @respx.mock(assert_all_called=False)
    def test_expired_context_skips_network(self):
        """Should not dispatch when the context is already done."""
        route = respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))
        past = DeadlineContextBuilder(datetime.now(UTC) - timedelta(seconds=1))

        response = Dispatcher().send(Request("http://echo.test/x", with_context_builder(past)))

        assert isinstance(response, ErrorResponse)
        assert response.message == CONTEXT_DEADLINE_EXCEEDED
        assert isinstance(response.error, RoomTransportError)
        assert not route.called

    def test_build_error_propagates(self):
        """Should raise RoomBuildError for a malformed request."""
        with pytest.raises(RoomBuildError):
            Dispatcher().send(Request("http://localhost:abc/x"))


class TestDispatcherDebug:
    """Tests for debug output."""

    @respx.mock
    def test_debug_redacts_sensitive_headers(self, capsys):
        """Should log to stderr without leaking credentials."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))

        request = Request("http://echo.test/x", with_header(Header({"Authorization": "Bearer s3cret"})))
        Dispatcher(debug=True).send(request)

        err = capsys.readouterr().err
        assert "[room] Sending GET http://echo.test/x" in err
        assert "Received 200" in err
        assert "s3cret" not in err
        assert "[REDACTED]" in err

    @respx.mock
    def test_no_output_without_debug(self, capsys):
        """Should stay quiet when debug is off."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))

        Dispatcher().send(Request("http://echo.test/x"))

        assert capsys.readouterr().err == ""


class TestRequestSend:
    """Tests for Request.send()."""

    @respx.mock
    def test_send_with_dispatcher(self):
        """Should delegate to the given dispatcher."""
        respx.get("http://echo.test/x").mock(return_value=httpx.Response(200, text="hi"))

        response = Request("http://echo.test/x").send(Dispatcher())

        assert isinstance(response, SuccessResponse)
        assert response.text == "hi"

    @respx.mock
    def test_send_uses_env_dispatcher(self):
        """Should fall back to a dispatcher configured from env."""
        route = respx.get("http://echo.test/x").mock(return_value=httpx.Response(200))

        with patch.dict(os.environ, {"ROOM_HTTP_USER_AGENT": "env-agent/1"}, clear=True):
            Request("http://echo.test/x").send()

        assert route.calls.last.request.headers["user-agent"] == "env-agent/1"

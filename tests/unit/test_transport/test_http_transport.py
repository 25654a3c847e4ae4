"""Unit tests for HttpTransport request building, retries and decoding."""

import time
from collections.abc import Generator
from unittest.mock import MagicMock

import httpx
import pytest

from foxnose_sdk.auth import JWTAuth, RequestData, SecureKeyAuth, SimpleKeyAuth
from foxnose_sdk.errors import FoxnoseAPIError, FoxnoseAuthError, FoxnoseTransportError
from foxnose_sdk.transport.client import HttpTransport
from foxnose_sdk.transport.config import RetryConfig, create_config
from foxnose_sdk.transport.constants import DEFAULT_USER_AGENT
from foxnose_sdk.transport.metrics import TransportMetrics
from tests.helpers.http import RecordingHandler, json_response
from tests.helpers.keys import encode_sec1_der, generate_private_key, verify_signature
from tests.helpers.time import FIXED_TIMESTAMP, fixed_clock


BASE_URL = "https://api.example.com"


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None]:
    """Reset singleton before and after each test."""
    TransportMetrics.reset()
    yield
    TransportMetrics.reset()


def make_transport(
    handler: RecordingHandler,
    *,
    auth: object = None,
    retry_config: RetryConfig | None = None,
    default_headers: dict[str, str] | None = None,
    sleep: MagicMock | None = None,
) -> HttpTransport:
    """Build a transport routed through a recording handler."""
    return HttpTransport(
        create_config(BASE_URL, default_headers=default_headers),
        auth,  # type: ignore[arg-type]
        retry_config,
        http_client=handler.client(),
        sleep=sleep or MagicMock(),
    )


class TestRequestBuilding:
    """Tests for URL, query, header and body assembly."""

    def test_get_with_query_params(self) -> None:
        """GET /items with limit=2 reaches the full URL and returns JSON."""
        handler = RecordingHandler([json_response(200, {"results": []})])
        transport = make_transport(handler)

        result = transport.request("GET", "/items", params={"limit": 2})

        assert result == {"results": []}
        assert len(handler.requests) == 1
        assert str(handler.last.url) == "https://api.example.com/items?limit=2"
        assert handler.last.method == "GET"
        assert handler.last.content == b""

    def test_none_params_dropped_and_bools_lowercased(self) -> None:
        """None values are omitted and booleans become true/false."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request(
            "GET", "/items", params={"include_schema": True, "draft": False, "cursor": None}
        )

        assert handler.last.url.params["include_schema"] == "true"
        assert handler.last.url.params["draft"] == "false"
        assert "cursor" not in handler.last.url.params

    def test_all_params_none_yields_bare_path(self) -> None:
        """A query that encodes to nothing leaves no '?' on the URL."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("GET", "/items", params={"cursor": None})

        assert str(handler.last.url) == "https://api.example.com/items"

    def test_method_is_upper_cased(self) -> None:
        """Lower-case method names are normalized."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("get", "/items")

        assert handler.last.method == "GET"

    def test_default_user_agent(self) -> None:
        """User-Agent defaults to the SDK identifier."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("GET", "/items")

        assert handler.last.headers["User-Agent"] == DEFAULT_USER_AGENT

    def test_json_body_is_compact_utf8(self) -> None:
        """JSON bodies use compact separators and keep non-ASCII characters."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("POST", "/items", json_body={"title": "café", "tags": [1, 2]})

        assert handler.last.content == '{"title":"café","tags":[1,2]}'.encode()
        assert handler.last.headers["Content-Type"] == "application/json"

    def test_explicit_content_type_is_kept(self) -> None:
        """A caller-supplied Content-Type (any case) is not overwritten."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request(
            "POST",
            "/items",
            json_body={"a": 1},
            headers={"content-type": "application/vnd.foxnose+json"},
        )

        assert handler.last.headers["Content-Type"] == "application/vnd.foxnose+json"

    def test_raw_content_sent_verbatim(self) -> None:
        """Raw content is sent as-is without a JSON content type."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("POST", "/upload", content=b"\x00\x01raw")

        assert handler.last.content == b"\x00\x01raw"
        assert "Content-Type" not in handler.last.headers

    def test_json_body_takes_precedence_over_content(self) -> None:
        """When both are supplied, the JSON body wins."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.request("POST", "/items", json_body={"a": 1}, content=b"ignored")

        assert handler.last.content == b'{"a":1}'

    def test_header_priority(self) -> None:
        """Defaults < computed User-Agent < per-call < auth, case-insensitively."""
        handler = RecordingHandler()
        transport = make_transport(
            handler,
            auth=JWTAuth.from_static_token("tok"),
            default_headers={"X-Env": "default", "User-Agent": "custom-agent/1.0"},
        )

        transport.request(
            "GET",
            "/items",
            headers={"x-env": "per-call", "authorization": "Bearer caller"},
        )

        headers = handler.last.headers
        assert headers["User-Agent"] == "custom-agent/1.0"
        assert headers["X-Env"] == "per-call"
        assert headers["Authorization"] == "Bearer tok"
        assert len(headers.get_list("authorization")) == 1


class TestAuthIntegration:
    """Tests for auth header computation per attempt."""

    def test_auth_sees_wire_body_and_path(self) -> None:
        """Auth strategies receive the exact body bytes and path with query."""
        seen: list[RequestData] = []

        class CapturingAuth:
            def build_headers(self, request: RequestData) -> dict[str, str]:
                seen.append(request)
                return {}

        handler = RecordingHandler()
        transport = make_transport(handler, auth=CapturingAuth())

        transport.request("PUT", "/items/", params={"a": "b"}, json_body={"x": 1})

        assert seen[0] == RequestData(
            method="PUT",
            url="https://api.example.com/items/?a=b",
            path="/items/?a=b",
            body=b'{"x":1}',
        )

    def test_secure_signature_recomputed_per_attempt(self) -> None:
        """Every attempt carries a verifiable signature of the same message."""
        key = generate_private_key()
        auth = SecureKeyAuth("pub", encode_sec1_der(key), clock=fixed_clock)
        handler = RecordingHandler([httpx.Response(503), json_response(200, {"ok": True})])
        transport = make_transport(handler, auth=auth)

        transport.request("PUT", "/items/", json_body={"x": 1})

        assert len(handler.requests) == 2
        message = auth.canonical_string(
            RequestData("PUT", f"{BASE_URL}/items/", "/items/", b'{"x":1}'),
            FIXED_TIMESTAMP,
        )
        for request in handler.requests:
            scheme, credentials = request.headers["Authorization"].split(" ", 1)
            public_key, signature = credentials.split(":", 1)
            assert scheme == "Secure"
            assert public_key == "pub"
            assert request.headers["Date"] == FIXED_TIMESTAMP
            assert verify_signature(key, signature, message)

    def test_simple_auth_header(self) -> None:
        """Simple auth is applied to the outgoing request."""
        handler = RecordingHandler()
        transport = make_transport(handler, auth=SimpleKeyAuth("pub", "sec"))

        transport.request("GET", "/items")

        assert handler.last.headers["Authorization"] == "Simple pub:sec"

    def test_auth_error_propagates_without_network_call(self) -> None:
        """Auth failures surface before anything is sent."""
        handler = RecordingHandler()
        transport = make_transport(handler, auth=JWTAuth.from_static_token(""))

        with pytest.raises(FoxnoseAuthError):
            transport.request("GET", "/items")

        assert handler.requests == []


class TestRetries:
    """Tests for the retry loop."""

    def test_post_500_is_not_retried(self) -> None:
        """POST is not retry-eligible, so one call then an API error."""
        handler = RecordingHandler([json_response(500, {"message": "boom"})])
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("POST", "/items", json_body={"a": 1})

        assert len(handler.requests) == 1
        assert exc_info.value.status_code == 500
        sleep.assert_not_called()

    def test_get_503_then_200_uses_backoff(self) -> None:
        """A retryable status without Retry-After waits the backoff once."""
        handler = RecordingHandler([httpx.Response(503), json_response(200, {"ok": True})])
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        result = transport.request("GET", "/items")

        assert result == {"ok": True}
        assert len(handler.requests) == 2
        sleep.assert_called_once_with(0.5)

    def test_custom_policy_503_then_200(self) -> None:
        """A policy limited to GET/503 retries once and returns the second payload."""
        handler = RecordingHandler(
            [json_response(503, {"message": "busy"}), json_response(200, {"attempt": 2})]
        )
        policy = RetryConfig(attempts=3, status_codes=frozenset({503}), methods=["GET"])
        transport = make_transport(handler, retry_config=policy)

        assert transport.request("GET", "/items") == {"attempt": 2}
        assert len(handler.requests) == 2

    def test_backoff_doubles(self) -> None:
        """Successive retries wait factor * 2^(attempt-1)."""
        handler = RecordingHandler(
            [httpx.Response(502), httpx.Response(502), json_response(200, {})]
        )
        sleep = MagicMock()
        transport = make_transport(
            handler, sleep=sleep, retry_config=RetryConfig(attempts=3, backoff_factor=1.0)
        )

        transport.request("GET", "/items")

        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_retry_after_numeric(self) -> None:
        """A numeric Retry-After overrides the backoff."""
        handler = RecordingHandler(
            [httpx.Response(429, headers={"Retry-After": "2"}), json_response(200, {})]
        )
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        transport.request("GET", "/items")

        sleep.assert_called_once_with(2.0)

    def test_retry_after_leading_number(self) -> None:
        """Trailing junk after the leading number is ignored."""
        handler = RecordingHandler(
            [httpx.Response(503, headers={"Retry-After": "2abc"}), json_response(200, {})]
        )
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        transport.request("GET", "/items")

        sleep.assert_called_once_with(2.0)

    def test_retry_after_non_numeric_retries_immediately(self) -> None:
        """An unparseable Retry-After means no wait at all."""
        handler = RecordingHandler(
            [
                httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}),
                json_response(200, {}),
            ]
        )
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        transport.request("GET", "/items")

        assert len(handler.requests) == 2
        sleep.assert_not_called()

    def test_non_retryable_status_raises_immediately(self) -> None:
        """404 is not in the retryable set."""
        handler = RecordingHandler([json_response(404, {"message": "Not found"})])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("GET", "/items/missing")

        assert len(handler.requests) == 1
        assert exc_info.value.status_code == 404

    def test_last_attempt_error_is_api_error(self) -> None:
        """When attempts run out on a retryable status, the last response is raised."""
        handler = RecordingHandler(fallback=lambda request: httpx.Response(503))
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("GET", "/items")

        assert len(handler.requests) == 3
        assert exc_info.value.status_code == 503

    def test_single_attempt_never_retries(self) -> None:
        """attempts=1 disables retries."""
        handler = RecordingHandler([httpx.Response(503)])
        transport = make_transport(handler, retry_config=RetryConfig(attempts=1))

        with pytest.raises(FoxnoseAPIError):
            transport.request("GET", "/items")

        assert len(handler.requests) == 1

    def test_network_error_on_post_is_transport_error(self) -> None:
        """Network failures on non-retryable methods surface at once."""
        handler = RecordingHandler([httpx.ConnectError("connection refused")])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseTransportError, match="connection refused") as exc_info:
            transport.request("POST", "/items", json_body={})

        assert len(handler.requests) == 1
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_network_error_retried_for_get(self) -> None:
        """Network failures on GET are retried with backoff."""
        handler = RecordingHandler([httpx.ReadTimeout("timed out"), json_response(200, {"ok": 1})])
        sleep = MagicMock()
        transport = make_transport(handler, sleep=sleep)

        assert transport.request("GET", "/items") == {"ok": 1}
        sleep.assert_called_once_with(0.5)

    def test_network_error_exhausts_attempts(self) -> None:
        """Persistent network failures raise after the last attempt."""
        handler = RecordingHandler(fallback=_raise_connect_error)
        transport = make_transport(handler)

        with pytest.raises(FoxnoseTransportError):
            transport.request("GET", "/items")

        assert len(handler.requests) == 3


def _raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("unreachable", request=request)


def _slow_response(request: httpx.Request) -> httpx.Response:
    time.sleep(0.5)
    return json_response(200, {})


class TestAttemptDeadline:
    """Tests for the wall-clock deadline on each attempt."""

    def test_slow_response_is_transport_error(self) -> None:
        """A response slower than timeout_seconds fails the attempt."""
        handler = RecordingHandler(fallback=_slow_response)
        transport = HttpTransport(
            create_config(BASE_URL, timeout_seconds=0.1),
            retry_config=RetryConfig(attempts=1),
            http_client=handler.client(),
        )

        started = time.monotonic()
        with pytest.raises(FoxnoseTransportError, match="deadline") as exc_info:
            transport.request("GET", "/items")

        assert time.monotonic() - started < 0.4
        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)
        assert TransportMetrics.get_instance().http_failures_total == {"TRANSPORT": 1}

    def test_expired_get_is_retried(self) -> None:
        """A deadline expiry counts as a retryable network failure."""
        handler = RecordingHandler([_slow_response, json_response(200, {"ok": 1})])
        sleep = MagicMock()
        transport = HttpTransport(
            create_config(BASE_URL, timeout_seconds=0.1),
            http_client=handler.client(),
            sleep=sleep,
        )

        assert transport.request("GET", "/items") == {"ok": 1}
        sleep.assert_called_once_with(0.5)

    def test_fast_response_within_deadline(self) -> None:
        """Responses inside the deadline are returned unchanged."""
        handler = RecordingHandler([json_response(201, {"key": "k"}, headers={"X-Id": "1"})])
        transport = HttpTransport(
            create_config(BASE_URL, timeout_seconds=5.0),
            http_client=handler.client(),
        )

        response = transport.request("POST", "/items", json_body={}, parse_json=False)

        assert response.status_code == 201
        assert response.headers["x-id"] == "1"
        assert response.json() == {"key": "k"}


class TestResponseDecoding:
    """Tests for response body decoding."""

    def test_empty_body_decodes_to_none(self) -> None:
        """An empty 2xx body yields None."""
        handler = RecordingHandler([httpx.Response(204)])
        transport = make_transport(handler)

        assert transport.request("DELETE", "/items/1") is None

    def test_non_json_body_decodes_to_text(self) -> None:
        """Non-JSON bodies are returned as text."""
        handler = RecordingHandler([httpx.Response(200, text="plain ok")])
        transport = make_transport(handler)

        assert transport.request("GET", "/health") == "plain ok"

    def test_json_round_trip(self) -> None:
        """A body echoed back by the server decodes to an equal structure."""
        handler = RecordingHandler(
            fallback=lambda request: httpx.Response(200, content=request.content)
        )
        transport = make_transport(handler)
        body = {"name": "x", "tags": ["a", "é"], "nested": {"n": 1.5, "ok": True, "none": None}}

        assert transport.request("PUT", "/echo", json_body=body) == body

    def test_parse_json_false_returns_response(self) -> None:
        """parse_json=False hands back the raw httpx response."""
        handler = RecordingHandler([json_response(200, {"a": 1})])
        transport = make_transport(handler)

        response = transport.request("GET", "/items", parse_json=False)

        assert isinstance(response, httpx.Response)
        assert response.json() == {"a": 1}


class TestErrorNormalization:
    """Tests for API error construction."""

    def test_json_error_fields(self) -> None:
        """message, error_code and detail are extracted from JSON bodies."""
        body = {"message": "Folder not found", "error_code": "not_found", "detail": {"key": "f1"}}
        handler = RecordingHandler(
            [json_response(404, body, headers={"X-Request-Id": "req-1"})]
        )
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("GET", "/folders/f1/")

        error = exc_info.value
        assert error.message == "Folder not found"
        assert error.error_code == "not_found"
        assert error.detail == {"key": "f1"}
        assert error.response_body == body
        headers = {name.lower(): value for name, value in error.response_headers.items()}
        assert headers["x-request-id"] == "req-1"
        assert str(error) == "Folder not found (status=404, error_code=not_found)"

    def test_json_without_message_falls_back_to_text(self) -> None:
        """A JSON object lacking 'message' uses the raw text."""
        handler = RecordingHandler([httpx.Response(400, text='{"detail":"bad"}')])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("POST", "/items", json_body={})

        assert exc_info.value.message == '{"detail":"bad"}'
        assert exc_info.value.detail == "bad"

    def test_plain_text_error_body(self) -> None:
        """Non-JSON error bodies become the message and the body."""
        handler = RecordingHandler([httpx.Response(401, text="Unauthorized")])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError) as exc_info:
            transport.request("GET", "/items")

        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.response_body == "Unauthorized"
        assert exc_info.value.error_code is None

    def test_empty_error_body_uses_default_message(self) -> None:
        """An empty error body falls back to the generic message."""
        handler = RecordingHandler([httpx.Response(403)])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError, match="API request failed") as exc_info:
            transport.request("GET", "/items")

        assert exc_info.value.response_body is None


class TestMetricsAndLifecycle:
    """Tests for metrics recording and client ownership."""

    def test_metrics_count_retries(self) -> None:
        """Attempts, responses and retries are counted."""
        handler = RecordingHandler([httpx.Response(503), json_response(200, {})])
        transport = make_transport(handler)

        transport.request("GET", "/items")

        metrics = TransportMetrics.get_instance()
        assert metrics.http_attempts_total == 2
        assert metrics.http_retry_total == 1
        assert metrics.http_responses_total == {503: 1, 200: 1}

    def test_metrics_count_failures_by_kind(self) -> None:
        """Terminal failures are counted by error kind."""
        handler = RecordingHandler([httpx.Response(400)])
        transport = make_transport(handler)

        with pytest.raises(FoxnoseAPIError):
            transport.request("POST", "/items", json_body={})

        assert TransportMetrics.get_instance().http_failures_total == {"API": 1}

    def test_metrics_reset_after_construction(self) -> None:
        """Counts land in the instance current at request time."""
        handler = RecordingHandler([json_response(200, {})])
        transport = make_transport(handler)
        TransportMetrics.reset()

        transport.request("GET", "/items")

        assert TransportMetrics.get_instance().http_attempts_total == 1

    def test_injected_client_not_closed(self) -> None:
        """close() leaves caller-owned clients open."""
        client = RecordingHandler().client()
        transport = HttpTransport(create_config(BASE_URL), http_client=client)

        transport.close()

        assert not client.is_closed

    def test_owned_client_closed_by_context_manager(self) -> None:
        """A transport closes the client it created."""
        with HttpTransport(create_config(BASE_URL)) as transport:
            client = transport._client

        assert client.is_closed

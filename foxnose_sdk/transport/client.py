"""Shared HTTP transport with retries and error normalization."""

import json
import math
import re
import threading
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from typing import Any, NoReturn
from urllib.parse import urlencode

import httpx
import structlog

from foxnose_sdk.auth.anonymous import AnonymousAuth
from foxnose_sdk.auth.protocols import AuthStrategy, RequestData
from foxnose_sdk.errors import (
    FoxnoseAPIError,
    FoxnoseErrorKind,
    FoxnoseTransportError,
)
from foxnose_sdk.transport.config import DEFAULT_RETRY_CONFIG, FoxnoseConfig, RetryConfig
from foxnose_sdk.transport.constants import (
    DEFAULT_API_ERROR_MESSAGE,
    HEADER_CONTENT_TYPE,
    HEADER_RETRY_AFTER,
    HEADER_USER_AGENT,
    HTTP_STATUS_ERROR_MIN,
    JSON_CONTENT_TYPE,
    RETRIES_EXHAUSTED_MESSAGE,
)
from foxnose_sdk.transport.metrics import TransportMetrics
from foxnose_sdk.transport.redact import redact_headers


logger = structlog.get_logger()

QueryParams = Mapping[str, Any]

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _stringify_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(params: QueryParams | None) -> str:
    """Encode query parameters, skipping keys whose value is None.

    Args:
        params: Query parameters.

    Returns:
        Encoded query string without a leading ``?`` (empty when nothing remains).
    """
    if not params:
        return ""
    return urlencode(
        [(key, _stringify_param(value)) for key, value in params.items() if value is not None]
    )


def serialize_json(body: Any) -> bytes:
    """Serialize a JSON body compactly, keeping non-ASCII characters."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header value as seconds.

    Args:
        value: Raw header value.

    The value is read up to its leading decimal number, so ``"2abc"`` is two
    seconds and ``"1_0"`` is one. HTTP dates carry no leading number.

    Returns:
        None when the header is absent or empty, the delay in seconds when it
        starts with a number, and 0.0 when it is present but not a usable number.
    """
    if not value:
        return None
    match = _LEADING_NUMBER.match(value.strip())
    if match is None:
        return 0.0
    seconds = float(match.group())
    if not math.isfinite(seconds) or seconds < 0:
        return 0.0
    return seconds


class HttpTransport:
    """HTTP transport shared by the Management and Flux clients.

    Provides:
    - Header assembly with auth applied last
    - JSON or raw-bytes request bodies
    - Retry with exponential backoff and Retry-After support
    - Normalization of error responses into FoxnoseAPIError
    """

    def __init__(
        self,
        config: FoxnoseConfig,
        auth: AuthStrategy | None = None,
        retry_config: RetryConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Transport configuration.
            auth: Auth strategy; anonymous when omitted.
            retry_config: Retry policy; DEFAULT_RETRY_CONFIG when omitted.
            http_client: Pre-built httpx client. When omitted the transport
                creates and owns one.
            sleep: Function used to wait between attempts.
        """
        self.config = config
        self.auth: AuthStrategy = auth or AnonymousAuth()
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client()
        self._sleep = sleep
        self._log = logger.bind(component="transport", base_url=config.base_url)

    @property
    def _metrics(self) -> TransportMetrics:
        return TransportMetrics.get_instance()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        parse_json: bool = True,
    ) -> Any:
        """Send a request and decode the response.

        Args:
            method: HTTP method.
            path: Path relative to the configured base URL.
            params: Query parameters; None values are dropped.
            json_body: JSON-serializable body. Takes precedence over content.
            content: Raw body bytes.
            headers: Per-call headers, overriding configured defaults.
            parse_json: Decode the body as JSON (falling back to text).
                When False the httpx.Response is returned as-is.

        Returns:
            Decoded JSON, raw text, None for an empty body, or the response.

        Raises:
            FoxnoseAuthError: If the auth strategy cannot build headers.
            FoxnoseTransportError: If no HTTP response could be obtained.
            FoxnoseAPIError: If the API answered with a non-retried error status.
        """
        response = self._send_with_retries(
            method.upper(),
            path,
            params=params,
            json_body=json_body,
            content=content,
            headers=headers,
        )
        return self._decode_response(response, parse_json=parse_json)

    def _build_request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None,
        json_body: Any,
        content: bytes | None,
        headers: Mapping[str, str] | None,
    ) -> httpx.Request:
        """Assemble one attempt's request, computing fresh auth headers."""
        merged = httpx.Headers(self.config.default_headers)
        merged.setdefault(HEADER_USER_AGENT, self.config.user_agent)
        if headers:
            merged.update(headers)

        body = b""
        wire_body: bytes | None = None
        if json_body is not None:
            body = serialize_json(json_body)
            wire_body = body
            merged.setdefault(HEADER_CONTENT_TYPE, JSON_CONTENT_TYPE)
        elif content is not None:
            body = bytes(content)
            wire_body = body

        query = encode_query(params)
        path_with_query = f"{path}?{query}" if query else path
        url = f"{self.config.base_url}{path_with_query}"

        request_data = RequestData(method=method, url=url, path=path_with_query, body=body)
        auth_headers = self.auth.build_headers(request_data)
        if auth_headers:
            merged.update(auth_headers)

        return self._client.build_request(
            method,
            url,
            headers=merged,
            content=wire_body,
            timeout=self.config.timeout_seconds,
        )

    def _send_with_retries(
        self,
        method: str,
        path: str,
        **options: Any,
    ) -> httpx.Response:
        policy = self.retry_config
        log = self._log.bind(method=method, path=path)

        for attempt in range(1, policy.attempts + 1):
            request = self._build_request(method, path, **options)
            self._metrics.record_attempt()

            try:
                response = self._send_attempt(request)
            except httpx.TransportError as exc:
                if not policy.allows_method(method) or attempt >= policy.attempts:
                    self._metrics.record_failure(FoxnoseErrorKind.TRANSPORT)
                    log.warning("request_failed", attempt=attempt, error=str(exc))
                    raise FoxnoseTransportError(str(exc) or type(exc).__name__) from exc
                self._wait(log, attempt, policy.backoff_seconds(attempt), error=str(exc))
                continue

            self._metrics.record_response(response.status_code)
            if response.status_code < HTTP_STATUS_ERROR_MIN:
                log.debug(
                    "request_complete",
                    attempt=attempt,
                    status_code=response.status_code,
                    headers=redact_headers(request.headers),
                )
                return response

            if policy.should_retry(method, response.status_code) and attempt < policy.attempts:
                retry_after = parse_retry_after(response.headers.get(HEADER_RETRY_AFTER))
                delay = policy.backoff_seconds(attempt) if retry_after is None else retry_after
                response.close()
                self._wait(log, attempt, delay, status_code=response.status_code)
                continue

            self._metrics.record_failure(FoxnoseErrorKind.API)
            log.warning("request_failed", attempt=attempt, status_code=response.status_code)
            self._raise_api_error(response)

        raise FoxnoseTransportError(RETRIES_EXHAUSTED_MESSAGE)

    def _send_attempt(self, request: httpx.Request) -> httpx.Response:
        """Send one attempt within a wall-clock deadline of ``timeout_seconds``.

        httpx timeouts bound each connect, read and write phase separately,
        so the send runs on a daemon worker thread and the attempt is
        abandoned once the deadline passes.

        Raises:
            httpx.TimeoutException: If no complete response arrived in time.
            httpx.TransportError: If the send itself failed.
        """
        outcome: Future[httpx.Response] = Future()

        def run() -> None:
            try:
                outcome.set_result(self._client.send(request))
            except Exception as e:  # noqa: BLE001
                outcome.set_exception(e)

        worker = threading.Thread(target=run, name="foxnose-attempt", daemon=True)
        worker.start()
        worker.join(self.config.timeout_seconds)
        if not outcome.done():
            msg = f"Request exceeded the {self.config.timeout_seconds}s deadline"
            raise httpx.TimeoutException(msg, request=request)
        return outcome.result()

    def _wait(
        self,
        log: structlog.stdlib.BoundLogger,
        attempt: int,
        delay: float,
        **context: Any,
    ) -> None:
        self._metrics.record_retry()
        log.info("request_retry", attempt=attempt, delay_seconds=delay, **context)
        if delay > 0:
            self._sleep(delay)

    def _decode_response(self, response: httpx.Response, *, parse_json: bool) -> Any:
        if not parse_json:
            return response
        text = response.text
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    def _raise_api_error(self, response: httpx.Response) -> NoReturn:
        """Build a FoxnoseAPIError from an error response and raise it.

        Reading the body is best-effort: read failures leave the message
        empty and the error is raised regardless.
        """
        message = ""
        error_code: str | None = None
        detail: Any = None
        body: Any = None

        try:
            response.read()
            text = response.text
        except (httpx.HTTPError, httpx.StreamError):
            text = ""

        message = text
        if text:
            try:
                payload = json.loads(text)
            except ValueError:
                body = text
            else:
                body = payload
                if isinstance(payload, dict):
                    if payload.get("message") is not None:
                        message = str(payload["message"])
                    error_code = payload.get("error_code")
                    detail = payload.get("detail")

        raise FoxnoseAPIError(
            message or DEFAULT_API_ERROR_MESSAGE,
            status_code=response.status_code,
            error_code=error_code,
            detail=detail,
            response_headers=dict(response.headers.items()),
            response_body=body,
        )

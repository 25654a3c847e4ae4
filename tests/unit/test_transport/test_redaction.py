"""Unit tests for header redaction."""

import httpx

from foxnose_sdk.transport.redact import REDACTED_VALUE, is_sensitive_header, redact_headers


class TestRedactHeaders:
    """Tests for header redaction."""

    def test_redacts_authorization(self) -> None:
        """Test that Authorization header is redacted."""
        headers = {
            "Authorization": "Secure pub:c2lnbmF0dXJl",
            "Content-Type": "application/json",
        }

        result = redact_headers(headers)

        assert result["Authorization"] == REDACTED_VALUE
        assert result["Content-Type"] == "application/json"

    def test_redacts_authorization_case_insensitive(self) -> None:
        """Test that authorization header is redacted regardless of case."""
        for name in ("authorization", "AUTHORIZATION", "Authorization"):
            assert redact_headers({name: "Simple pub:secret"})[name] == REDACTED_VALUE

    def test_keeps_date_header(self) -> None:
        """The signing Date header is not sensitive."""
        result = redact_headers({"Date": "2024-06-15T12:00:00Z"})

        assert result["Date"] == "2024-06-15T12:00:00Z"

    def test_accepts_httpx_headers(self) -> None:
        """httpx.Headers instances are accepted."""
        headers = httpx.Headers({"Authorization": "Bearer tok", "User-Agent": "ua"})

        result = redact_headers(headers)

        assert "Bearer tok" not in result.values()
        assert "ua" in result.values()

    def test_does_not_mutate_input(self) -> None:
        """The original mapping is left untouched."""
        headers = {"Cookie": "session=1"}

        redact_headers(headers)

        assert headers == {"Cookie": "session=1"}


class TestIsSensitiveHeader:
    """Tests for is_sensitive_header."""

    def test_sensitive_names(self) -> None:
        """Known credential headers are sensitive."""
        for name in ("Authorization", "Cookie", "Set-Cookie", "X-API-Key", "Proxy-Authorization"):
            assert is_sensitive_header(name)

    def test_regular_names(self) -> None:
        """Ordinary headers are not sensitive."""
        for name in ("Accept", "User-Agent", "Retry-After"):
            assert not is_sensitive_header(name)

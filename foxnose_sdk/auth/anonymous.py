"""Auth strategy for endpoints that need no credentials."""

from foxnose_sdk.auth.protocols import RequestData


class AnonymousAuth:
    """Placeholder auth strategy when no credentials are required."""

    def build_headers(self, request: RequestData) -> dict[str, str]:  # noqa: ARG002
        return {}

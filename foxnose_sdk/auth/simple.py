"""Shared-secret authentication for development usage."""

from foxnose_sdk.auth.protocols import RequestData
from foxnose_sdk.errors import FoxnoseAuthError
from foxnose_sdk.transport.constants import HEADER_AUTHORIZATION


class SimpleKeyAuth:
    """Adds ``Authorization: Simple <public>:<secret>`` headers.

    The header ignores request content entirely; prefer
    :class:`~foxnose_sdk.auth.secure.SecureKeyAuth` outside development.
    """

    def __init__(self, public_key: str, secret_key: str) -> None:
        if not public_key or not secret_key:
            msg = "public_key and secret_key are required"
            raise FoxnoseAuthError(msg)
        self.public_key = public_key
        self._secret_key = secret_key

    def build_headers(self, request: RequestData) -> dict[str, str]:  # noqa: ARG002
        return {HEADER_AUTHORIZATION: f"Simple {self.public_key}:{self._secret_key}"}

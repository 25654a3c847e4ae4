"""Request-signing authentication with ECDSA P-256 keys."""

import base64
import hashlib
from collections.abc import Callable
from datetime import UTC, datetime
from urllib.parse import urlsplit

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from foxnose_sdk.auth.protocols import RequestData
from foxnose_sdk.errors import FoxnoseAuthError
from foxnose_sdk.transport.constants import HEADER_AUTHORIZATION, HEADER_DATE


logger = structlog.get_logger()

Clock = Callable[[], datetime]

_PEM_PREFIX = "-----BEGIN"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Format a moment as ISO-8601 UTC with second precision.

    Args:
        moment: Point in time; naive values are treated as UTC.

    Returns:
        Timestamp such as ``2024-06-15T12:00:00Z``.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def signing_path(request: RequestData) -> str:
    """Derive the path (with query string) covered by the signature.

    The path is taken from the absolute URL when it parses; otherwise the
    request's own path is used, and ``/`` when both are empty.

    Args:
        request: Outbound request view.

    Returns:
        Path to sign.
    """
    try:
        parts = urlsplit(request.url)
    except ValueError:
        parts = None

    if parts is not None and parts.scheme and parts.netloc:
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"
        return path

    return request.path or "/"


class SecureKeyAuth:
    """Implements the ``Secure <public>:<signature>`` header used by both APIs.

    The signature is deterministic ECDSA P-256 (RFC 6979) with SHA-256 over
    ``<path>|<sha256-hex(body)>|<timestamp>``, so identical input at the same
    second yields identical headers. It is recomputed for every attempt,
    since the timestamp travels in the ``Date`` header.
    """

    def __init__(
        self,
        public_key: str,
        private_key: str,
        *,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the strategy.

        Args:
            public_key: Public key identifier sent in the header.
            private_key: Base64-encoded DER private key (SEC1 or PKCS#8),
                or PEM text.
            clock: Callable returning the signing time (defaults to now, UTC).

        Raises:
            FoxnoseAuthError: If either key argument is empty.
        """
        if not public_key or not private_key:
            msg = "public_key and private_key are required"
            raise FoxnoseAuthError(msg)
        self.public_key = public_key
        self._private_key_material = private_key.strip()
        self._clock = clock or _utc_now

    def canonical_string(self, request: RequestData, timestamp: str) -> str:
        """Build the exact message that gets signed.

        Args:
            request: Outbound request view.
            timestamp: Formatted signing timestamp.

        Returns:
            ``<path>|<sha256-hex(body)>|<timestamp>``.
        """
        body_hash = hashlib.sha256(request.body or b"").hexdigest()
        return f"{signing_path(request)}|{body_hash}|{timestamp}"

    def build_headers(self, request: RequestData) -> dict[str, str]:
        """Sign the request and build ``Authorization`` and ``Date`` headers.

        Raises:
            FoxnoseAuthError: If the private key material is invalid.
        """
        timestamp = format_timestamp(self._clock())
        message = self.canonical_string(request, timestamp)

        private_key = self._load_private_key()
        signature = private_key.sign(
            message.encode("utf-8"),
            ec.ECDSA(hashes.SHA256(), deterministic_signing=True),
        )
        signature_b64 = base64.b64encode(signature).decode("ascii")

        return {
            HEADER_AUTHORIZATION: f"Secure {self.public_key}:{signature_b64}",
            HEADER_DATE: timestamp,
        }

    def _load_private_key(self) -> ec.EllipticCurvePrivateKey:
        material = self._private_key_material
        try:
            if material.startswith(_PEM_PREFIX):
                key = serialization.load_pem_private_key(
                    material.encode("ascii"), password=None
                )
            else:
                der = base64.b64decode("".join(material.split()), validate=True)
                key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            logger.warning("auth_private_key_invalid", component="auth", error=str(exc))
            msg = f"Failed to load private key: {exc}"
            raise FoxnoseAuthError(msg) from exc

        if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(
            key.curve, ec.SECP256R1
        ):
            msg = "Private key must be an EC P-256 key"
            raise FoxnoseAuthError(msg)
        return key

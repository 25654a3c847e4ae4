"""Metrics collection for the HTTP transport layer."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar

from foxnose_sdk.errors import FoxnoseErrorKind


@dataclass
class TransportMetrics:
    """Metrics for transport operations.

    Singleton class that tracks response counts by status, retries,
    and terminal failures by error kind. Counters are process-wide and
    never influence request behaviour.
    """

    http_responses_total: dict[int, int] = field(default_factory=dict)
    http_retry_total: int = 0
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_attempts_total: int = 0

    _instance: ClassVar["TransportMetrics | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_instance(cls) -> "TransportMetrics":
        """Get singleton metrics instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._lock:
            cls._instance = None

    def record_attempt(self) -> None:
        """Record a network attempt."""
        with self._lock:
            self.http_attempts_total += 1

    def record_response(self, status_code: int) -> None:
        """Record a received HTTP response.

        Args:
            status_code: HTTP status code.
        """
        with self._lock:
            self.http_responses_total[status_code] = (
                self.http_responses_total.get(status_code, 0) + 1
            )

    def record_retry(self) -> None:
        """Record a scheduled retry."""
        with self._lock:
            self.http_retry_total += 1

    def record_failure(self, kind: FoxnoseErrorKind) -> None:
        """Record a terminal request failure.

        Args:
            kind: Classification of the failure.
        """
        with self._lock:
            key = kind.value
            self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1

    def to_dict(self) -> dict[str, int | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_attempts_total": self.http_attempts_total,
            "http_responses_total": dict(self.http_responses_total),
            "http_retry_total": self.http_retry_total,
            "http_failures_total": dict(self.http_failures_total),
        }

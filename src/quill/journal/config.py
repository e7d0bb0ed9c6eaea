"""Configuration dataclasses for remote sync and analytics.

These are pure data containers with sensible defaults. Build them from
the hierarchical :class:`~quill.core.config.Config` with ``from_config``
or pass values directly in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from quill.core.config import as_bool
from quill.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from quill.core.config import Config

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass
class SyncConfig:
    """Settings for the outbound remote sync queue.

    Attributes:
        enabled: Whether to mirror writes to the remote service at all.
        endpoint: Base URL of the remote entry service.
        api_key: Bearer token sent with each request.
        max_attempts: Tries per job before it lands in the dead-letter list.
        base_delay: First retry delay in seconds; doubles each attempt.
        max_delay: Upper bound for a single retry delay.
        timeout: Seconds before a remote call is abandoned. None waits forever.
        queue_size: Pending jobs held before new ones are dropped.
    """

    enabled: bool = False
    endpoint: str = ""
    api_key: str = ""
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    timeout: float | None = 30.0
    queue_size: int = 100

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("sync.max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("sync delays cannot be negative")

    def retry_delay(self, attempt: int) -> float:
        """Delay before retry number *attempt* (1-based)."""
        return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)

    @classmethod
    def from_config(cls, config: Config) -> SyncConfig:
        timeout = config.get("sync.timeout", 30.0)
        return cls(
            enabled=as_bool(config.get("sync.enabled", False)),
            endpoint=str(config.get("sync.endpoint", "") or ""),
            api_key=str(config.get("sync.api_key", "") or ""),
            max_attempts=int(config.get("sync.max_attempts", 3)),
            base_delay=float(config.get("sync.base_delay", 1.0)),
            max_delay=float(config.get("sync.max_delay", 30.0)),
            timeout=float(timeout) if timeout not in (None, "", 0, "0") else None,
            queue_size=int(config.get("sync.queue_size", 100)),
        )


@dataclass
class AnalyticsConfig:
    """Settings for derived views.

    Attributes:
        heatmap_days: Trailing window of the daily word-count series.
        emotion_top_n: How many emotions the frequency view keeps.
        week_start: First day of a calendar week for weekly rollups.
    """

    heatmap_days: int = 90
    emotion_top_n: int = 10
    week_start: str = "sunday"

    def __post_init__(self):
        self.week_start = self.week_start.lower()
        if self.week_start not in WEEKDAYS:
            raise ConfigurationError(f"Unknown week_start: {self.week_start}")

    @property
    def week_start_index(self) -> int:
        """``date.weekday()`` value of the first day of the week."""
        return WEEKDAYS.index(self.week_start)

    @classmethod
    def from_config(cls, config: Config) -> AnalyticsConfig:
        return cls(
            heatmap_days=int(config.get("analytics.heatmap_days", 90)),
            emotion_top_n=int(config.get("analytics.emotion_top_n", 10)),
            week_start=str(config.get("analytics.week_start", "sunday")),
        )

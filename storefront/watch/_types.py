"""
Watch types: payment statuses, watcher states, polling policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Status: what the backend reports
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentStatus(Enum):
    """
    Payment status of an order as reported by the status endpoint.

    CONFIRMED / RECEIVED: settled.
    FAILED / CANCELED / OVERDUE: terminal failures.
    PENDING / UNKNOWN: keep waiting.
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    RECEIVED = "RECEIVED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    OVERDUE = "OVERDUE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: object) -> PaymentStatus:
        """Lenient parse. Anything unrecognised is UNKNOWN."""
        if not isinstance(raw, str):
            return cls.UNKNOWN
        name = raw.strip().upper()
        if name == "CANCELLED":
            return cls.CANCELED
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_confirmed(self) -> bool:
        return self in (PaymentStatus.CONFIRMED, PaymentStatus.RECEIVED)

    @property
    def is_failed(self) -> bool:
        return self in (PaymentStatus.FAILED, PaymentStatus.CANCELED, PaymentStatus.OVERDUE)

    @property
    def is_terminal(self) -> bool:
        return self.is_confirmed or self.is_failed


# ═══════════════════════════════════════════════════════════════════════════════
# Watch State: watcher lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class WatchState(Enum):
    """
    Watcher lifecycle.

        IDLE → PENDING ─(tick, not settled)→ PENDING
                       ─(tick, confirmed)──→ CONFIRMED (terminal)
                       ─(tick, failed)─────→ FAILED (terminal)
                       ─(stop)─────────────→ STOPPED (terminal, no callback)
    """

    IDLE = auto()
    PENDING = auto()
    CONFIRMED = auto()
    FAILED = auto()
    STOPPED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (WatchState.CONFIRMED, WatchState.FAILED, WatchState.STOPPED)


# ═══════════════════════════════════════════════════════════════════════════════
# Watch Policy
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class WatchPolicy:
    """
    Polling configuration.

    Example:
        policy = WatchPolicy().with_interval(seconds=5).with_request_timeout(seconds=10)

    interval: delay before every tick, including the first.
    request_timeout: per-poll budget; a poll that exceeds it is inconclusive.
    """

    interval: float = 5.0
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError(f"WatchPolicy.interval must be > 0, got {self.interval}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError(f"WatchPolicy.request_timeout must be > 0, got {self.request_timeout}")

    def with_interval(self, *, seconds: float) -> WatchPolicy:
        return WatchPolicy(interval=seconds, request_timeout=self.request_timeout)

    def with_request_timeout(self, *, seconds: float | None) -> WatchPolicy:
        return WatchPolicy(interval=self.interval, request_timeout=seconds)


__all__ = ("PaymentStatus", "WatchState", "WatchPolicy")

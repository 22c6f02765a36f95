"""Poller metrics: fetch/scoring latency, batch sizes, failures, tiers.

Thread-safe counters that accumulate during runtime and are read by the
stats line and the API.
"""

import time
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class PassMetrics:
    """Totals over all completed fetch+score passes."""

    total_runs: int = 0
    total_fetch_ms: float = 0.0
    total_score_ms: float = 0.0
    max_fetch_ms: float = 0.0
    last_batch_size: int = 0
    last_tiers: dict[str, int] = field(default_factory=dict)

    @property
    def avg_fetch_ms(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.total_fetch_ms / self.total_runs

    @property
    def avg_score_ms(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.total_score_ms / self.total_runs


class PollerMetrics:
    """Metrics accumulator for the leaderboard poller."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._passes = PassMetrics()
        self._feed_errors: dict[str, int] = {}
        self._stale_dropped = 0
        self._start_time: float = time.monotonic()

    def record_pass(
        self,
        fetch_ms: float,
        score_ms: float,
        batch_size: int,
        tiers: dict[str, int] | None = None,
    ) -> None:
        with self._lock:
            p = self._passes
            p.total_runs += 1
            p.total_fetch_ms += fetch_ms
            p.total_score_ms += score_ms
            if fetch_ms > p.max_fetch_ms:
                p.max_fetch_ms = fetch_ms
            p.last_batch_size = batch_size
            p.last_tiers = dict(tiers or {})

    def record_feed_error(self, kind: str) -> None:
        with self._lock:
            self._feed_errors[kind] = self._feed_errors.get(kind, 0) + 1

    def record_stale(self) -> None:
        """A pass finished after a newer one and its result was dropped."""
        with self._lock:
            self._stale_dropped += 1

    def get_summary(self) -> dict:
        with self._lock:
            uptime = time.monotonic() - self._start_time
            p = self._passes
            return {
                "uptime_sec": round(uptime),
                "passes": p.total_runs,
                "passes_per_min": round(p.total_runs / max(uptime / 60, 1), 1),
                "avg_fetch_ms": round(p.avg_fetch_ms),
                "max_fetch_ms": round(p.max_fetch_ms),
                "avg_score_ms": round(p.avg_score_ms, 2),
                "last_batch_size": p.last_batch_size,
                "last_tiers": dict(p.last_tiers),
                "feed_errors": dict(self._feed_errors),
                "stale_dropped": self._stale_dropped,
            }

    def format_stats_line(self) -> str:
        """One-line summary for the periodic stats log."""
        with self._lock:
            p = self._passes
            errors = sum(self._feed_errors.values())
            tiers = " ".join(f"{k}={v}" for k, v in p.last_tiers.items())
            return (
                f"passes={p.total_runs} batch={p.last_batch_size} "
                f"avg_fetch={p.avg_fetch_ms:.0f}ms "
                f"errors={errors} stale={self._stale_dropped}"
                + (f" {tiers}" if tiers else "")
            )

"""Leaderboard poller: fetch the latest curves, score, rank, publish.

Runs parallel async tasks:
1. Polling loop: Goldsky fetch every ``poll_interval_sec``, then
   score_curves + rank_curves, then publish into LeaderboardState
2. Stats reporter: periodic one-line metrics log
3. Dashboard API (optional): serves the published batch

Each pass takes a sequence number before fetching. If an older pass
finishes after a newer one has already published, its batch is dropped.
"""

import asyncio
import time
from dataclasses import dataclass

from loguru import logger

from config.settings import settings
from src.api.metrics_registry import registry
from src.models.curve import ScoredCurve, SortMode
from src.parsers.goldsky.client import GoldskyClient
from src.parsers.goldsky.exceptions import GoldskyError, GoldskyRateLimitError
from src.parsers.ipfs.cache import ImageCache
from src.parsers.ipfs.client import ImageResolver
from src.parsers.leaderboard import tier_counts
from src.parsers.metrics import PollerMetrics
from src.parsers.rate_limiter import RateLimiter
from src.parsers.scoring import rank_curves, score_curves
from src.utils.logger import stats_logger


@dataclass(frozen=True)
class PublishedBatch:
    seq: int
    scored_at: float  # unix seconds used as "now" for scoring
    curves: tuple[ScoredCurve, ...]  # ranked by score


class LeaderboardState:
    """Latest ranked batch, shared by the poller and the API.

    ``publish`` has no awaits, so within one event loop the swap is atomic.
    """

    def __init__(self) -> None:
        self._next_seq = 0
        self._batch: PublishedBatch | None = None

    def next_seq(self) -> int:
        self._next_seq += 1
        return self._next_seq

    @property
    def latest(self) -> PublishedBatch | None:
        return self._batch

    @property
    def last_seq(self) -> int:
        return self._batch.seq if self._batch else 0

    def publish(self, seq: int, curves: list[ScoredCurve], scored_at: float) -> bool:
        """Replace the batch unless a newer sequence already published."""
        if seq <= self.last_seq:
            return False
        self._batch = PublishedBatch(seq=seq, scored_at=scored_at, curves=tuple(curves))
        return True


async def poll_once(
    client: GoldskyClient,
    state: LeaderboardState,
    metrics: PollerMetrics,
    *,
    page_size: int = 50,
    now: float | None = None,
) -> bool:
    """One fetch+score+publish pass. Returns True if a batch was published.

    Feed failures keep the previous batch; the scorer isn't called.
    """
    seq = state.next_seq()
    started = time.perf_counter()
    try:
        curves = await client.fetch_curves(first=page_size)
    except GoldskyRateLimitError:
        metrics.record_feed_error("rate_limited")
        logger.warning(f"[POLLER] #{seq} Goldsky rate limited, keeping previous batch")
        return False
    except GoldskyError as e:
        metrics.record_feed_error("api")
        logger.warning(f"[POLLER] #{seq} Goldsky fetch failed: {e}")
        return False
    fetch_ms = (time.perf_counter() - started) * 1000

    scored_at = now if now is not None else time.time()
    score_started = time.perf_counter()
    ranked = rank_curves(score_curves(curves, now=scored_at), SortMode.SCORE)
    score_ms = (time.perf_counter() - score_started) * 1000

    metrics.record_pass(fetch_ms, score_ms, len(ranked), tier_counts(ranked))
    if not state.publish(seq, ranked, scored_at):
        metrics.record_stale()
        logger.debug(f"[POLLER] #{seq} superseded by #{state.last_seq}, dropped")
        return False

    top = ranked[0].symbol if ranked else "-"
    logger.debug(f"[POLLER] #{seq} published {len(ranked)} curves (top={top}, fetch={fetch_ms:.0f}ms)")
    return True


async def _polling_loop(
    client: GoldskyClient,
    state: LeaderboardState,
    metrics: PollerMetrics,
) -> None:
    """Poll Goldsky on a fixed interval. Passes may overlap if one is slow."""
    inflight: set[asyncio.Task] = set()
    try:
        while True:
            task = asyncio.create_task(
                poll_once(client, state, metrics, page_size=settings.goldsky_page_size)
            )
            inflight.add(task)
            task.add_done_callback(inflight.discard)
            await asyncio.sleep(settings.poll_interval_sec)
    finally:
        # Passes still running must not outlive the client they share
        for task in list(inflight):
            task.cancel()
        await asyncio.gather(*inflight, return_exceptions=True)


async def _stats_reporter(metrics: PollerMetrics, state: LeaderboardState) -> None:
    """Log poller stats every 60 seconds."""
    while True:
        await asyncio.sleep(60)
        stats_logger().info(f"[STATS] seq={state.last_seq} | {metrics.format_stats_line()}")


async def run_worker() -> None:
    """Entry point: start the poller, stats reporter and API."""
    goldsky = GoldskyClient(
        endpoint=settings.goldsky_endpoint,
        rate_limiter=RateLimiter(settings.goldsky_max_rps),
        timeout=settings.goldsky_timeout_sec,
    )
    image_resolver = ImageResolver(
        gateways=settings.ipfs_gateway_list,
        cache=ImageCache(
            ttl_sec=settings.image_cache_ttl_sec,
            max_size=settings.image_cache_max_size,
        ),
        timeout=settings.ipfs_timeout_sec,
    )
    state = LeaderboardState()
    metrics = PollerMetrics()

    registry.state = state
    registry.poller_metrics = metrics
    registry.image_resolver = image_resolver

    tasks = [
        asyncio.create_task(_polling_loop(goldsky, state, metrics), name="poller"),
        asyncio.create_task(_stats_reporter(metrics, state), name="stats"),
    ]
    logger.info(
        f"Poller started: every {settings.poll_interval_sec}s, "
        f"{settings.goldsky_page_size} curves per page"
    )

    if settings.api_enabled:
        from src.api.server import run_dashboard_server

        tasks.append(asyncio.create_task(run_dashboard_server(), name="api"))

    try:
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()
        await goldsky.close()
        await image_resolver.close()

import asyncio

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.curve import Curve
from src.parsers.goldsky.exceptions import GoldskyApiError, GoldskyRateLimitError
from src.parsers.goldsky.models import LATEST_CURVES_QUERY, CurvesResponse
from src.parsers.rate_limiter import RateLimiter

MAX_RETRIES = 3
RETRY_DELAYS = [1.0, 2.0, 4.0]


class GoldskyClient:
    """Async GraphQL client for the pump-charts subgraph on Goldsky (no auth)."""

    def __init__(
        self,
        endpoint: str,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 2.0,
        timeout: float = 10.0,
    ) -> None:
        self._endpoint = endpoint
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)

    async def _post_with_retry(self, payload: dict) -> httpx.Response:
        """POST with retry on 429 and transport errors (timeouts, resets, refused)."""
        for attempt in range(MAX_RETRIES):
            await self._rate_limiter.acquire()
            try:
                response = await self._client.post(self._endpoint, json=payload)
            except httpx.RequestError as e:
                if attempt < MAX_RETRIES - 1:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[GOLDSKY] {type(e).__name__}, retrying in {delay}s")
                    await asyncio.sleep(delay)
                    continue
                raise GoldskyApiError(f"{type(e).__name__}: {e}") from e

            if response.status_code == 429:
                if attempt == MAX_RETRIES - 1:
                    raise GoldskyRateLimitError("rate limited after retries")
                delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                retry_after = response.headers.get("Retry-After")
                if retry_after:
                    try:
                        delay = max(float(retry_after), delay)
                    except ValueError:
                        pass
                logger.debug(f"[GOLDSKY] 429 rate limited, retrying in {delay}s")
                await asyncio.sleep(delay)
                continue

            if response.status_code != 200:
                raise GoldskyApiError(f"HTTP {response.status_code}")
            return response

        raise GoldskyApiError("retries exhausted")

    async def fetch_curves(self, first: int = 50) -> list[Curve]:
        """Latest ``first`` curves, newest first.

        Records that don't validate are logged and dropped; the rest of the
        page is still returned.
        """
        response = await self._post_with_retry(
            {"query": LATEST_CURVES_QUERY, "variables": {"first": first}}
        )
        try:
            body = CurvesResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GoldskyApiError(f"unexpected response shape: {e}") from e

        if body.errors:
            raise GoldskyApiError("; ".join(err.message for err in body.errors))
        if body.data is None:
            raise GoldskyApiError("response has no data")

        curves: list[Curve] = []
        for raw in body.data.curves:
            try:
                curves.append(Curve.model_validate(raw))
            except ValidationError as e:
                curve_id = raw.get("id", "?") if isinstance(raw, dict) else "?"
                logger.warning(f"[GOLDSKY] Skipping malformed curve {curve_id}: {e.error_count()} errors")
        return curves

    async def close(self) -> None:
        await self._client.aclose()

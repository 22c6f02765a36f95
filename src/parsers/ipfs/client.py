"""Token image resolution from IPFS metadata URIs with gateway fallback.

Curve ``uri`` usually points at a metadata JSON (``ipfs://<cid>``) whose
``image`` field is another IPFS URI. Gateways are tried in order; the image
URL is built on the same gateway that served the metadata.
"""

import asyncio
import json

import httpx
from loguru import logger

from src.parsers.ipfs.cache import ImageCache

IPFS_SCHEME = "ipfs://"
IMAGE_KEYS = ("image", "imageUrl", "img")


def get_cid(uri: str) -> str:
    if uri.startswith(IPFS_SCHEME):
        return uri[len(IPFS_SCHEME):]
    return uri


def ipfs_to_http(uri: str, gateway: str) -> str:
    if uri.startswith(("https://", "http://")):
        return uri
    return gateway + get_cid(uri)


class ImageResolver:
    """Resolves curve metadata URIs to image URLs.

    Concurrent calls for the same URI share one in-flight lookup. Only
    successful resolutions are cached, so a URI that failed on every gateway
    is retried next time.
    """

    def __init__(
        self,
        gateways: list[str],
        cache: ImageCache,
        timeout: float = 4.0,
    ) -> None:
        if not gateways:
            raise ValueError("at least one IPFS gateway is required")
        self._gateways = gateways
        self._cache = cache
        self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._pending: dict[str, asyncio.Task[str | None]] = {}

    async def resolve(self, uri: str) -> str | None:
        if not uri:
            return None
        if uri.startswith(("https://", "http://")):
            return uri

        cached = self._cache.get(uri)
        if cached is not None:
            return cached

        task = self._pending.get(uri)
        if task is None:
            task = asyncio.create_task(self._resolve_uncached(uri))
            self._pending[uri] = task
            task.add_done_callback(lambda _t: self._pending.pop(uri, None))
        return await asyncio.shield(task)

    async def _resolve_uncached(self, uri: str) -> str | None:
        url = await self._resolve_from_metadata(uri)
        if url:
            self._cache.set(uri, url)
        else:
            logger.debug(f"[IPFS] No gateway could resolve {uri[:60]}")
        return url

    async def _resolve_from_metadata(self, uri: str) -> str | None:
        cid = get_cid(uri)
        for gateway in self._gateways:
            try:
                resp = await self._client.get(gateway + cid)
            except httpx.HTTPError as e:
                logger.debug(f"[IPFS] {gateway} failed for {cid[:16]}: {type(e).__name__}")
                continue
            if resp.status_code != 200:
                continue

            try:
                metadata = json.loads(resp.text)
            except ValueError:
                # Not JSON: the URI points straight at the image
                return gateway + cid

            if not isinstance(metadata, dict):
                return gateway + cid
            for key in IMAGE_KEYS:
                image_uri = metadata.get(key)
                if isinstance(image_uri, str) and image_uri:
                    return ipfs_to_http(image_uri, gateway)
            logger.debug(f"[IPFS] Metadata at {gateway} has no image field")
        return None

    async def close(self) -> None:
        for task in list(self._pending.values()):
            task.cancel()
        await self._client.aclose()

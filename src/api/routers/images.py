"""Token image resolution (IPFS metadata -> image URL)."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from config.settings import settings
from src.api.app import limiter
from src.api.dependencies import get_image_resolver
from src.parsers.ipfs.client import ImageResolver

router = APIRouter(prefix="/api/v1", tags=["images"])


@router.get("/image")
@limiter.limit(settings.api_image_rate_limit)
async def resolve_image(
    request: Request,
    uri: str = Query(..., min_length=1, max_length=512),
    resolver: ImageResolver = Depends(get_image_resolver),
) -> dict[str, Any]:
    url = await resolver.resolve(uri)
    if url is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return {"uri": uri, "image_url": url}

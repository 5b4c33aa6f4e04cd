import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stremsrc.core.logger import logger
from stremsrc.core.models import settings
from stremsrc.extractor import pipeline
from stremsrc.utils.formatting import format_streams
from stremsrc.utils.network import NO_CACHE_HEADERS
from stremsrc.utils.parsing import MEDIA_TYPES

streams = APIRouter()


@streams.get(
    "/stream/{media_type}/{media_id}.json",
    tags=["Stremio"],
    summary="Stream Provider",
    description="Resolves direct streams for a movie or series episode.",
)
async def stream(media_type: str, media_id: str):
    if media_type not in MEDIA_TYPES:
        return {"streams": []}

    try:
        results = await asyncio.wait_for(
            pipeline.resolve_streams(media_id, media_type),
            timeout=settings.REQUEST_HARD_TIMEOUT,
        )
    except asyncio.TimeoutError:
        logger.error(
            f"Hard timeout of {settings.REQUEST_HARD_TIMEOUT}s exceeded for {media_type} {media_id}"
        )
        return JSONResponse(
            {"detail": "Gateway Timeout"}, status_code=504, headers=NO_CACHE_HEADERS
        )
    except Exception as e:
        logger.exception(f"Stream handler failed for {media_type} {media_id}: {e}")
        return {"streams": []}

    return {"streams": format_streams(results)}

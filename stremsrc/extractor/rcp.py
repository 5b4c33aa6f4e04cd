from typing import Optional

import aiohttp

from stremsrc.core.exceptions import HTTPStatusError
from stremsrc.core.logger import logger
from stremsrc.core.models import settings
from stremsrc.extractor.models import RcpMetadata, RcpResult
from stremsrc.utils.headers import get_randomized_headers
from stremsrc.utils.network import fetch_with_retry
from stremsrc.utils.parsing import FILE_PATTERN, SRC_PATTERN, extract_pattern

PRORCP_PREFIX = "/prorcp/"


def rcp_grabber(page_text: str) -> Optional[RcpResult]:
    """Pull the ``src: '...'`` reference out of an rcp page's inline script."""
    try:
        data = extract_pattern(page_text, SRC_PATTERN)
        if data is None:
            return None
        # No image is exposed by the rcp page yet.
        return RcpResult(metadata=RcpMetadata(image=""), data=data)
    except Exception as e:
        logger.debug(f"rcp page could not be parsed: {e}")
        return None


def prorcp_token(rcp_result: Optional[RcpResult]) -> Optional[str]:
    if not rcp_result or not rcp_result.data.startswith(PRORCP_PREFIX):
        return None
    return rcp_result.data.replace(PRORCP_PREFIX, "", 1) or None


async def prorcp_handler(
    session: aiohttp.ClientSession, base_domain: str, token: str
) -> Optional[str]:
    """Resolve a prorcp token to the literal stream URL on the player page."""
    if not token:
        return None

    url = f"{base_domain}/prorcp/{token}"
    try:
        page = await fetch_with_retry(
            session,
            url,
            headers=get_randomized_headers(base_domain),
            timeout_ms=settings.PRORCP_TIMEOUT_MS,
            retries=settings.PRORCP_RETRIES,
        )
    except HTTPStatusError as e:
        logger.log("EXTRACTOR", f"Player page unavailable: {e}")
        return None
    except Exception as e:
        logger.error(f"prorcp fetch failed for {url}: {e}")
        return None

    stream_url = extract_pattern(page, FILE_PATTERN)
    if not stream_url:
        logger.log("EXTRACTOR", f"No stream URL found on player page {url}")
    return stream_url

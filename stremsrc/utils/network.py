import asyncio
from typing import Callable, Optional

import aiohttp

from stremsrc.core.exceptions import (FetchError, HTTPClientError,
                                      HTTPServerError, TransportError)
from stremsrc.core.logger import logger
from stremsrc.core.models import settings

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def is_retryable(error: FetchError):
    return error.retryable


async def fetch_with_retry(
    session: aiohttp.ClientSession,
    url: str,
    headers: Optional[dict] = None,
    timeout_ms: int = None,
    retries: int = None,
    backoff_ms: int = None,
    should_retry: Callable[[FetchError], bool] = is_retryable,
):
    """
    GET ``url`` and return the body text of the first 2xx response.

    Every attempt gets its own ``timeout_ms`` budget; aiohttp aborts the
    connection when it runs out. ``retries`` extra attempts follow the first one,
    separated by ``backoff_ms * attempt``. 4xx responses fail immediately.
    Raises the last ``FetchError`` once attempts are exhausted.
    """
    timeout_ms = settings.EXTRACTOR_TIMEOUT_MS if timeout_ms is None else timeout_ms
    retries = settings.EXTRACTOR_RETRIES if retries is None else max(0, retries)
    backoff_ms = settings.EXTRACTOR_BACKOFF_MS if backoff_ms is None else backoff_ms
    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)

    attempt = 0
    while True:
        attempt += 1
        try:
            async with session.get(url, headers=headers, timeout=timeout) as response:
                if 200 <= response.status < 300:
                    return await response.text(errors="replace")
                if 400 <= response.status < 500:
                    raise HTTPClientError(url, response.status)
                raise HTTPServerError(url, response.status)
        except FetchError as e:
            last_error = e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_error = TransportError(url, e)

        if attempt > retries or not should_retry(last_error):
            raise last_error

        delay = backoff_ms * attempt / 1000
        logger.debug(
            f"Attempt {attempt}/{retries + 1} for {url} failed ({last_error.message}), retrying in {delay:.2f}s"
        )
        await asyncio.sleep(delay)

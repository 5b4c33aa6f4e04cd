from typing import List, Optional

import aiohttp

from stremsrc.core.logger import log_extractor_error, logger
from stremsrc.core.models import settings
from stremsrc.extractor.embed import servers_load
from stremsrc.extractor.hls import fetch_and_parse_hls
from stremsrc.extractor.models import RcpResult, ServerEntry, StreamResult
from stremsrc.extractor.rcp import prorcp_handler, prorcp_token, rcp_grabber
from stremsrc.utils.concurrency import map_with_concurrency_limit
from stremsrc.utils.headers import get_randomized_headers
from stremsrc.utils.http_client import http_client_manager
from stremsrc.utils.network import fetch_with_retry
from stremsrc.utils.parsing import build_embed_url


async def fetch_rcp(
    session: aiohttp.ClientSession,
    base_domain: str,
    server: ServerEntry,
    media_id: str,
) -> Optional[RcpResult]:
    if not server or not server.data_hash:
        return None

    url = f"{base_domain}/rcp/{server.data_hash}"
    try:
        page = await fetch_with_retry(
            session,
            url,
            headers=get_randomized_headers(base_domain),
            timeout_ms=settings.EXTRACTOR_TIMEOUT_MS,
            retries=settings.EXTRACTOR_RETRIES,
            backoff_ms=settings.EXTRACTOR_BACKOFF_MS,
        )
    except Exception as e:
        log_extractor_error(f"rcp fetch ({server.name})", url, media_id, e)
        return None

    return rcp_grabber(page)


async def get_stream_content(
    media_id: str, media_type: str, session: aiohttp.ClientSession = None
) -> List[StreamResult]:
    url = build_embed_url(media_id, media_type)
    if session is None:
        session = await http_client_manager.get_session()

    try:
        embed_page = await fetch_with_retry(
            session,
            url,
            headers=get_randomized_headers(),
            timeout_ms=settings.EXTRACTOR_TIMEOUT_MS,
            retries=settings.EXTRACTOR_RETRIES,
            backoff_ms=settings.EXTRACTOR_BACKOFF_MS,
        )
    except Exception as e:
        log_extractor_error("embed fetch", url, media_id, e)
        return []

    embed = servers_load(embed_page)
    if not embed.servers:
        logger.log("EXTRACTOR", f"No servers found for {media_id} on {url}")
        return []

    base_domain = embed.base_domain
    logger.log(
        "EXTRACTOR",
        f"Found {len(embed.servers)} servers for {media_id} ({embed.title or 'untitled'}) on {base_domain}",
    )

    rcp_results = await map_with_concurrency_limit(
        embed.servers,
        lambda server: fetch_rcp(session, base_domain, server, media_id),
        settings.RCP_CONCURRENCY_LIMIT,
    )

    results = []
    for rcp_result in rcp_results:
        if not rcp_result:
            continue

        token = prorcp_token(rcp_result)
        if not token:
            logger.debug(f"Skipping non-prorcp source {rcp_result.data!r}")
            continue

        try:
            stream_url = await prorcp_handler(session, base_domain, token)
            if not stream_url:
                continue

            hls_data = await fetch_and_parse_hls(
                session, stream_url, headers=get_randomized_headers(base_domain)
            )
            results.append(
                StreamResult(
                    name=embed.title,
                    image=rcp_result.metadata.image,
                    media_id=media_id,
                    stream=stream_url,
                    referer=base_domain,
                    hls_data=hls_data,
                )
            )
        except Exception as e:
            log_extractor_error("stream resolution", base_domain, media_id, e)

    logger.log("STREAM", f"Resolved {len(results)} streams for {media_id}")
    return results


async def resolve_streams(
    media_id: str, media_type: str, session: aiohttp.ClientSession = None
) -> List[StreamResult]:
    """
    Entry point for the serving layer. Expected upstream failures give an
    empty list; only invalid arguments raise.
    """
    if not media_id:
        raise ValueError("media_id is required")

    # Raises ValueError for unsupported media types before any request goes out.
    build_embed_url(media_id, media_type)
    return await get_stream_content(media_id, media_type, session)

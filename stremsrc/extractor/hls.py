from typing import Optional, Tuple
from urllib.parse import urljoin

import aiohttp
import m3u8

from stremsrc.core.exceptions import ParseError
from stremsrc.core.logger import logger
from stremsrc.core.models import settings
from stremsrc.extractor.models import HLSManifest, QualityVariant
from stremsrc.utils.network import fetch_with_retry

MASTER_PLAYLIST_MARKER = "#EXT-X-STREAM-INF"


def quality_label(resolution: Optional[Tuple[int, int]], bandwidth: int):
    if resolution:
        label = f"{resolution[0]}x{resolution[1]}"
        height = resolution[1] or 0
        if height >= 1080:
            return f"{label} (1080p)"
        if height >= 720:
            return f"{label} (720p)"
        if height >= 480:
            return f"{label} (480p)"
        return label

    if bandwidth > 5_000_000:
        return "High Quality"
    if bandwidth > 2_000_000:
        return "Medium Quality"
    return "Low Quality"


def parse_hls_master(content: str, base_url: str) -> Optional[HLSManifest]:
    """
    Parse a master playlist into its variants, highest bandwidth first.

    Variant URIs are resolved against ``base_url``. Any failure discards the whole
    manifest rather than returning a partial list.
    """
    try:
        playlist = m3u8.loads(content)

        variants = sorted(
            playlist.playlists,
            key=lambda p: p.stream_info.bandwidth or 0,
            reverse=True,
        )

        qualities = []
        for variant in variants:
            if not variant.uri:
                raise ParseError("Variant stream without URI")

            info = variant.stream_info
            bandwidth = int(info.bandwidth or 0)
            resolution = info.resolution
            qualities.append(
                QualityVariant(
                    resolution=f"{resolution[0]}x{resolution[1]}" if resolution else None,
                    bandwidth=bandwidth,
                    codecs=info.codecs,
                    frame_rate=info.frame_rate,
                    url=variant.uri
                    if variant.uri.startswith("http")
                    else urljoin(base_url, variant.uri),
                    title=quality_label(resolution, bandwidth),
                )
            )

        return HLSManifest(master_url=base_url, qualities=qualities)
    except Exception as e:
        logger.error(f"Failed to parse HLS master playlist {base_url}: {e}")
        return None


async def fetch_and_parse_hls(
    session: aiohttp.ClientSession, url: str, headers: dict = None
) -> Optional[HLSManifest]:
    try:
        content = await fetch_with_retry(
            session,
            url,
            headers=headers,
            timeout_ms=settings.HLS_TIMEOUT_MS,
            retries=settings.HLS_RETRIES,
            backoff_ms=settings.HLS_BACKOFF_MS,
        )
    except Exception as e:
        logger.warning(f"Failed to fetch HLS manifest {url}: {e}")
        return None

    if not content or MASTER_PLAYLIST_MARKER not in content:
        return None

    return parse_hls_master(content, url)

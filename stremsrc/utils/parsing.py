import re
from typing import Optional, Union

from stremsrc.core.models import settings
from stremsrc.extractor.models import MediaRequest

SRC_PATTERN = re.compile(r"src:\s*'([^']*)'", re.MULTILINE)
FILE_PATTERN = re.compile(r"file:\s*'([^']*)'", re.MULTILINE)

MEDIA_TYPES = ("movie", "series")


def extract_pattern(text: str, pattern: Union[str, re.Pattern]) -> Optional[str]:
    """First capture group of ``pattern`` in ``text``, or None."""
    if not text:
        return None

    match = re.search(pattern, text)
    if not match or not match.group(1):
        return None
    return match.group(1)


def parse_media_id(media_type: str, media_id: str):
    if media_type not in MEDIA_TYPES:
        raise ValueError(f"Unsupported media type: {media_type!r}")

    if media_type == "movie":
        return MediaRequest(media_type=media_type, title_id=media_id)

    # Missing parts stay empty and produce a path the upstream rejects.
    info = str(media_id or "").split(":")
    return MediaRequest(
        media_type=media_type,
        title_id=info[0],
        season=info[1] if len(info) > 1 else "",
        episode=info[2] if len(info) > 2 else "",
    )


def build_embed_url(media_id: str, media_type: str, source_url: str = None):
    source_url = source_url or settings.SOURCE_URL
    request = parse_media_id(media_type, media_id)

    if request.media_type == "movie":
        return f"{source_url}/movie/{request.title_id}"
    return f"{source_url}/tv/{request.title_id}/{request.season}-{request.episode}"

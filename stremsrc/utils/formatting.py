from typing import List

from stremsrc.extractor.models import StreamResult


def _stream_entry(title: str, url: str, referer: str):
    behavior_hints = {"notWebReady": True}
    if referer:
        behavior_hints["proxyHeaders"] = {"request": {"Referer": f"{referer}/"}}
    return {"title": title, "url": url, "behaviorHints": behavior_hints}


def format_streams(results: List[StreamResult]):
    streams = []
    for result in results:
        if not result or not result.stream:
            continue

        name = result.name or "Unknown"
        qualities = result.hls_data.qualities if result.hls_data else []
        if not qualities:
            streams.append(_stream_entry(name, result.stream, result.referer))
            continue

        streams.append(
            _stream_entry(f"{name} - Auto Quality", result.stream, result.referer)
        )
        for quality in qualities:
            if not quality.url:
                continue
            streams.append(
                _stream_entry(
                    f"{name} - {quality.title or 'Quality'}",
                    quality.url,
                    result.referer,
                )
            )

    return streams

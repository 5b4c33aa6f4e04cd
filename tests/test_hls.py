import pytest

from stremsrc.extractor.hls import (fetch_and_parse_hls, parse_hls_master,
                                    quality_label)

from conftest import FakeResponse

MASTER_URL = "https://cdn.example/hls/abc/master.m3u8"

BANDWIDTH_ONLY = """#EXTM3U
#EXT-X-STREAM-INF:BANDWIDTH=1500000
low/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=6000000
https://cdn2.example/high/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=3000000
/abs/medium/index.m3u8
"""

WITH_RESOLUTION = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-STREAM-INF:BANDWIDTH=800000,RESOLUTION=640x360,CODECS="avc1.4d401e,mp4a.40.2"
360/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=5500000,RESOLUTION=1920x1080,CODECS="avc1.640028,mp4a.40.2",FRAME-RATE=23.976
1080/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=2800000,RESOLUTION=1280x720,CODECS="avc1.4d401f,mp4a.40.2"
720/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=1400000,RESOLUTION=854x480,CODECS="avc1.4d401f,mp4a.40.2"
480/index.m3u8
"""


@pytest.mark.parametrize(
    "resolution, bandwidth, label",
    [
        ((1920, 1080), 0, "1920x1080 (1080p)"),
        ((3840, 2160), 0, "3840x2160 (1080p)"),
        ((1280, 720), 0, "1280x720 (720p)"),
        ((854, 480), 0, "854x480 (480p)"),
        ((640, 360), 9_000_000, "640x360"),
        (None, 5_000_001, "High Quality"),
        (None, 5_000_000, "Medium Quality"),
        (None, 2_000_001, "Medium Quality"),
        (None, 2_000_000, "Low Quality"),
        (None, 0, "Low Quality"),
    ],
)
def test_quality_label(resolution, bandwidth, label):
    assert quality_label(resolution, bandwidth) == label


def test_variants_sorted_by_descending_bandwidth():
    manifest = parse_hls_master(BANDWIDTH_ONLY, MASTER_URL)

    assert manifest.master_url == MASTER_URL
    assert [q.bandwidth for q in manifest.qualities] == [6000000, 3000000, 1500000]
    assert [q.title for q in manifest.qualities] == [
        "High Quality",
        "Medium Quality",
        "Low Quality",
    ]


def test_variant_uris_resolved_against_master():
    urls = [q.url for q in parse_hls_master(BANDWIDTH_ONLY, MASTER_URL).qualities]

    assert urls == [
        "https://cdn2.example/high/index.m3u8",
        "https://cdn.example/abs/medium/index.m3u8",
        "https://cdn.example/hls/abc/low/index.m3u8",
    ]


def test_resolution_codecs_and_frame_rate():
    qualities = parse_hls_master(WITH_RESOLUTION, MASTER_URL).qualities

    assert [q.title for q in qualities] == [
        "1920x1080 (1080p)",
        "1280x720 (720p)",
        "854x480 (480p)",
        "640x360",
    ]
    best = qualities[0]
    assert best.resolution == "1920x1080"
    assert best.codecs == "avc1.640028,mp4a.40.2"
    assert best.frame_rate == pytest.approx(23.976)
    assert qualities[-1].frame_rate is None


def test_parsing_is_repeatable():
    first = parse_hls_master(WITH_RESOLUTION, MASTER_URL)
    second = parse_hls_master(WITH_RESOLUTION, MASTER_URL)

    assert first == second
    bandwidths = [q.bandwidth for q in first.qualities]
    assert bandwidths == sorted(bandwidths, reverse=True)
    assert len(set(bandwidths)) == len(bandwidths)


def test_fetch_and_parse(make_session, run, sleeps):
    session = make_session({MASTER_URL: BANDWIDTH_ONLY})

    manifest = run(fetch_and_parse_hls(session, MASTER_URL))

    assert len(manifest.qualities) == 3
    assert session.calls[0]["timeout"].total == pytest.approx(5.0)


def test_media_playlist_is_rejected(make_session, run, sleeps):
    media_playlist = "#EXTM3U\n#EXT-X-TARGETDURATION:6\n#EXTINF:6.0,\nseg0.ts\n#EXT-X-ENDLIST\n"
    session = make_session({MASTER_URL: media_playlist})

    assert run(fetch_and_parse_hls(session, MASTER_URL)) is None


def test_non_manifest_body_is_rejected(make_session, run, sleeps):
    session = make_session({MASTER_URL: "<html>Access denied</html>"})

    assert run(fetch_and_parse_hls(session, MASTER_URL)) is None


def test_fetch_failure_yields_none_after_one_retry(make_session, run, sleeps):
    session = make_session({MASTER_URL: FakeResponse(502)})

    assert run(fetch_and_parse_hls(session, MASTER_URL)) is None
    assert len(session.calls) == 2
    assert sleeps == [pytest.approx(0.15)]

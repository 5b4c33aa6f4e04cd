from typing import List, Optional

from pydantic import BaseModel


class MediaRequest(BaseModel):
    media_type: str  # "movie" or "series"
    title_id: str  # e.g. "tt1234567"
    season: Optional[str] = None
    episode: Optional[str] = None


class ServerEntry(BaseModel):
    name: str
    data_hash: Optional[str] = None


class EmbedPage(BaseModel):
    servers: List[ServerEntry] = []
    title: str = ""
    base_domain: str


class RcpMetadata(BaseModel):
    image: str = ""


class RcpResult(BaseModel):
    metadata: RcpMetadata = RcpMetadata()
    data: str  # "/prorcp/<token>" or an opaque value that gets skipped


class QualityVariant(BaseModel):
    resolution: Optional[str] = None
    bandwidth: int = 0
    codecs: Optional[str] = None
    frame_rate: Optional[float] = None
    url: str
    title: str


class HLSManifest(BaseModel):
    master_url: str
    qualities: List[QualityVariant] = []


class StreamResult(BaseModel):
    name: str
    image: str = ""
    media_id: str
    stream: str
    referer: str
    hls_data: Optional[HLSManifest] = None

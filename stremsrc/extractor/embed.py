from urllib.parse import urlparse

from bs4 import BeautifulSoup

from stremsrc.core.exceptions import ParseError
from stremsrc.core.logger import logger
from stremsrc.core.models import settings
from stremsrc.extractor.models import EmbedPage, ServerEntry

SERVER_SELECTOR = ".serversList .server"
DEFAULT_PORTS = {"http": 80, "https": 443}


def infer_base_domain(iframe_src: str, default: str):
    """Origin of the player iframe, or ``default`` when it cannot be determined."""
    if not iframe_src:
        return default

    try:
        full = f"https:{iframe_src}" if iframe_src.startswith("//") else iframe_src
        parsed = urlparse(full)
        if not parsed.scheme or not parsed.netloc:
            raise ParseError(f"Not an absolute URL: {iframe_src!r}")
        host = parsed.hostname
        if not host:
            raise ParseError(f"No host in {iframe_src!r}")
        if ":" in host:
            host = f"[{host}]"
        port = parsed.port
        if port and port != DEFAULT_PORTS.get(parsed.scheme):
            host = f"{host}:{port}"
        return f"{parsed.scheme}://{host}"
    except (ValueError, ParseError) as e:
        logger.debug(f"Falling back to {default}, unusable iframe src: {e}")
        return default


def servers_load(html: str, default_base_domain: str = None):
    default_base_domain = default_base_domain or settings.DEFAULT_BASE_DOMAIN

    try:
        soup = BeautifulSoup(html or "", "html.parser")

        title = soup.title.get_text().strip() if soup.title else ""

        iframe = soup.find("iframe")
        iframe_src = iframe.get("src") if iframe else None
        base_domain = infer_base_domain(
            iframe_src if isinstance(iframe_src, str) else "", default_base_domain
        )

        servers = []
        for element in soup.select(SERVER_SELECTOR):
            try:
                data_hash = element.get("data-hash")
                servers.append(
                    ServerEntry(
                        name=element.get_text().strip(),
                        data_hash=data_hash or None,
                    )
                )
            except Exception as e:
                logger.debug(f"Skipping malformed server element: {e}")

        return EmbedPage(servers=servers, title=title, base_domain=base_domain)
    except Exception as e:
        logger.error(f"Failed to parse embed page: {e}")
        return EmbedPage(servers=[], title="", base_domain=default_base_domain)

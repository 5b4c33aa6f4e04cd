class FetchError(Exception):
    """Base exception for upstream fetch failures."""

    retryable = True

    def __init__(self, url: str, message: str = None):
        self.url = url
        self.message = message or f"Request failed for {url}"
        super().__init__(self.message)


class TransportError(FetchError):
    """Raised when the connection, DNS lookup or per-attempt timeout fails."""

    def __init__(self, url: str, cause: BaseException):
        self.cause = cause
        reason = str(cause) or type(cause).__name__
        super().__init__(url, f"Transport error for {url}: {reason}")


class HTTPStatusError(FetchError):
    def __init__(self, url: str, status: int):
        self.status = status
        super().__init__(url, f"HTTP {status} for {url}")


class HTTPClientError(HTTPStatusError):
    """4xx responses. The upstream will not change its mind, so never retried."""

    retryable = False


class HTTPServerError(HTTPStatusError):
    """5xx and any other non-2xx status."""


class ParseError(Exception):
    """Raised when a page or manifest does not have the expected shape."""

"""Errors raised by the wallet API client."""

from typing import Optional


class ApiError(Exception):
    """Base class for wallet service call failures.

    ``detail`` is the text surfaced to the user: the raw response body for
    HTTP failures, the transport message otherwise.
    """

    def __init__(self, detail: str, endpoint: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.endpoint = endpoint


class TransportError(ApiError):
    """The wallet service could not be reached."""

    pass


class HttpError(ApiError):
    """The wallet service answered with a non-success status."""

    def __init__(self, status_code: int, body: str, endpoint: Optional[str] = None):
        super().__init__(body.strip() or f"HTTP {status_code}", endpoint)
        self.status_code = status_code
        self.body = body


class ShapeError(ApiError):
    """The response was valid JSON but not the expected shape."""

    pass

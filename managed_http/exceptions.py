# Request layer exceptions

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from managed_http.core.response import TransportResponse


class TransportError(Exception):
    """Base exception for failures surfaced by the transport client."""

    def __init__(self, *args, url: Optional[str] = None, method: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(*args)
        self.url = url
        self.method = method
        # Use the first arg as detail if detail kwarg is not provided and args exist
        self.detail = detail or (args[0] if args else None)


class TransportTimeoutError(TransportError):
    """Exception raised when a request exceeds its deadline."""

    pass


class RequestCancelledError(TransportError):
    """Exception raised when a request was deliberately cancelled through its cancel handle."""

    def __init__(
        self,
        *args,
        url: Optional[str] = None,
        method: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(*args, url=url, method=method, detail=reason)
        self.reason = reason


class StatusError(TransportError):
    """Exception raised when the server answers with a non-2xx status.

    ``detail`` holds the translated, human-readable message; the raw status code and
    response stay available on ``status_code`` and ``response``.
    """

    def __init__(
        self,
        *args,
        status_code: int,
        response: Optional["TransportResponse"] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(*args, url=url, method=method, detail=detail)
        self.status_code = status_code
        self.response = response

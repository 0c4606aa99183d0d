"""Managed HTTP request layer with interceptors, in-flight tracking and cancellation."""

from .client import RequestClient
from .core.descriptor import HttpMethod, RequestDescriptor
from .core.interceptors import RequestInterceptors
from .core.registry import InFlightRegistry, TrackedRequest
from .core.response import TransportResponse
from .core.status import translate_status
from .core.transport import CancelHandle, HttpxTransport
from .exceptions import RequestCancelledError, StatusError, TransportError, TransportTimeoutError

__all__ = [
    "CancelHandle",
    "HttpMethod",
    "HttpxTransport",
    "InFlightRegistry",
    "RequestCancelledError",
    "RequestClient",
    "RequestDescriptor",
    "RequestInterceptors",
    "StatusError",
    "TrackedRequest",
    "TransportError",
    "TransportResponse",
    "TransportTimeoutError",
    "translate_status",
]

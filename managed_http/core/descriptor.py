from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from managed_http.core.interceptors import RequestInterceptors


class HttpMethod(str, Enum):
    """HTTP methods accepted by the request layer."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


# Methods whose payload travels as query parameters instead of a body.
QUERY_METHODS = frozenset({HttpMethod.GET, HttpMethod.HEAD})


class RequestDescriptor(BaseModel):
    """The fully-specified parameters of one outbound request.

    Descriptors are frozen; interceptors transform them by returning a copy
    (``descriptor.model_copy(update={...})``).
    """

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = Field(default=None)
    method: HttpMethod = Field(default=HttpMethod.GET)
    data: Any = Field(default=None)
    params: Any = Field(default=None)
    headers: Dict[str, str] = Field(default_factory=dict)
    interceptors: Optional[RequestInterceptors] = Field(default=None)
    timeout: Optional[float] = Field(default=None, description="Overrides the client deadline for this call only.")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def is_tracked(self) -> bool:
        """Whether the request is recorded in the in-flight registry (and therefore cancellable)."""
        return bool(self.url)

    def with_payload_mapped(self) -> "RequestDescriptor":
        """Move ``data`` onto the query string for query-style methods.

        For GET and HEAD a present ``data`` replaces ``params``; every other method
        keeps ``data`` as the request body.
        """
        if self.method in QUERY_METHODS and self.data is not None:
            return self.model_copy(update={"params": self.data, "data": None})
        return self

"""Interceptor hooks and their fixed composition order.

Request interceptors run as: built-in pass-through -> instance-level -> per-request.
Response interceptors run (on success only) as: per-request -> instance-level -> built-in
envelope unwrap, so callers never see the transport envelope unless an interceptor
deliberately replaces it.
"""

import inspect
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from managed_http.core.response import TransportResponse

if TYPE_CHECKING:
    from managed_http.core.descriptor import RequestDescriptor


RequestInterceptor: TypeAlias = Callable[["RequestDescriptor"], "RequestDescriptor"]
ResponseInterceptor: TypeAlias = Callable[[Any], Any]
ErrorInterceptor: TypeAlias = Callable[[Exception], Exception]


class RequestInterceptors(BaseModel):
    """A pair of request/response hooks, plus optional error mappers.

    Any hook may be a plain function or a coroutine function. A missing hook acts as
    the identity transform. The error mappers are only honoured at client-instance level.
    """

    model_config = ConfigDict(frozen=True)

    request_interceptor: Optional[Callable[..., Any]] = Field(default=None)
    response_interceptor: Optional[Callable[..., Any]] = Field(default=None)
    request_error_interceptor: Optional[Callable[..., Any]] = Field(default=None)
    response_error_interceptor: Optional[Callable[..., Any]] = Field(default=None)


def identity(value: Any) -> Any:
    return value


def passthrough_request(descriptor: "RequestDescriptor") -> "RequestDescriptor":
    """Built-in request hook; the least specific stage, shared by every request."""
    return descriptor


def unwrap_envelope(result: Any) -> Any:
    """Built-in response hook; strips the transport envelope down to its payload."""
    if isinstance(result, TransportResponse):
        return result.data
    return result


def request_chain(
    instance: Optional[RequestInterceptors], per_request: Optional[RequestInterceptors]
) -> list[RequestInterceptor]:
    """Returns the request hooks in execution order."""
    return [
        passthrough_request,
        (instance and instance.request_interceptor) or identity,
        (per_request and per_request.request_interceptor) or identity,
    ]


def response_chain(
    instance: Optional[RequestInterceptors], per_request: Optional[RequestInterceptors]
) -> list[ResponseInterceptor]:
    """Returns the success-path response hooks in execution order."""
    return [
        (per_request and per_request.response_interceptor) or identity,
        (instance and instance.response_interceptor) or identity,
        unwrap_envelope,
    ]


async def apply_chain(value: Any, chain: Sequence[Callable[[Any], Any]]) -> Any:
    """Feeds ``value`` through each hook in turn, awaiting coroutine hooks."""
    for hook in chain:
        value = hook(value)
        if inspect.isawaitable(value):
            value = await value
    return value


async def map_error(error: Exception, mapper: Optional[Callable[..., Any]]) -> Exception:
    """Applies an error mapper to ``error``; without one the error is returned unchanged."""
    if mapper is None:
        return error
    mapped = mapper(error)
    if inspect.isawaitable(mapped):
        mapped = await mapped
    if not isinstance(mapped, BaseException):
        raise TypeError(f"Error interceptor must return an exception, got {type(mapped).__name__}")
    return mapped

"""Transport client wrapping ``httpx.AsyncClient`` with cancellable calls."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeAlias

import httpx

from managed_http.core.descriptor import RequestDescriptor
from managed_http.core.response import TransportResponse
from managed_http.core.status import translate_status
from managed_http.exceptions import RequestCancelledError, StatusError, TransportError, TransportTimeoutError
from managed_http.settings import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

EventHook: TypeAlias = Callable[[Any], Any]


class CancelHandle:
    """Capability to cancel exactly one transport call.

    The handle is created before the call starts and bound to the task running it once
    the call is issued. Cancelling before binding is remembered and applied on bind.
    """

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url
        self.reason: Optional[str] = None
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Repeated calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason
        if self._task is not None and not self._task.done():
            self._task.cancel(reason)

    def bind(self, task: asyncio.Task) -> None:
        self._task = task
        if self._cancelled:
            task.cancel(self.reason)


class HttpxTransport:
    """Performs network calls for fully-resolved request descriptors.

    Transport-level interceptors are plain httpx ``event_hooks``; they see the
    ``httpx.Request``/``httpx.Response`` objects inside every call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        event_hooks: Optional[Mapping[str, List[EventHook]]] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initializes the transport.

        Args:
            base_url: Address prepended to relative request URLs.
            timeout: Overall deadline, in seconds, for each call, covering connect through
                     the last body byte. Also used as the httpx connect/read/write/pool limit.
            event_hooks: httpx event hooks keyed by "request"/"response".
            client: A pre-built client to use instead of creating one. The transport
                    does not close clients it did not create.
            transport: Optional httpx transport for the created client (e.g. a mock).
        """
        self._timeout = timeout
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url or "",
                timeout=httpx.Timeout(timeout),
                event_hooks={key: list(hooks) for key, hooks in (event_hooks or {}).items()},
                transport=transport,
            )
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def create_cancel_handle(self, url: Optional[str] = None) -> CancelHandle:
        return CancelHandle(url)

    async def send(self, descriptor: RequestDescriptor, cancel_handle: Optional[CancelHandle] = None) -> TransportResponse:
        """Issues the HTTP call described by ``descriptor``.

        Returns:
            The response envelope for a 2xx answer.

        Raises:
            RequestCancelledError: If ``cancel_handle`` was triggered before the call settled.
            StatusError: If the server answered with a non-2xx status.
            TransportTimeoutError: If the deadline was exceeded.
            TransportError: For any other network failure.
        """
        method = descriptor.method.value
        url = descriptor.url or ""
        task = asyncio.ensure_future(self._client.request(method, url, **self._build_kwargs(descriptor)))
        if cancel_handle is not None:
            cancel_handle.bind(task)

        deadline = descriptor.timeout if descriptor.timeout is not None else self._timeout
        try:
            async with asyncio.timeout(deadline):
                try:
                    response = await task
                except asyncio.CancelledError:
                    if cancel_handle is not None and cancel_handle.cancelled and not _outer_task_cancelling():
                        raise _cancelled_error(url, method, cancel_handle) from None
                    # The awaiting task itself was cancelled (or the deadline hit); stop the inner call.
                    task.cancel()
                    raise
        except TimeoutError:
            if cancel_handle is not None and cancel_handle.cancelled:
                raise _cancelled_error(url, method, cancel_handle) from None
            logger.error(f"Deadline of {deadline}s exceeded during {method} {url}")
            raise TransportTimeoutError(
                f"Request to {url} timed out after {deadline}s", url=url, method=method
            ) from None
        except httpx.TimeoutException as e:
            logger.error(f"Timeout error during {method} {url}: {e}")
            raise TransportTimeoutError(f"Request to {url} timed out", url=url, method=method) from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error during {method} {url}: {e}")
            raise TransportError(f"Request to {url} failed: {e}", url=url, method=method) from e

        envelope = TransportResponse.from_httpx(response)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = translate_status(response.status_code)
            raise StatusError(
                detail,
                status_code=response.status_code,
                response=envelope,
                url=url,
                method=method,
                detail=detail,
            ) from e
        return envelope

    def _build_kwargs(self, descriptor: RequestDescriptor) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": descriptor.headers}
        if descriptor.params is not None:
            kwargs["params"] = descriptor.params
        if descriptor.data is not None:
            if isinstance(descriptor.data, (str, bytes)):
                kwargs["content"] = descriptor.data
            else:
                kwargs["json"] = descriptor.data
        if descriptor.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(descriptor.timeout)
        return kwargs

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _cancelled_error(url: str, method: str, cancel_handle: CancelHandle) -> RequestCancelledError:
    return RequestCancelledError(
        f"Request to {url} was cancelled", url=url, method=method, reason=cancel_handle.reason
    )


def _outer_task_cancelling() -> bool:
    current = asyncio.current_task()
    return current is not None and current.cancelling() > 0

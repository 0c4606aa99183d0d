"""The managed request client: dispatch with interceptors, in-flight tracking and cancellation."""

import logging
from typing import Any, Iterable, Optional, Union

from managed_http.core.descriptor import HttpMethod, RequestDescriptor
from managed_http.core.interceptors import (
    RequestInterceptors,
    apply_chain,
    map_error,
    request_chain,
    response_chain,
)
from managed_http.core.logging import log_request_state
from managed_http.core.registry import InFlightRegistry, TrackedRequest
from managed_http.core.transport import CancelHandle, HttpxTransport
from managed_http.exceptions import RequestCancelledError
from managed_http.settings import DEFAULT_TIMEOUT_SECONDS, Settings

logger = logging.getLogger(__name__)


class RequestClient:
    """Wraps a transport client with interceptor composition and cancellable, tracked requests.

    Every instance owns its own in-flight registry, so several clients can coexist
    (for example one per test) without sharing cancellation state.

    Typical usage:
        setup_logging(settings)
        async with RequestClient.from_settings(settings) as client:
            ...

    or, configured directly:
        async with RequestClient(base_url="https://api.example.com") as client:
            forecast = await client.get("/forecast", data={"lat": "1", "lon": "2"})
            client.cancel_one("/forecast")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        interceptors: Optional[RequestInterceptors] = None,
        transport: Optional[HttpxTransport] = None,
    ) -> None:
        """
        Initializes the client.

        Args:
            base_url: Address prepended to relative request URLs.
            timeout: Overall deadline, in seconds, delegated to the transport.
            interceptors: Instance-level hooks applied to every request of this client.
            transport: A pre-built transport; when given, base_url and timeout are ignored.
        """
        self.interceptors = interceptors or RequestInterceptors()
        self.transport = transport or HttpxTransport(base_url=base_url, timeout=timeout)
        self._registry = InFlightRegistry()

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, interceptors: Optional[RequestInterceptors] = None
    ) -> "RequestClient":
        """Build a client configured from environment settings."""
        settings = settings or Settings()
        return cls(
            base_url=settings.get_base_url(),
            timeout=settings.get_timeout_seconds(),
            interceptors=interceptors,
        )

    @property
    def registry(self) -> InFlightRegistry:
        return self._registry

    async def dispatch(self, descriptor: RequestDescriptor) -> Any:
        """Send one request through the interceptor chain, tracking it while in flight.

        Args:
            descriptor: The request to send. A descriptor without a URL is sent untracked
                        and cannot be cancelled by URL.

        Returns:
            The response payload, unwrapped from the transport envelope.

        Raises:
            RequestCancelledError: If the request was cancelled while in flight.
            StatusError: If the server answered with a non-2xx status.
            TransportError: For network, DNS and timeout failures.
            Exception: Whatever a request or response interceptor raises.
        """
        per_request = descriptor.interceptors
        descriptor = descriptor.with_payload_mapped()

        try:
            resolved = await apply_chain(descriptor, request_chain(self.interceptors, per_request))
        except Exception as e:
            logger.error(f"Request interceptor failed for {descriptor.url}: {e}")
            raise await map_error(e, self.interceptors.request_error_interceptor)
        if not isinstance(resolved, RequestDescriptor):
            raise TypeError(f"Request interceptors must return a RequestDescriptor, got {type(resolved).__name__}")

        url = resolved.url
        cancel_handle: Optional[CancelHandle] = None
        entry: Optional[TrackedRequest] = None
        if resolved.is_tracked:
            cancel_handle = self.transport.create_cancel_handle(url)
            entry = self._registry.register(url, cancel_handle.cancel)
            log_request_state(url, "registered", {"method": resolved.method.value, "in_flight": len(self._registry)})

        try:
            logger.info(f"Sending {resolved.method.value} request to {url or '<base url>'}")
            try:
                envelope = await self.transport.send(resolved, cancel_handle)
            except RequestCancelledError as e:
                logger.warning(f"Request to {url} was cancelled")
                raise await map_error(e, self.interceptors.response_error_interceptor)
            except Exception as e:
                logger.error(f"Request to {url} failed: {e}")
                raise await map_error(e, self.interceptors.response_error_interceptor)
            return await apply_chain(envelope, response_chain(self.interceptors, per_request))
        finally:
            if entry is not None:
                self._registry.remove(entry)
                log_request_state(url, "settled", {"in_flight": len(self._registry)})

    async def request(self, **fields: Any) -> Any:
        """Build a descriptor from keyword fields and dispatch it."""
        return await self.dispatch(RequestDescriptor(**fields))

    async def get(self, url: str, **fields: Any) -> Any:
        return await self.request(url=url, method=HttpMethod.GET, **fields)

    async def post(self, url: str, **fields: Any) -> Any:
        return await self.request(url=url, method=HttpMethod.POST, **fields)

    async def put(self, url: str, **fields: Any) -> Any:
        return await self.request(url=url, method=HttpMethod.PUT, **fields)

    async def patch(self, url: str, **fields: Any) -> Any:
        return await self.request(url=url, method=HttpMethod.PATCH, **fields)

    async def delete(self, url: str, **fields: Any) -> Any:
        return await self.request(url=url, method=HttpMethod.DELETE, **fields)

    # --- Cancellation ---

    def cancel_one(self, url: str) -> None:
        """Cancel the oldest in-flight request to ``url``. Unknown URLs are ignored."""
        if self._registry.cancel(url):
            log_request_state(url, "cancel_requested", {})

    def cancel_many(self, urls: Iterable[str]) -> None:
        """Cancel the oldest in-flight request for each URL. Unknown URLs are skipped."""
        for url in urls:
            self.cancel_one(url)

    def cancel_all(self) -> None:
        """Cancel every request currently in flight."""
        cancelled = self._registry.cancel_all()
        if cancelled:
            logger.info(f"Cancelled {cancelled} in-flight request(s)")

    def cancel(self, url: Union[str, Iterable[str]]) -> None:
        """Cancel by a single URL or by a collection of URLs."""
        if isinstance(url, str):
            self.cancel_one(url)
        else:
            self.cancel_many(url)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "RequestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

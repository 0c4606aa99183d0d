from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field


class TransportResponse(BaseModel):
    """The envelope returned by the transport for a completed HTTP call."""

    status_code: int = Field()
    headers: Dict[str, str] = Field(default_factory=dict)
    data: Any = Field(default=None)
    url: str = Field()
    method: str = Field()

    @property
    def is_success(self) -> bool:
        """Check if the status code is in the 2xx range."""
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "TransportResponse":
        """Build an envelope from an httpx response, decoding JSON bodies when declared."""
        return cls(
            status_code=response.status_code,
            headers=dict(response.headers),
            data=_decode_body(response),
            url=str(response.request.url),
            method=response.request.method,
        )


def _decode_body(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            # Declared JSON but not parseable
            return response.text
    return response.text

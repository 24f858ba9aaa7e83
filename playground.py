"""
API Playground: send ad-hoc HTTP requests and keep a short history.

Network failures never raise; they come back as a status-0 "Network Error"
response carrying the error message.
"""

import time
from datetime import datetime, timezone
from typing import Any, Literal

import httpx
from loguru import logger
from pydantic import BaseModel, Field

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
HISTORY_LIMIT = 10


class PlaygroundRequest(BaseModel):
    method: HttpMethod = "GET"
    url: str
    headers: dict[str, str] = Field(default_factory=lambda: {"Content-Type": "application/json"})
    body: str | None = None


class PlaygroundResponse(BaseModel):
    status: int
    status_text: str
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_network_error(self) -> bool:
        return self.status == 0


class HistoryItem(BaseModel):
    request: PlaygroundRequest
    response: PlaygroundResponse


class PresetApi(BaseModel):
    name: str
    method: HttpMethod
    url: str
    description: str


PRESET_APIS: list[PresetApi] = [
    PresetApi(
        name="JSONPlaceholder - Users",
        method="GET",
        url="https://jsonplaceholder.typicode.com/users",
        description="Get list of users",
    ),
    PresetApi(
        name="JSONPlaceholder - Posts",
        method="GET",
        url="https://jsonplaceholder.typicode.com/posts",
        description="Get list of posts",
    ),
    PresetApi(
        name="REST Countries",
        method="GET",
        url="https://restcountries.com/v3.1/name/canada",
        description="Get country information",
    ),
    PresetApi(
        name="Cat Facts API",
        method="GET",
        url="https://catfact.ninja/fact",
        description="Get random cat fact",
    ),
]


def _decode_body(response: httpx.Response) -> Any:
    """JSON if the server says so, otherwise text."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Response claimed JSON but did not parse; returning text")
    return response.text


class PlaygroundClient:
    """Synchronous HTTP client for the playground."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )
        self.history: list[HistoryItem] = []

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "PlaygroundClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def send(self, request: PlaygroundRequest) -> PlaygroundResponse:
        """Send a request and record successful round-trips in history."""
        headers = {key: value for key, value in request.headers.items() if key}
        content = None
        if request.body and request.method in BODY_METHODS:
            content = request.body.encode("utf-8")

        start = time.monotonic()
        try:
            raw = self.client.request(
                request.method, request.url, headers=headers, content=content
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Playground request to {request.url} failed: {e}")
            return PlaygroundResponse(
                status=0,
                status_text="Network Error",
                data={"error": str(e) or e.__class__.__name__},
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        response = PlaygroundResponse(
            status=raw.status_code,
            status_text=raw.reason_phrase,
            headers=dict(raw.headers),
            data=_decode_body(raw),
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        logger.debug(f"{request.method} {request.url} -> {response.status}")

        self.history.insert(0, HistoryItem(request=request, response=response))
        del self.history[HISTORY_LIMIT:]
        return response

    def send_preset(self, preset: PresetApi) -> PlaygroundResponse:
        return self.send(PlaygroundRequest(method=preset.method, url=preset.url))

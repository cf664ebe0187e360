"""Server-Sent Events reader.

Turns the text lines of an event stream into typed push events. Heartbeats
and empty messages are skipped; malformed or unknown events are logged and
dropped so they never reach the store.
"""

from collections.abc import AsyncIterable, AsyncIterator

import httpx
import logfire

from threadsync.adapter.error import EventParseError
from threadsync.adapter.sse.events import PushEvent, parse_event
from threadsync.domain.value import PostId


class SSEEventReader:
    """Decode SSE framing from an async iterable of lines."""

    def __init__(self, lines: AsyncIterable[str]) -> None:
        """Initialize reader.

        Args:
            lines: Decoded lines of the stream, without line terminators
        """
        self.lines = lines
        self.dropped = 0

    async def __aiter__(self) -> AsyncIterator[PushEvent]:
        data_lines: list[str] = []
        async for line in self.lines:
            if line == "":
                if data_lines:
                    event = self._decode("\n".join(data_lines))
                    data_lines = []
                    if event is not None:
                        yield event
                continue

            if line.startswith(":"):
                # Comment line, used as heartbeat
                continue

            field, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]
            if field == "data":
                data_lines.append(value)
            # event/id/retry fields carry nothing the store needs

        if data_lines:
            event = self._decode("\n".join(data_lines))
            if event is not None:
                yield event

    def _decode(self, data: str) -> PushEvent | None:
        if not data.strip() or data.startswith(":"):
            return None
        try:
            return parse_event(data)
        except EventParseError as e:
            self.dropped += 1
            logfire.warn("Push event dropped", error=str(e), raw=data[:200])
            return None


def events_url(base_url: str, post_id: PostId) -> str:
    """Event stream URL of a post."""
    return f"{base_url.rstrip('/')}/api/posts/{post_id}/events"


async def stream_post_events(
    base_url: str,
    post_id: PostId,
    auth_token: str | None = None,
    timeout: float | None = None,
) -> AsyncIterator[PushEvent]:
    """Connect to a post's event stream and yield its events.

    The stream authenticates through a ``token`` query parameter, since
    browsers' EventSource cannot send headers and the server expects it
    that way. No reconnection is attempted; the caller owns that policy.

    Args:
        base_url: API base URL
        post_id: Post to follow
        auth_token: Optional auth token
        timeout: Read timeout in seconds (None waits forever)

    Yields:
        Push events in arrival order
    """
    params = {"token": auth_token} if auth_token else None
    url = events_url(base_url, post_id)

    with logfire.span("sse.stream_post_events", post_id=post_id):
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=10.0)) as client:
            async with client.stream(
                "GET",
                url,
                params=params,
                headers={"Accept": "text/event-stream"},
            ) as response:
                response.raise_for_status()
                logfire.info("Event stream connected", post_id=post_id)
                async for event in SSEEventReader(response.aiter_lines()):
                    yield event
        logfire.info("Event stream closed", post_id=post_id)

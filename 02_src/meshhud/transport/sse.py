"""Server-Sent Events framing for the mesh push-event endpoint."""

from typing import AsyncIterator

SSE_HEADERS = {
    "Accept": "text/event-stream",
    "Cache-Control": "no-cache",
}


class SseParser:
    """Incremental SSE line parser yielding the ``data`` payload of each event.

    Only the ``data`` field is used. Comment lines (``: keep-alive``) and the
    ``event``, ``id`` and ``retry`` fields are skipped.
    """

    def __init__(self):
        self._data: list[str] = []

    def feed(self, line: str) -> str | None:
        """Consume one line (without terminator); return a frame on dispatch."""
        if line == "":
            if not self._data:
                return None
            frame = "\n".join(self._data)
            self._data = []
            return frame

        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data.append(value)
        return None

    def reset(self) -> None:
        """Discard a partially received event."""
        self._data = []


async def iter_frames(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Turn a stream of text lines into SSE data frames.

    An event left unterminated when the stream ends is discarded.
    """
    parser = SseParser()
    async for line in lines:
        frame = parser.feed(line.rstrip("\r"))
        if frame is not None:
            yield frame

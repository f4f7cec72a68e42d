"""Tests for SSE framing."""

import pytest

from meshhud.transport import SseParser, iter_frames


async def lines(*items: str):
    for item in items:
        yield item


async def collect(agen) -> list[str]:
    return [frame async for frame in agen]


class TestSseParser:
    """Tests for SseParser."""

    def test_single_event(self):
        parser = SseParser()
        assert parser.feed('data: {"a":1}') is None
        assert parser.feed("") == '{"a":1}'

    def test_multiline_data_joined(self):
        parser = SseParser()
        parser.feed("data: first")
        parser.feed("data: second")
        assert parser.feed("") == "first\nsecond"

    def test_comments_ignored(self):
        """Test that keep-alive comments never produce frames."""
        parser = SseParser()
        assert parser.feed(": keep-alive") is None
        assert parser.feed("") is None

    def test_other_fields_ignored(self):
        parser = SseParser()
        parser.feed("event: mesh")
        parser.feed("id: 7")
        parser.feed("retry: 1000")
        parser.feed("data:no-space")
        assert parser.feed("") == "no-space"

    def test_blank_line_without_data(self):
        assert SseParser().feed("") is None

    def test_reset_discards_partial(self):
        parser = SseParser()
        parser.feed("data: partial")
        parser.reset()
        assert parser.feed("") is None


class TestIterFrames:
    """Tests for iter_frames()."""

    @pytest.mark.asyncio
    async def test_frames_in_order(self):
        frames = await collect(
            iter_frames(lines("data: 1", "", ": keep-alive", "", "data: 2", ""))
        )
        assert frames == ["1", "2"]

    @pytest.mark.asyncio
    async def test_carriage_returns_stripped(self):
        frames = await collect(iter_frames(lines("data: 1\r", "\r")))
        assert frames == ["1"]

    @pytest.mark.asyncio
    async def test_unterminated_event_discarded(self):
        frames = await collect(iter_frames(lines("data: 1", "", "data: 2")))
        assert frames == ["1"]

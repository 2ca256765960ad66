"""Parsing and accumulating streamed content generation responses."""

from __future__ import annotations

import copy
import dataclasses
import json
from collections.abc import Iterable, Iterator

from .errors import GeminiError, JsonError, StreamingError
from .models import GenerateContentResponse, TextPart

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_OPEN_BRACE = ord("{")
_CLOSE_BRACE = ord("}")


def _decode_response(raw: bytes) -> GenerateContentResponse:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise JsonError(str(exc)) from exc
    return GenerateContentResponse.from_dict(data)


def _complete_object_end(buffer: bytes) -> int | None:
    """Index just past the first complete top-level JSON object, if there is one."""
    depth = 0
    in_string = False
    escape_next = False
    for index, byte in enumerate(buffer):
        if escape_next:
            escape_next = False
            continue
        if byte == _QUOTE:
            in_string = not in_string
        elif byte == _BACKSLASH and in_string:
            escape_next = True
        elif byte == _OPEN_BRACE and not in_string:
            depth += 1
        elif byte == _CLOSE_BRACE and not in_string:
            depth -= 1
            if depth == 0 and index > 0:
                return index + 1
    return None


def _as_bytes(chunk: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


def parse_stream(
    chunks: Iterable[bytes | bytearray | memoryview | str],
) -> Iterator[GenerateContentResponse]:
    """Yield the responses found in a stream of raw body chunks.

    After each chunk arrives, at most one complete JSON object is taken from the
    front of the buffered data. When the chunks run out, whatever is left is read
    as one final response if it parses, and ignored otherwise. A malformed
    object raises JsonError; a failure of the chunk source raises StreamingError.
    """
    buffer = b""
    iterator = iter(chunks)
    while True:
        try:
            chunk = next(iterator)
        except StopIteration:
            break
        except GeminiError:
            raise
        except Exception as exc:
            raise StreamingError(f"Stream error: {exc}") from exc

        buffer += _as_bytes(chunk)
        end = _complete_object_end(buffer)
        if end is None:
            continue
        raw, buffer = buffer[:end], buffer[end:]
        yield _decode_response(raw)

    if buffer:
        try:
            final = _decode_response(buffer)
        except JsonError:
            return
        yield final


def _first_text(response: GenerateContentResponse) -> str | None:
    if not response.candidates:
        return None
    parts = response.candidates[0].content.parts
    if parts and isinstance(parts[0], TextPart):
        return parts[0].text
    return None


def accumulate_text(items: Iterable[GenerateContentResponse]) -> Iterator[str]:
    """Yield the leading text of each response, skipping responses without one."""
    for response in items:
        text = _first_text(response)
        if text is not None:
            yield text


class StreamAccumulator:
    """Collects the text of streamed responses into one whole response."""

    def __init__(self) -> None:
        self._text_pieces: list[str] = []
        self._current: GenerateContentResponse | None = None

    def process_chunk(self, response: GenerateContentResponse) -> str | None:
        """Record a response and return its leading text, if it has any."""
        text = _first_text(response)
        if text is not None:
            self._text_pieces.append(text)
        self._current = response
        return text

    @property
    def accumulated_text(self) -> str:
        """All text collected so far."""
        return "".join(self._text_pieces)

    def finalize(self) -> GenerateContentResponse | None:
        """The last response seen, its leading text replaced by all collected text."""
        if self._current is None:
            return None
        response = copy.deepcopy(self._current)
        if response.candidates:
            parts = response.candidates[0].content.parts
            if parts and isinstance(parts[0], TextPart):
                parts[0] = dataclasses.replace(parts[0], text=self.accumulated_text)
        return response
"""
Incremental decoder for chat-completion event streams.
Turns arbitrary network chunks into content fragments and a terminal marker.
"""
import json
from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamFrame:
    """One decoded `data:` frame."""
    content: str = ""
    done: bool = False
    finish_reason: Optional[str] = None


class SSEFrameDecoder:
    """Decodes `data: {...}` lines as they arrive.

    Chunks may end mid-line, so the trailing partial line is buffered until
    the next chunk completes it. Lines that are not `data:` frames (comments,
    keep-alives, `event:` lines) and frames with invalid JSON are skipped.
    """

    DATA_PREFIX = "data:"
    DONE_MARKER = "[DONE]"

    def __init__(self):
        self.buffer = ""
        self.skipped = 0

    def feed(self, chunk: str) -> list[StreamFrame]:
        """Process a chunk of text and return every frame it completes."""
        self.buffer += chunk
        lines = self.buffer.split("\n")
        self.buffer = lines.pop()

        frames = []
        for line in lines:
            frame = self._parse_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def flush(self) -> list[StreamFrame]:
        """Decode whatever is left once the connection closes."""
        remaining = self.buffer
        self.buffer = ""
        frame = self._parse_line(remaining)
        return [frame] if frame is not None else []

    def _parse_line(self, line: str) -> Optional[StreamFrame]:
        line = line.strip("\r")
        if not line.startswith(self.DATA_PREFIX):
            return None

        data = line[len(self.DATA_PREFIX):].strip()
        if not data:
            return None
        if data == self.DONE_MARKER:
            return StreamFrame(done=True)

        try:
            payload = json.loads(data)
            choice = payload["choices"][0]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError):
            self.skipped += 1
            return None

        if not isinstance(choice, dict):
            self.skipped += 1
            return None

        delta = choice.get("delta") or {}
        content = delta.get("content") if isinstance(delta, dict) else None
        return StreamFrame(
            content=content if isinstance(content, str) else "",
            finish_reason=choice.get("finish_reason")
        )

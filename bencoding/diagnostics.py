"""
Human readable rendering of decode errors.

The offending buffer is decoded back to text, cut into fixed-width lines and
every line touching the invalid block gets a row of carets underneath:

    Invalid integer block in 4 bytes of utf-8 text, bytes 0 to 3:
      Integer block does not end
    i314
    ^^^^
"""
import codecs
from dataclasses import dataclass, field

from .config import WRAP_WIDTH
from .errors import InvalidBlock


@dataclass
class WrappedLine:
    text: str = ""
    # (first byte, last byte) of every character in `text`
    spans: list[tuple[int, int]] = field(default_factory=list)

    def append(self, char: str, first: int, last: int):
        self.text += char if char.isprintable() else "."
        self.spans.append((first, last))

    def marker(self, start: int, end: int) -> str | None:
        columns = [
            column
            for column, (first, last) in enumerate(self.spans)
            if first <= end and last >= start
        ]
        if not columns:
            return None
        return " " * columns[0] + "^" * (columns[-1] - columns[0] + 1)


def _characters(buffer: bytes, encoding: str):
    # Feeding one byte at a time tells which bytes make up each character
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    first = 0
    for index in range(len(buffer)):
        text = decoder.decode(buffer[index : index + 1])
        for char in text:
            yield char, first, index
        if text:
            first = index + 1
    for char in decoder.decode(b"", final=True):
        yield char, first, len(buffer) - 1


def wrap_buffer(buffer: bytes, encoding: str, width: int = WRAP_WIDTH) -> list[WrappedLine]:
    lines = []
    for char, first, last in _characters(buffer, encoding):
        if not lines or len(lines[-1].spans) == width:
            lines.append(WrappedLine())
        lines[-1].append(char, first, last)
    return lines


def render_invalid_block(error: InvalidBlock, width: int = WRAP_WIDTH) -> str:
    output = [
        f"Invalid {error.block_type.value} block in {len(error.buffer)} bytes "
        f"of {error.encoding} text, bytes {error.start} to {error.end}:",
        f"  {error.reason}",
    ]
    for line in wrap_buffer(error.buffer, error.encoding, width):
        output.append(line.text)
        marker = line.marker(error.start, error.end)
        if marker is not None:
            output.append(marker)
    return "\n".join(output)

"""Delimiter-based tokenizer for procfs text."""

from collections.abc import Iterator
from dataclasses import dataclass

DIGITS = "0123456789"


@dataclass(slots=True, frozen=True)
class Cursor:
    """Position within a text buffer."""

    buffer: str
    position: int = 0

    @property
    def exhausted(self) -> bool:
        """Check if nothing is left to scan."""
        return self.position >= len(self.buffer)

    @property
    def rest(self) -> str:
        """Get the unscanned remainder of the buffer."""
        return self.buffer[self.position :]


def next_token(cursor: Cursor, delimiters: str) -> tuple[str, Cursor]:
    """
    Scan the next token from a cursor.

    Leading delimiter characters are skipped, so consecutive delimiters
    collapse into one boundary. The token runs up to the next delimiter or
    the end of the buffer, and the returned cursor sits just past that
    delimiter. At exhaustion an empty token and an exhausted cursor are
    returned.

    Args:
        cursor: Where to start scanning.
        delimiters: Every character in this string is a delimiter.

    Returns:
        The token and the advanced cursor.
    """
    buffer = cursor.buffer
    end = len(buffer)
    pos = cursor.position

    while pos < end and buffer[pos] in delimiters:
        pos += 1
    if pos >= end:
        return "", Cursor(buffer, end)

    start = pos
    while pos < end and buffer[pos] not in delimiters:
        pos += 1
    token = buffer[start:pos]

    # Step over the delimiter that ended the token
    if pos < end:
        pos += 1
    return token, Cursor(buffer, pos)


def tokens(text: str, delimiters: str) -> Iterator[str]:
    """Yield every token of a text until the end marker."""
    cursor = Cursor(text)
    while True:
        token, cursor = next_token(cursor, delimiters)
        if not token:
            return
        yield token


def parse_int(text: str) -> int:
    """
    Parse the leading integer of a token.

    Malformed text parses to 0 and trailing garbage is ignored, so
    "12kB" gives 12.
    """
    text = text.strip()
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = 0
    while digits < len(text) and text[digits] in DIGITS:
        digits += 1
    if digits == 0:
        return 0
    return sign * int(text[:digits])


def parse_float(text: str) -> float:
    """Parse the leading decimal number of a token, 0.0 when malformed."""
    text = text.strip()
    end = 0
    seen_digit = False
    seen_dot = False
    if text[:1] in ("-", "+"):
        end = 1
    while end < len(text):
        char = text[end]
        if char in DIGITS:
            seen_digit = True
        elif char == "." and not seen_dot:
            seen_dot = True
        else:
            break
        end += 1
    if not seen_digit:
        return 0.0
    return float(text[:end])

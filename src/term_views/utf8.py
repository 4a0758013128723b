"""Reassemble a UTF-8 character from a byte source polled one byte at a time."""

from typing import Callable, Optional


class Utf8Error(ValueError):
    """The bytes read do not form a valid UTF-8 character.

    Attributes:
        data: Every byte consumed while trying to decode.
    """

    def __init__(self, message: str, data: bytes):
        super().__init__(message)
        self.data = data


def sequence_length(first: int) -> int:
    """Number of bytes in the sequence started by ``first``, or 0 if invalid."""
    if first < 0x80:
        return 1
    if first & 0xE0 == 0xC0:
        return 2
    if first & 0xF0 == 0xE0:
        return 3
    if first & 0xF8 == 0xF0:
        return 4
    return 0


def read_char(first: int, next_byte: Callable[[], Optional[int]]) -> str:
    """Decode one character whose first byte is ``first``.

    Args:
        first: First byte of the sequence (0-255).
        next_byte: Called once per continuation byte needed; returns the
            byte, or None when the source has no more input.

    Raises:
        Utf8Error: on a bad leading byte, a missing or bad continuation
            byte, or an invalid code point.
    """
    data = bytearray([first])
    length = sequence_length(first)
    if length == 0:
        raise Utf8Error(f"invalid leading byte 0x{first:02x}", bytes(data))

    for _ in range(length - 1):
        byte = next_byte()
        if byte is None or not 0 <= byte <= 0xFF:
            raise Utf8Error("truncated UTF-8 sequence", bytes(data))
        data.append(byte)
        if byte & 0xC0 != 0x80:
            raise Utf8Error(f"invalid continuation byte 0x{byte:02x}", bytes(data))

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8Error(str(e), bytes(data)) from e

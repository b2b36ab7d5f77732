"""UTF-8 codepoint decoding over pull-based byte sources."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum
from typing import Final

# Sentinel character returned when a byte source is exhausted
EOF_CHAR: Final = "\0"

type NextByte = Callable[[], int | None]

_TAIL_DATA: Final = 0b00111111
_TAIL_MARKER: Final = 0b10000000
_MAX_CODEPOINT: Final = 0x10FFFF
_SURROGATES: Final = range(0xD800, 0xE000)


class HeadType(IntEnum):
    """
    Lead byte classes of a UTF-8 sequence.

    Each value is the sequence length in bytes, UNKNOWN is zero.
    """

    UNKNOWN = 0
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    QUAD = 4


# (head type, marker shift, expected marker, payload mask)
_HEAD_PATTERNS: Final = (
    (HeadType.SINGLE, 7, 0b0, 0b01111111),
    (HeadType.DOUBLE, 5, 0b110, 0b00011111),
    (HeadType.TRIPLE, 4, 0b1110, 0b00001111),
    (HeadType.QUAD, 3, 0b11110, 0b00000111),
)

# Smallest codepoint that legitimately needs each sequence length
_MIN_FOR_LENGTH: Final = {
    HeadType.DOUBLE: 0x80,
    HeadType.TRIPLE: 0x800,
    HeadType.QUAD: 0x10000,
}


def head_type(head: int) -> HeadType:
    """Classifies a lead byte by its high-bit pattern."""
    for kind, shift, marker, _mask in _HEAD_PATTERNS:
        if head >> shift == marker:
            return kind
    return HeadType.UNKNOWN


def head_data(head: int) -> int | None:
    """Strips the lead marker, returning None for an unknown lead byte."""
    kind = head_type(head)
    for pattern_kind, _shift, _marker, mask in _HEAD_PATTERNS:
        if pattern_kind is kind:
            return head & mask
    return None


def is_continuation(byte: int) -> bool:
    """Checks for the 10xxxxxx continuation marker."""
    return byte & 0b11000000 == _TAIL_MARKER


def tail_masked(tail: int, distance: int) -> int:
    """
    Positions the payload of a continuation byte.

    Args:
        tail: The continuation byte
        distance: How far the byte sits from the end of its sequence (1-based)

    Returns:
        The low six bits of the byte shifted to bit 6 * (distance - 1)
    """
    return (tail & _TAIL_DATA) << (6 * (distance - 1))


def decode_codepoint(head: int, next_byte: NextByte) -> str | None:
    """
    Decodes one Unicode scalar value given its lead byte.

    Pulls exactly as many continuation bytes from ``next_byte`` as the lead
    byte announces. Returns None when the sequence is not valid UTF-8: an
    unknown lead byte, a truncated or malformed tail, an overlong form, a
    surrogate, or a value past U+10FFFF.
    """
    kind = head_type(head)
    if kind is HeadType.SINGLE:
        return chr(head)

    data = head_data(head)
    if data is None:
        return None

    length = int(kind)
    value = data << (6 * (length - 1))
    for distance in range(length - 1, 0, -1):
        tail = next_byte()
        if tail is None or not is_continuation(tail):
            return None
        value |= tail_masked(tail, distance)

    if value < _MIN_FOR_LENGTH[kind]:
        return None
    if value > _MAX_CODEPOINT or value in _SURROGATES:
        return None
    return chr(value)


def next_codepoint(next_byte: NextByte) -> str | None:
    """Pulls a lead byte and decodes it, yielding EOF_CHAR on empty input."""
    head = next_byte()
    if head is None:
        return EOF_CHAR
    return decode_codepoint(head, next_byte)


__all__ = [
    "EOF_CHAR",
    "HeadType",
    "NextByte",
    "decode_codepoint",
    "head_data",
    "head_type",
    "is_continuation",
    "next_codepoint",
    "tail_masked",
]

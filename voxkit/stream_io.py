"""Length-delimited message streams with varint-encoded counts and sizes.

Messages are any objects with protobuf-style ``SerializeToString`` and
``ParseFromString`` methods.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol

_UINT32_MAX = (1 << 32) - 1
_MAX_VARINT_BYTES = 10


class Message(Protocol):
    def SerializeToString(self) -> bytes: ...

    def ParseFromString(self, data: bytes) -> object: ...


def encode_varint32(value: int) -> bytes:
    """Base-128 varint encoding of an unsigned 32-bit value."""
    value = int(value)
    if not 0 <= value <= _UINT32_MAX:
        raise ValueError(f"value must be an unsigned 32-bit integer, got {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint32(data: bytes, position: int = 0) -> tuple[int, int]:
    """Decode a varint at ``position``; returns ``(value, next_position)``.

    Longer varints are accepted up to ten bytes and truncated to 32 bits.
    """
    result = 0
    for shift_index in range(_MAX_VARINT_BYTES):
        if position >= len(data):
            raise ValueError("varint is truncated")
        byte = data[position]
        position += 1
        result |= (byte & 0x7F) << (7 * shift_index)
        if not byte & 0x80:
            return result & _UINT32_MAX, position
    raise ValueError("varint is longer than ten bytes")


def _read_varint32(stream: BinaryIO) -> tuple[int, int]:
    raw = bytearray()
    while len(raw) < _MAX_VARINT_BYTES:
        chunk = stream.read(1)
        if not chunk:
            break
        raw += chunk
        if not chunk[0] & 0x80:
            break
    return decode_varint32(bytes(raw))


def read_message_count(stream: BinaryIO, byte_offset: int) -> tuple[int, int]:
    """Read a message count at ``byte_offset``.

    Returns the count and the offset just past it.
    """
    stream.seek(byte_offset)
    try:
        count, consumed = _read_varint32(stream)
    except ValueError as error:
        raise ValueError("Could not read message size.") from error
    return count, byte_offset + consumed


def write_message_count(message_count: int, stream: BinaryIO) -> None:
    """Write a message count at the stream's current position."""
    stream.write(encode_varint32(message_count))


def read_message(stream: BinaryIO, message: Message, byte_offset: int) -> int:
    """Parse the size-prefixed message at ``byte_offset`` into ``message``.

    Returns the offset just past the message.
    """
    stream.seek(byte_offset)
    try:
        size, consumed = _read_varint32(stream)
    except ValueError as error:
        raise ValueError("Could not read protobuf message size.") from error
    if size == 0:
        raise ValueError("Empty protobuf message!")
    payload = stream.read(size)
    if len(payload) != size:
        raise ValueError("Could not parse stream.")
    try:
        message.ParseFromString(payload)
    except Exception as error:
        raise ValueError("Could not parse stream.") from error
    return byte_offset + consumed + size


def write_message(message: Message, stream: BinaryIO) -> None:
    """Write ``message`` prefixed with its size at the current position."""
    payload = message.SerializeToString()
    stream.write(encode_varint32(len(payload)) + payload)
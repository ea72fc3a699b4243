from __future__ import annotations

import logging
import re
import sys
from typing import Iterator, cast

from respirator.config import DecoderConfig
from respirator.data_types import Array, BulkString, Error, Integer, SimpleString, Value
from respirator.exceptions import (
    InvalidIntegerLiteralError,
    MissingTerminatorError,
    NestingTooDeepError,
    TruncatedPayloadError,
    UnknownMarkerError,
)

CRLF = b"\r\n"

INTEGER_PATTERN = re.compile(rb"[+-]?[0-9]+")
LENGTH_PATTERN = re.compile(rb"[0-9]+")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Buffer = bytes | bytearray | memoryview


class RESPDecoder:
    """Decoder for complete RESP buffers.

    ``decode_value`` takes the position of a unit's marker byte. The per-type
    ``decode_*`` methods take the position just past it. All of them return
    the decoded value together with the position of the first unconsumed byte.
    Failures are raised as ``DecodeError`` subclasses whose ``offset`` indexes
    into the buffer.
    """

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()

    def decode(self, buffer: Buffer) -> tuple[Value, bytes]:
        data = bytes(buffer)
        value, pos = self.decode_value(data, 0)
        return value, data[pos:]

    def iter_decode(self, buffer: Buffer) -> Iterator[Value]:
        data = bytes(buffer)
        pos = 0
        while pos < len(data):
            value, pos = self.decode_value(data, pos)
            yield value

    def decode_all(self, buffer: Buffer) -> list[Value]:
        return list(self.iter_decode(buffer))

    def decode_value(
        self, data: bytes, pos: int, parent_depth: int = 0
    ) -> tuple[Value, int]:
        """Decode one unit starting at its marker byte.

        ``parent_depth`` is the number of arrays already enclosing the unit.
        Nested arrays are tracked on an explicit stack so input depth never
        grows the Python call stack.
        """
        pending: list[tuple[int, list[Value]]] = []

        while True:
            value, pos = self._decode_unit(data, pos, parent_depth + len(pending))

            if isinstance(value, int):
                # a non-empty array header: value is its element count
                pending.append((value, []))
            else:
                while pending:
                    count, elements = pending[-1]
                    elements.append(value)
                    if len(elements) < count:
                        break
                    pending.pop()
                    value = Array(tuple(elements))
                else:
                    return value, pos

            count, elements = pending[-1]
            if pos >= len(data):
                raise TruncatedPayloadError(count, len(elements), pos, unit="elements")

    def _decode_unit(
        self, data: bytes, pos: int, parent_depth: int
    ) -> tuple[Value | int, int]:
        if pos >= len(data):
            raise UnknownMarkerError(None, pos)

        marker = data[pos]

        match marker:
            case 0x2B:  # +
                return self.decode_simple_string(data, pos + 1)
            case 0x3A:  # :
                return self.decode_integer(data, pos + 1)
            case 0x2D:  # -
                return self.decode_error(data, pos + 1)
            case 0x24:  # $
                return self.decode_bulk_string(data, pos + 1)
            case 0x2A:  # *
                count, pos = self._read_array_header(data, pos + 1, parent_depth + 1)
                if count == 0:
                    return Array(None), pos
                return count, pos
            case _:
                raise UnknownMarkerError(marker, pos)

    def decode_simple_string(self, data: bytes, pos: int) -> tuple[SimpleString, int]:
        line, pos = self._read_line(data, pos)
        return SimpleString(line), pos

    def decode_error(self, data: bytes, pos: int) -> tuple[Error, int]:
        line, pos = self._read_line(data, pos)
        return Error(line), pos

    def decode_integer(self, data: bytes, pos: int) -> tuple[Integer, int]:
        start = pos
        line, pos = self._read_line(data, pos)

        if not INTEGER_PATTERN.fullmatch(line):
            raise InvalidIntegerLiteralError(line, start)

        value = int(line)
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidIntegerLiteralError(line, start)

        return Integer(value), pos

    def decode_bulk_string(self, data: bytes, pos: int) -> tuple[BulkString, int]:
        length, pos = self._read_length(data, pos)
        if length == 0:
            return BulkString(None), pos

        available = len(data) - pos
        if available < length:
            raise TruncatedPayloadError(length, available, pos)

        end = pos + length
        if data[end : end + 2] != CRLF:
            raise MissingTerminatorError("Bulk string is not followed by CRLF", end)

        return BulkString(data[pos:end]), end + 2

    def decode_array(
        self, data: bytes, pos: int, parent_depth: int = 0
    ) -> tuple[Array, int]:
        if data[pos - 1 : pos] != b"*":
            marker = data[pos - 1] if pos > 0 else None
            raise UnknownMarkerError(marker, max(pos - 1, 0))

        value, pos = self.decode_value(data, pos - 1, parent_depth)
        return cast(Array, value), pos

    def _read_array_header(self, data: bytes, pos: int, depth: int) -> tuple[int, int]:
        if depth > self.config.max_depth:
            logging.debug(
                f"Rejecting array at offset {pos - 1}: "
                f"depth {depth} > {self.config.max_depth}"
            )
            raise NestingTooDeepError(self.config.max_depth, pos - 1)

        return self._read_length(data, pos)

    def _read_line(self, data: bytes, pos: int) -> tuple[bytes, int]:
        cr = data.find(b"\r", pos)
        lf = data.find(b"\n", pos, len(data) if cr == -1 else cr)

        if lf != -1:
            raise MissingTerminatorError("Line feed without carriage return", lf)
        if cr == -1:
            raise MissingTerminatorError("Line terminator not found", len(data))
        if data[cr + 1 : cr + 2] != b"\n":
            raise MissingTerminatorError(
                "Carriage return not followed by line feed", cr + 1
            )

        return data[pos:cr], cr + 2

    def _read_length(self, data: bytes, pos: int) -> tuple[int, int]:
        start = pos
        line, pos = self._read_line(data, pos)

        if not LENGTH_PATTERN.fullmatch(line):
            raise InvalidIntegerLiteralError(line, start)

        length = int(line)
        if length > sys.maxsize:
            raise InvalidIntegerLiteralError(line, start)

        return length, pos


def decode(buffer: Buffer, config: DecoderConfig | None = None) -> tuple[Value, bytes]:
    return RESPDecoder(config).decode(buffer)


def iter_decode(buffer: Buffer, config: DecoderConfig | None = None) -> Iterator[Value]:
    return RESPDecoder(config).iter_decode(buffer)


def decode_all(buffer: Buffer, config: DecoderConfig | None = None) -> list[Value]:
    return RESPDecoder(config).decode_all(buffer)

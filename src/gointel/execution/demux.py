# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decoder for the docker multiplexed stdout/stderr stream.

Every frame starts with an 8 byte header: the first byte names the channel
(``0`` stdin, ``1`` stdout, ``2`` stderr), three padding bytes follow, and
the last four bytes hold the big-endian payload length.
"""

from __future__ import annotations

import struct
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from ..errors import StreamFramingError

HEADER_SIZE: Final[int] = 8
STDIN_CHANNEL: Final[int] = 0
STDOUT_CHANNEL: Final[int] = 1
STDERR_CHANNEL: Final[int] = 2
_HEADER: Final[struct.Struct] = struct.Struct(">BxxxL")

Reader = Callable[[int], bytes]


@dataclass(slots=True)
class DemuxedOutput:
    """Output collected per channel."""

    stdout: bytearray = field(default_factory=bytearray)
    stderr: bytearray = field(default_factory=bytearray)


def _read_exactly(read: Reader, size: int) -> bytes:
    """Read ``size`` bytes, or fewer only when the stream ends first."""

    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def demux_stream(read: Reader) -> DemuxedOutput:
    """Split a multiplexed stream into stdout and stderr buffers.

    Args:
        read: Callable returning up to ``n`` bytes and ``b""`` at end of stream.

    Returns:
        DemuxedOutput: Bytes received on each output channel, in arrival order.

    Raises:
        StreamFramingError: If the stream ends inside a header or payload, or a
            frame names an unknown channel.
    """

    output = DemuxedOutput()
    while True:
        header = _read_exactly(read, HEADER_SIZE)
        if not header:
            return output
        if len(header) < HEADER_SIZE:
            raise StreamFramingError(f"stream ended inside a frame header ({len(header)} bytes)")
        channel, length = _HEADER.unpack(header)
        payload = _read_exactly(read, length)
        if len(payload) < length:
            raise StreamFramingError(f"stream ended after {len(payload)} of {length} payload bytes")
        if channel == STDERR_CHANNEL:
            output.stderr.extend(payload)
        elif channel in (STDOUT_CHANNEL, STDIN_CHANNEL):
            output.stdout.extend(payload)
        else:
            raise StreamFramingError(f"unknown stream channel {channel}")


def encode_frame(channel: int, payload: bytes) -> bytes:
    """Return ``payload`` framed for ``channel``; used by test doubles."""

    return _HEADER.pack(channel, len(payload)) + payload


__all__ = [
    "DemuxedOutput",
    "HEADER_SIZE",
    "STDERR_CHANNEL",
    "STDIN_CHANNEL",
    "STDOUT_CHANNEL",
    "demux_stream",
    "encode_frame",
]

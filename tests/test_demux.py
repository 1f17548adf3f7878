# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import io

import pytest

from gointel.errors import StreamFramingError
from gointel.execution import demux_stream, encode_frame
from gointel.execution.demux import STDERR_CHANNEL, STDIN_CHANNEL, STDOUT_CHANNEL


def _trickle(data: bytes):
    """Return a reader that hands out at most three bytes per call."""
    buffer = io.BytesIO(data)
    return lambda size: buffer.read(min(size, 3))


def test_demux_routes_frames_by_channel() -> None:
    stream = (
        encode_frame(STDOUT_CHANNEL, b"hello ")
        + encode_frame(STDERR_CHANNEL, b"warning\n")
        + encode_frame(STDOUT_CHANNEL, b"world")
        + encode_frame(STDIN_CHANNEL, b"!")
    )
    output = demux_stream(io.BytesIO(stream).read)
    assert bytes(output.stdout) == b"hello world!"
    assert bytes(output.stderr) == b"warning\n"


def test_demux_reassembles_partial_reads() -> None:
    payload = b"x" * 70_000
    stream = encode_frame(STDOUT_CHANNEL, payload) + encode_frame(STDERR_CHANNEL, b"done")
    output = demux_stream(_trickle(stream))
    assert bytes(output.stdout) == payload
    assert bytes(output.stderr) == b"done"


def test_demux_accepts_empty_stream_and_empty_frames() -> None:
    assert bytes(demux_stream(io.BytesIO(b"").read).stdout) == b""
    output = demux_stream(io.BytesIO(encode_frame(STDOUT_CHANNEL, b"")).read)
    assert bytes(output.stdout) == b""


def test_demux_rejects_truncated_header() -> None:
    stream = encode_frame(STDOUT_CHANNEL, b"ok") + b"\x01\x00\x00"
    with pytest.raises(StreamFramingError):
        demux_stream(io.BytesIO(stream).read)


def test_demux_rejects_truncated_payload() -> None:
    stream = encode_frame(STDOUT_CHANNEL, b"complete")[:-3]
    with pytest.raises(StreamFramingError, match="payload"):
        demux_stream(io.BytesIO(stream).read)


def test_demux_rejects_unknown_channel() -> None:
    with pytest.raises(StreamFramingError, match="channel"):
        demux_stream(io.BytesIO(encode_frame(7, b"??")).read)

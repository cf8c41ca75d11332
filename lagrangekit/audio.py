"""Recognition of AMR and SILK voice data and estimation of its duration."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from lagrangekit.reader import Reader

_AMR_BYTES_PER_SECOND = 1607.0
_SILK_FRAME_SECONDS = 0.02
_SILK_END = 0xFFFF


class AudioType(enum.IntEnum):
    """The kinds of voice data that can be recognised."""

    AMR = 0
    TX_SILK = 1
    SILK_V3 = 2


@dataclass(frozen=True)
class AudioInfo:
    """The kind of a voice recording and its duration in seconds."""

    type: AudioType
    time: float


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _count_silk_frames(data: bytes) -> int:
    frames = 0
    pos = 0
    while pos + 2 < len(data):
        (length,) = struct.unpack_from("<H", data, pos)
        if length == _SILK_END:
            break
        frames += 1
        pos += length + 2
    return frames


def _decode(stream: BinaryIO, prefixed: bool) -> AudioInfo:
    reader = Reader.from_stream(stream)
    head = reader.read_bytes(1)
    if head != b"#":
        if not prefixed:
            # Tencent SILK carries one extra byte before the usual header.
            return _decode(stream, True)
        raise ValueError("unknown audio type")
    head += reader.read_bytes(5)

    if head.startswith(b"#!AMR\n"):
        size = len(reader.read_all())
        return AudioInfo(AudioType.AMR, _f32(_f32(size) / _AMR_BYTES_PER_SECOND))

    if head == b"#!SILK":
        ver = reader.read_bytes(3)
        if ver != b"_V3":
            raise ValueError(f"unsupported silk version: {ver.decode('utf-8', 'replace')}")
        frames = _count_silk_frames(reader.read_all())
        kind = AudioType.TX_SILK if prefixed else AudioType.SILK_V3
        return AudioInfo(kind, _f32(_f32(frames) * _f32(_SILK_FRAME_SECONDS)))

    raise ValueError("unknown audio type")


def decode(stream: BinaryIO) -> AudioInfo:
    """Identify the voice data in a seekable stream.

    The stream is read from its start and rewound afterwards. Raises
    ValueError when the data is not AMR or SILK v3.
    """
    stream.seek(0)
    try:
        return _decode(stream, False)
    finally:
        stream.seek(0)
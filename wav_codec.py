"""
Minimal RIFF/WAVE codec for mono 16-bit PCM.

The layout is fixed: RIFF header, a 16-byte "fmt " chunk with format
code 1, then a single "data" chunk. No other chunks are written. The
decoder accepts exactly what the encoder produces, skipping unknown
chunks so files touched by other tools still load.
"""

import struct

import numpy as np

NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16

# RIFF size covers "WAVE" + fmt chunk header/body + data chunk header
_HEADER_OVERHEAD = 4 + (8 + FMT_CHUNK_SIZE) + 8
HEADER_SIZE = 8 + _HEADER_OVERHEAD

_FMT_STRUCT = struct.Struct("<HHIIHH")
_CHUNK_HEADER = struct.Struct("<4sI")


def encode_wav(samples, sample_rate: int) -> bytes:
    """Package signed 16-bit samples into a mono PCM WAVE container."""
    pcm = np.asarray(samples, dtype=np.int16).astype("<i2", copy=False).tobytes()
    data_size = len(pcm)
    byte_rate = sample_rate * NUM_CHANNELS * BYTES_PER_SAMPLE
    block_align = NUM_CHANNELS * BYTES_PER_SAMPLE

    header = b"".join((
        _CHUNK_HEADER.pack(b"RIFF", _HEADER_OVERHEAD + data_size),
        b"WAVE",
        _CHUNK_HEADER.pack(b"fmt ", FMT_CHUNK_SIZE),
        _FMT_STRUCT.pack(
            PCM_FORMAT,
            NUM_CHANNELS,
            sample_rate,
            byte_rate,
            block_align,
            BITS_PER_SAMPLE,
        ),
        _CHUNK_HEADER.pack(b"data", data_size),
    ))
    return header + pcm


def decode_wav(data: bytes) -> tuple[np.ndarray, int]:
    """Parse a container written by encode_wav.

    Returns (int16 samples, sample_rate). Raises ValueError when the
    bytes are not mono 16-bit PCM WAVE.
    """
    if len(data) < 12 or data[0:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise ValueError("not a RIFF/WAVE container")

    offset = 12
    fmt = None
    pcm = None
    while offset + _CHUNK_HEADER.size <= len(data):
        chunk_id, chunk_size = _CHUNK_HEADER.unpack_from(data, offset)
        body_start = offset + _CHUNK_HEADER.size
        body_end = body_start + chunk_size
        if body_end > len(data):
            raise ValueError(f"chunk {chunk_id!r} runs past end of data")

        if chunk_id == b"fmt ":
            if chunk_size < FMT_CHUNK_SIZE:
                raise ValueError("fmt chunk too short")
            fmt = _FMT_STRUCT.unpack_from(data, body_start)
        elif chunk_id == b"data":
            pcm = data[body_start:body_end]
            break

        # Chunks are word aligned
        offset = body_end + (chunk_size & 1)

    if fmt is None:
        raise ValueError("missing fmt chunk")
    if pcm is None:
        raise ValueError("missing data chunk")

    audio_format, channels, sample_rate, byte_rate, block_align, bits = fmt
    if audio_format != PCM_FORMAT:
        raise ValueError(f"unsupported format code {audio_format}")
    if channels != NUM_CHANNELS or bits != BITS_PER_SAMPLE:
        raise ValueError(f"expected mono 16-bit audio, got {channels} ch / {bits} bit")
    if len(pcm) % BYTES_PER_SAMPLE:
        raise ValueError("data chunk holds a partial sample")

    samples = np.frombuffer(pcm, dtype="<i2").astype(np.int16)
    return samples, sample_rate

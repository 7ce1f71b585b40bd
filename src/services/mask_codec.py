"""
Mask codec - versioned binary format for NoiseMask persistence

Layout (little-endian):

    u32 version
    u32 data_length     payload byte length
    u32 data_hash       CRC-32 of the payload
    i32 frames_count
    i32 canvas_size
    i32 frame_duration  ms
    ... payload         PNG, 8-bit grayscale atlas

The mask is white-on-transparent premultiplied, so R == G == B == A for
every pixel and one channel carries the whole image.

decode_mask() never raises on bad input: every rejection returns None,
which callers treat as "no usable cache".
"""

import io
import struct
import zlib
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

from models.descriptor import MaskValidator, atlas_size
from models.enums import LogCategory
from models.mask import NoiseMask
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CODEC)

FORMAT_VERSION = 1
HEADER = struct.Struct("<IIIiii")
INT32_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class MaskHeader:
    version: int
    data_length: int
    data_hash: int
    frames_count: int
    canvas_size: int
    frame_duration: int

    def pack(self) -> bytes:
        return HEADER.pack(
            self.version,
            self.data_length,
            self.data_hash,
            self.frames_count,
            self.canvas_size,
            self.frame_duration,
        )

    @classmethod
    def unpack(cls, data: bytes) -> 'MaskHeader':
        return cls(*HEADER.unpack_from(data, 0))

    def matches(self, validator: MaskValidator) -> bool:
        return (
            validator.frame_duration == self.frame_duration
            and validator.frames_count == self.frames_count
            and validator.canvas_size == self.canvas_size
        )


def payload_hash(payload: bytes) -> int:
    """32-bit CRC of the payload bytes"""
    return zlib.crc32(payload) & 0xFFFFFFFF


def encode_mask(mask: NoiseMask) -> bytes:
    """
    Serialize a mask: header with placeholder hash, PNG payload, then patch
    length and hash into the header.
    """
    if mask.frame_duration > INT32_MAX:
        raise ValueError(f"frame_duration {mask.frame_duration} does not fit the header")

    buffer = io.BytesIO()
    buffer.write(HEADER.pack(FORMAT_VERSION, 0, 0, mask.frames_count, mask.canvas_size, mask.frame_duration))

    # Any color channel works, they are equal by construction
    grayscale = mask.image.getchannel(0)
    grayscale.save(buffer, format="PNG")

    result = bytearray(buffer.getvalue())
    payload = bytes(result[HEADER.size:])
    header = MaskHeader(
        version=FORMAT_VERSION,
        data_length=len(payload),
        data_hash=payload_hash(payload),
        frames_count=mask.frames_count,
        canvas_size=mask.canvas_size,
        frame_duration=mask.frame_duration,
    )
    result[:HEADER.size] = header.pack()
    return bytes(result)


def _reject(reason: str, **details) -> None:
    log.debug(f"Serialized mask rejected: {reason}", **details)
    return None


def decode_mask(data: bytes, validator: Optional[MaskValidator] = None) -> Optional[NoiseMask]:
    """
    Parse and verify a serialized mask

    Args:
        data: Bytes produced by encode_mask()
        validator: When given, header fields must equal it

    Returns:
        NoiseMask, or None if any check fails
    """
    length = len(data)
    if length <= HEADER.size:
        return _reject("buffer too short", length=length)

    header = MaskHeader.unpack(data)
    if header.version != FORMAT_VERSION:
        return _reject("version mismatch", version=header.version, expected=FORMAT_VERSION)
    if header.canvas_size <= 0 or header.frames_count <= 0 or header.frame_duration <= 0:
        return _reject("non-positive header field", header=header)
    if validator is not None and not header.matches(validator):
        return _reject("validator mismatch", header=header, validator=validator)
    if HEADER.size + header.data_length != length:
        return _reject("length mismatch", data_length=header.data_length, payload=length - HEADER.size)

    payload = bytes(data[HEADER.size:])
    if payload_hash(payload) != header.data_hash:
        return _reject("hash mismatch")

    # A hash-consistent payload can still hold a broken chunk stream, and the
    # PNG plugin raises several unrelated exception types for that
    try:
        grayscale = Image.open(io.BytesIO(payload), formats=["PNG"])
        grayscale.load()
    except Exception as e:
        return _reject("payload is not a readable PNG", error=str(e), error_type=type(e).__name__)

    if grayscale.mode != "L":
        return _reject("payload is not 8-bit grayscale", mode=grayscale.mode)

    expected = atlas_size(header.frames_count, header.canvas_size)
    if grayscale.size != expected:
        return _reject("atlas size mismatch", size=grayscale.size, expected=expected)

    channel = np.asarray(grayscale, dtype=np.uint8)
    pixels = np.repeat(channel[:, :, np.newaxis], 4, axis=2)
    return NoiseMask.from_pixels(pixels, header.frames_count, header.frame_duration, header.canvas_size)

"""
Обёртка над zlib: примитив deflate/inflate для чанков и дельта-скриптов.
"""

import zlib

from codec_errors import DecompressionError
from settings import DEFLATE_LEVEL


def deflate(data: bytes, level: int = DEFLATE_LEVEL) -> bytes:
    return zlib.compress(data, level)


def inflate(data: bytes) -> bytes:
    decompressor = zlib.decompressobj()

    try:
        output = decompressor.decompress(data)
        output += decompressor.flush()
    except zlib.error as e:
        raise DecompressionError(f"Inflate failed: {e}") from e

    if not decompressor.eof:
        raise DecompressionError("Inflate failed: truncated stream")
    if decompressor.unused_data:
        raise DecompressionError(
            f"Inflate failed: {len(decompressor.unused_data)} bytes after end of stream")

    return output

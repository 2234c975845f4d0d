"""
Контейнер из независимо сжатых чанков.

Формат (все числа little-endian uint32):
    count | length[0] ... length[count-1] | chunk[0] ... chunk[count-1]
Общая длина не хранится: последний чанк заканчивается вместе с буфером.
"""

import io
import struct
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Optional

from codec_errors import CorruptContainerError
from deflate_codec import deflate, inflate
from settings import DEFLATE_LEVEL, TEXT_CHUNK_SIZE


UINT32 = struct.Struct('<I')


@dataclass
class ChunkContainer:
    chunks: List[bytes] = field(default_factory=list)

    @property
    def lengths(self) -> List[int]:
        return [len(chunk) for chunk in self.chunks]

    def serialize(self) -> bytes:
        output = io.BytesIO()
        output.write(UINT32.pack(len(self.chunks)))

        for length in self.lengths:
            output.write(UINT32.pack(length))

        for chunk in self.chunks:
            output.write(chunk)

        return output.getvalue()

    @staticmethod
    def deserialize(data: bytes) -> 'ChunkContainer':
        pos = 0

        if len(data) < UINT32.size:
            raise CorruptContainerError("Container too small: missing chunk count")

        count = UINT32.unpack_from(data, pos)[0]
        pos += UINT32.size

        if pos + count * UINT32.size > len(data):
            raise CorruptContainerError(f"Length table for {count} chunks overruns the buffer")

        lengths = []
        for _ in range(count):
            lengths.append(UINT32.unpack_from(data, pos)[0])
            pos += UINT32.size

        remaining = len(data) - pos
        if sum(lengths) != remaining:
            raise CorruptContainerError(
                f"Declared chunk lengths ({sum(lengths)} bytes) do not match payload ({remaining} bytes)")

        chunks = []
        for length in lengths:
            chunks.append(data[pos:pos + length])
            pos += length

        return ChunkContainer(chunks)


def peek_chunk_count(data: bytes) -> Optional[int]:
    if len(data) < UINT32.size:
        return None
    return UINT32.unpack_from(data, 0)[0]


def split_chunks(data: bytes, chunk_size: int) -> List[bytes]:
    if chunk_size < 1:
        raise ValueError(f"Invalid chunk size: {chunk_size}")
    return [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]


def _map_chunks(func: Callable[[bytes], bytes], chunks: List[bytes],
                workers: Optional[int]) -> List[bytes]:
    if not workers or workers <= 1 or len(chunks) <= 1:
        return [func(chunk) for chunk in chunks]

    # zlib отпускает GIL, так что потоков достаточно; map сохраняет порядок чанков
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(func, chunks))


def compress_chunked(data: bytes, chunk_size: int = TEXT_CHUNK_SIZE,
                     level: int = DEFLATE_LEVEL, workers: Optional[int] = None) -> bytes:
    chunks = split_chunks(data, chunk_size)
    compressed = _map_chunks(partial(deflate, level=level), chunks, workers)
    return ChunkContainer(compressed).serialize()


def decompress_chunked(data: bytes, workers: Optional[int] = None) -> bytes:
    container = ChunkContainer.deserialize(data)
    return b''.join(_map_chunks(inflate, container.chunks, workers))

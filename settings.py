"""
Пороговые значения и настройки студии сжатия.
"""

from dataclasses import dataclass
from typing import Optional


KIB = 1024
MIB = 1024 * KIB

# Границы включительные: файл ровно 10 KiB ещё идёт в Huffman
TEXT_HUFFMAN_MAX = 10 * KIB
TEXT_DELTA_MAX = 1 * MIB
IMAGE_LOSSY_MAX = 200 * KIB
IMAGE_LARGE_MIN = 10 * MIB

TEXT_CHUNK_SIZE = 512 * KIB
BINARY_CHUNK_SIZE = 1 * MIB

MAX_CHUNK_COUNT = 10000

# (len(base) + 1) * (len(target) + 1)
MAX_DELTA_CELLS = 1 << 27

DEFLATE_LEVEL = 6

TEXT_ENCODING = 'utf-8'
TEXT_ERRORS = 'surrogateescape'


@dataclass
class StudioSettings:
    text_chunk_size: int = TEXT_CHUNK_SIZE
    binary_chunk_size: int = BINARY_CHUNK_SIZE
    level: int = DEFLATE_LEVEL
    workers: Optional[int] = None
    max_delta_cells: int = MAX_DELTA_CELLS
    verbose: bool = True

    def __post_init__(self):
        if self.text_chunk_size < 1 or self.binary_chunk_size < 1:
            raise ValueError("Chunk size must be at least 1 byte")
        if not 0 <= self.level <= 9:
            raise ValueError(f"Invalid deflate level: {self.level}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"Invalid worker count: {self.workers}")
        if self.max_delta_cells < 1:
            raise ValueError("Delta cell limit must be positive")

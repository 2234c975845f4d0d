"""
Главный класс студии сжатия: выбирает алгоритм, сжимает и распаковывает
буферы и файлы, хранит предыдущую версию текста для дельта-сжатия.
"""

import os
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from chunk_codec import compress_chunked
from codec_errors import InputTooLargeError
from detection import detect_and_decode
from huffman import HuffmanEncoder, HuffmanNode, build_tree
from lcs_delta import compress_delta
from selection import CodecId, ContentCategory, SelectionDecision, choose_codec
from settings import MAX_CHUNK_COUNT, TEXT_ENCODING, TEXT_ERRORS, StudioSettings


LABEL_HUFFMAN = 'Huffman'
LABEL_DELTA = 'Delta(LCS)+deflate'
LABEL_CHUNKED = 'Chunk+deflate'
LABEL_PASSTHROUGH = 'Image (passthrough)'


@dataclass
class StudioResult:
    data: bytes
    algorithm: str
    original_size: int
    output_size: int
    tree: Optional[HuffmanNode] = None
    decision: Optional[SelectionDecision] = None

    @property
    def ratio(self) -> float:
        return (self.output_size / self.original_size * 100) if self.original_size > 0 else 0.0


def hr_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"

    value = float(size)
    for unit in ('KB', 'MB', 'GB'):
        value /= 1024
        if value < 1024 or unit == 'GB':
            break
    return f"{value:.2f} {unit}"


def _read_file(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def _write_file(path: str, data: bytes):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'wb') as f:
        f.write(data)


class CompressionStudio:
    def __init__(self, settings: Optional[StudioSettings] = None):
        self.settings = settings or StudioSettings()
        self.log: List[str] = []
        self._previous: Optional[bytes] = None

    @property
    def previous(self) -> Optional[bytes]:
        return self._previous

    def remember(self, previous: Optional[bytes]):
        self._previous = bytes(previous) if previous is not None else None

    def clear(self):
        self.log.clear()
        self._previous = None

    def _log(self, *parts):
        message = ' '.join(str(part) for part in parts)
        self.log.append(message)
        if self.settings.verbose:
            print(message)

    def choose(self, data: bytes, category: str,
               previous: Optional[bytes] = None) -> SelectionDecision:
        if previous is None:
            previous = self._previous

        return choose_codec(category, len(data), bool(previous),
                            text_chunk_size=self.settings.text_chunk_size,
                            binary_chunk_size=self.settings.binary_chunk_size)

    def compress(self, data: bytes, category: str,
                 previous: Optional[bytes] = None) -> StudioResult:
        if previous is None:
            previous = self._previous

        self._log('Detected type:', category, 'size', hr_size(len(data)))
        decision = self.choose(data, category, previous)
        self._log(decision.rationale)

        if decision.codec == CodecId.HUFFMAN:
            result = self._compress_huffman(data)

        elif decision.codec == CodecId.DELTA:
            try:
                result = self._compress_delta(data, previous)
            except InputTooLargeError as e:
                self._log(f"Delta not possible ({e}); falling back to Huffman")
                result = self._compress_huffman(data)

        elif decision.codec == CodecId.LOSSY_IMAGE:
            result = StudioResult(bytes(data), LABEL_PASSTHROUGH, len(data), len(data))

        else:
            chunk_size = max(decision.chunk_size, -(-len(data) // (MAX_CHUNK_COUNT - 1)))
            if chunk_size != decision.chunk_size:
                self._log(f"Chunk size raised to {chunk_size} bytes "
                          f"to stay under {MAX_CHUNK_COUNT} chunks")

            compressed = compress_chunked(data, chunk_size,
                                          level=self.settings.level,
                                          workers=self.settings.workers)
            result = StudioResult(compressed, LABEL_CHUNKED, len(data), len(compressed))

        result.decision = decision
        return result

    def _compress_huffman(self, data: bytes) -> StudioResult:
        text = data.decode(TEXT_ENCODING, TEXT_ERRORS)
        payload = HuffmanEncoder.encode(text)
        compressed = payload.serialize()

        self._log('Huffman table has', len(payload.codes), 'symbols')
        return StudioResult(compressed, LABEL_HUFFMAN, len(data), len(compressed),
                            tree=payload.tree)

    def _compress_delta(self, data: bytes, previous: bytes) -> StudioResult:
        base = previous.decode(TEXT_ENCODING, TEXT_ERRORS)
        target = data.decode(TEXT_ENCODING, TEXT_ERRORS)

        compressed = compress_delta(base, target, level=self.settings.level,
                                    max_cells=self.settings.max_delta_cells)

        self._log('Delta produced', hr_size(len(compressed)))
        return StudioResult(compressed, LABEL_DELTA, len(data), len(compressed))

    def decompress(self, data: bytes, previous: Optional[bytes] = None) -> StudioResult:
        if previous is None:
            previous = self._previous

        detected = detect_and_decode(data, previous, workers=self.settings.workers)
        self._log('Detected', detected.format, 'format')

        tree = None
        if detected.format == CodecId.HUFFMAN:
            text = detected.data.decode(TEXT_ENCODING, TEXT_ERRORS)
            tree = build_tree(Counter(text))

        return StudioResult(detected.data, detected.label, len(detected.data), len(data),
                            tree=tree)

    def compress_file(self, file_path: str, output_path: str,
                      previous_path: Optional[str] = None,
                      category: Optional[str] = None) -> StudioResult:
        data = _read_file(file_path)
        previous = _read_file(previous_path) if previous_path else None
        category = category or ContentCategory.from_filename(Path(file_path).name)

        result = self.compress(data, category, previous)
        _write_file(output_path, result.data)

        self._log(f"Compressed {file_path} -> {output_path}: "
                  f"{result.original_size} -> {result.output_size} bytes "
                  f"({result.ratio:.1f}%) [{result.algorithm}]")
        return result

    def decompress_file(self, file_path: str, output_path: str,
                        previous_path: Optional[str] = None) -> StudioResult:
        data = _read_file(file_path)
        previous = _read_file(previous_path) if previous_path else None

        result = self.decompress(data, previous)
        _write_file(output_path, result.data)

        self._log(f"Decompressed {file_path} -> {output_path}: "
                  f"{result.output_size} -> {result.original_size} bytes [{result.algorithm}]")
        return result

"""
Выбор алгоритма сжатия по типу содержимого, размеру и наличию предыдущей версии.
Функция выбора чистая и определена для любых входных значений.
"""

import mimetypes
from dataclasses import dataclass
from typing import Optional

from settings import (BINARY_CHUNK_SIZE, IMAGE_LARGE_MIN, IMAGE_LOSSY_MAX, TEXT_CHUNK_SIZE,
                      TEXT_DELTA_MAX, TEXT_HUFFMAN_MAX)


class ContentCategory:
    TEXT = 'text'
    IMAGE = 'image'
    VIDEO = 'video'
    OTHER = 'other'

    ALL = (TEXT, IMAGE, VIDEO, OTHER)

    @staticmethod
    def from_filename(filename: str) -> str:
        if filename.lower().endswith('.txt'):
            return ContentCategory.TEXT

        mime_type, _ = mimetypes.guess_type(filename)
        major = (mime_type or '').split('/')[0]

        if major in (ContentCategory.TEXT, ContentCategory.IMAGE, ContentCategory.VIDEO):
            return major
        return ContentCategory.OTHER


class CodecId:
    HUFFMAN = 'huffman'
    DELTA = 'delta'
    CHUNKED = 'chunked'
    LOSSY_IMAGE = 'lossy-image'


@dataclass(frozen=True)
class SelectionDecision:
    codec: str
    rationale: str
    chunk_size: Optional[int] = None


def choose_codec(category: str, size: int, has_previous: bool,
                 text_chunk_size: int = TEXT_CHUNK_SIZE,
                 binary_chunk_size: int = BINARY_CHUNK_SIZE) -> SelectionDecision:
    if category == ContentCategory.TEXT:
        if size <= TEXT_HUFFMAN_MAX:
            return SelectionDecision(CodecId.HUFFMAN, "Huffman compression (best for small text)")

        if size <= TEXT_DELTA_MAX:
            if has_previous:
                return SelectionDecision(CodecId.DELTA, "LCS delta against the previous version")
            return SelectionDecision(CodecId.HUFFMAN,
                                     "No previous version stored; falling back to Huffman")

        return SelectionDecision(CodecId.CHUNKED, "Large text -> chunking + deflate",
                                 text_chunk_size)

    if category == ContentCategory.IMAGE:
        if size <= IMAGE_LOSSY_MAX:
            return SelectionDecision(CodecId.LOSSY_IMAGE, "Small image -> lossy recompress")

        if size > IMAGE_LARGE_MIN:
            return SelectionDecision(CodecId.CHUNKED,
                                     "Large image -> chunking + deflate (parallelizable)",
                                     text_chunk_size)
        return SelectionDecision(CodecId.CHUNKED, "Image -> chunking + deflate", text_chunk_size)

    return SelectionDecision(CodecId.CHUNKED, "Binary/Video/Other -> chunking + deflate",
                             binary_chunk_size)

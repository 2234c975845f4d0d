"""
Определение формата сжатого буфера без явной метки.

Пробы выполняются в фиксированном порядке: chunked -> Huffman -> deflate/delta.
Каждая проба возвращает результат или None; первая успешная завершает поиск.

Известное ограничение: небольшой бинарный буфер, первые 4 байта которого похожи
на правдоподобное число чанков, будет сначала проверен как контейнер.
Проба отклоняет его только если полная распаковка контейнера не удалась.
"""

from typing import Callable, NamedTuple, Optional, Sequence, Tuple

from chunk_codec import UINT32, decompress_chunked, peek_chunk_count
from codec_errors import CodecError, MalformedDeltaError, UnrecognizedFormatError
from deflate_codec import inflate
from huffman import HuffmanEncoder, HuffmanPayload
from lcs_delta import EditOp, apply_delta, decode_script
from selection import CodecId
from settings import MAX_CHUNK_COUNT, TEXT_ENCODING, TEXT_ERRORS


FORMAT_DEFLATE = 'deflate'


class DetectionResult(NamedTuple):
    format: str
    data: bytes
    label: str


class DetectionContext(NamedTuple):
    previous: Optional[bytes] = None
    workers: Optional[int] = None


def probe_chunked(data: bytes, context: DetectionContext) -> Optional[DetectionResult]:
    count = peek_chunk_count(data)
    if count is None:
        return None

    # Пустой вход даёт контейнер из одного заголовка
    if count == 0 and len(data) == UINT32.size:
        return DetectionResult(CodecId.CHUNKED, b'', 'Chunk+deflate (decompressed)')

    if not 0 < count < MAX_CHUNK_COUNT:
        return None

    try:
        decoded = decompress_chunked(data, workers=context.workers)
    except CodecError:
        return None

    return DetectionResult(CodecId.CHUNKED, decoded, 'Chunk+deflate (decompressed)')


def probe_huffman(data: bytes, context: DetectionContext) -> Optional[DetectionResult]:
    if not data.startswith(b'{'):
        return None

    try:
        text = HuffmanEncoder.decode(HuffmanPayload.deserialize(data))
        decoded = text.encode(TEXT_ENCODING, TEXT_ERRORS)
    except (CodecError, UnicodeError):
        return None

    return DetectionResult(CodecId.HUFFMAN, decoded, 'Huffman (decompressed)')


def _apply_to_previous(previous: bytes, ops: Sequence[EditOp]) -> bytes:
    if any(not isinstance(op.symbol, str) for op in ops):
        return apply_delta(bytes(previous), ops)

    base = previous.decode(TEXT_ENCODING, TEXT_ERRORS)
    return apply_delta(base, ops).encode(TEXT_ENCODING, TEXT_ERRORS)


def probe_deflate(data: bytes, context: DetectionContext) -> Optional[DetectionResult]:
    try:
        inflated = inflate(data)
    except CodecError:
        return None

    if context.previous is not None:
        try:
            ops = decode_script(inflated)
            recovered = _apply_to_previous(context.previous, ops)
        except (MalformedDeltaError, UnicodeError):
            pass
        else:
            return DetectionResult(CodecId.DELTA, recovered, 'Delta (decompressed)')

    return DetectionResult(FORMAT_DEFLATE, inflated, 'deflate.inflate')


Probe = Callable[[bytes, DetectionContext], Optional[DetectionResult]]

PROBES: Tuple[Probe, ...] = (probe_chunked, probe_huffman, probe_deflate)


def detect_and_decode(data: bytes, previous: Optional[bytes] = None,
                      workers: Optional[int] = None) -> DetectionResult:
    context = DetectionContext(previous, workers)

    for probe in PROBES:
        result = probe(data, context)
        if result is not None:
            return result

    raise UnrecognizedFormatError(f"Unrecognized format ({len(data)} bytes)")


def detect_format(data: bytes, previous: Optional[bytes] = None) -> str:
    return detect_and_decode(data, previous).format

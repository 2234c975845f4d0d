"""
Дельта-сжатие на основе наибольшей общей подпоследовательности (LCS).

Таблица dp[i][j] хранит длину LCS для base[i:] и target[j:] и заполняется снизу вверх.
Результат - список операций match/insert/delete; базовая версия в него не входит,
поэтому при распаковке нужна та же предыдущая версия, что и при сжатии.
"""

import json
from array import array
from typing import List, NamedTuple, Sequence

from codec_errors import InputTooLargeError, MalformedDeltaError
from deflate_codec import deflate, inflate
from settings import DEFLATE_LEVEL, MAX_DELTA_CELLS


class OpKind:
    MATCH = 'match'
    INSERT = 'insert'
    DELETE = 'delete'

    ALL = (MATCH, INSERT, DELETE)


class EditOp(NamedTuple):
    kind: str
    symbol: object

    def __repr__(self):
        return f"{self.kind.upper()}({self.symbol!r})"


def lcs_table(base: Sequence, target: Sequence,
              max_cells: int = MAX_DELTA_CELLS) -> List[array]:
    n = len(base)
    m = len(target)

    cells = (n + 1) * (m + 1)
    if cells > max_cells:
        raise InputTooLargeError(
            f"Delta table needs {cells} cells ({n} x {m}), limit is {max_cells}")

    dp = [array('I', [0]) * (m + 1) for _ in range(n + 1)]

    for i in range(n - 1, -1, -1):
        row = dp[i]
        below = dp[i + 1]
        symbol = base[i]

        for j in range(m - 1, -1, -1):
            if symbol == target[j]:
                row[j] = below[j + 1] + 1
            elif below[j] >= row[j + 1]:
                row[j] = below[j]
            else:
                row[j] = row[j + 1]

    return dp


def extract_delta(base: Sequence, target: Sequence,
                  max_cells: int = MAX_DELTA_CELLS) -> List[EditOp]:
    dp = lcs_table(base, target, max_cells)

    ops: List[EditOp] = []
    i = 0
    j = 0
    n = len(base)
    m = len(target)

    while i < n and j < m:
        if base[i] == target[j]:
            ops.append(EditOp(OpKind.MATCH, base[i]))
            i += 1
            j += 1
        elif dp[i + 1][j] >= dp[i][j + 1]:
            ops.append(EditOp(OpKind.DELETE, base[i]))
            i += 1
        else:
            ops.append(EditOp(OpKind.INSERT, target[j]))
            j += 1

    ops.extend(EditOp(OpKind.DELETE, symbol) for symbol in base[i:])
    ops.extend(EditOp(OpKind.INSERT, symbol) for symbol in target[j:])

    return ops


def _join(symbols: list, like: Sequence):
    if isinstance(like, str):
        if not all(isinstance(s, str) for s in symbols):
            raise MalformedDeltaError("Text delta contains non-text symbols")
        return ''.join(symbols)

    if isinstance(like, (bytes, bytearray)):
        try:
            return type(like)(symbols)
        except (TypeError, ValueError) as e:
            raise MalformedDeltaError(f"Binary delta contains invalid symbols: {e}") from e

    return symbols


def apply_delta(base: Sequence, ops: Sequence[EditOp]):
    # base не читается: порядок и содержимое целиком задаёт скрипт
    output = []

    for op in ops:
        if op.kind == OpKind.MATCH or op.kind == OpKind.INSERT:
            output.append(op.symbol)
        elif op.kind != OpKind.DELETE:
            raise MalformedDeltaError(f"Unknown edit operation: {op.kind!r}")

    return _join(output, base)


def match_count(ops: Sequence[EditOp]) -> int:
    return sum(1 for op in ops if op.kind == OpKind.MATCH)


def encode_script(ops: Sequence[EditOp]) -> bytes:
    script = [{'type': op.kind, 'char': op.symbol} for op in ops]
    return json.dumps(script, ensure_ascii=True, separators=(',', ':')).encode('ascii')


def decode_script(data: bytes) -> List[EditOp]:
    try:
        script = json.loads(data.decode('utf-8'))
    except (ValueError, RecursionError) as e:
        raise MalformedDeltaError(f"Edit script is not valid JSON: {e}") from e

    if not isinstance(script, list):
        raise MalformedDeltaError("Edit script must be a list")

    ops = []
    for entry in script:
        if not isinstance(entry, dict) or 'char' not in entry:
            raise MalformedDeltaError(f"Invalid edit operation: {entry!r}")
        if entry.get('type') not in OpKind.ALL:
            raise MalformedDeltaError(f"Unknown edit operation: {entry.get('type')!r}")
        ops.append(EditOp(entry['type'], entry['char']))

    return ops


def compress_delta(base: Sequence, target: Sequence, level: int = DEFLATE_LEVEL,
                   max_cells: int = MAX_DELTA_CELLS) -> bytes:
    ops = extract_delta(base, target, max_cells)
    return deflate(encode_script(ops), level)


def decompress_delta(base: Sequence, data: bytes):
    return apply_delta(base, decode_script(inflate(data)))

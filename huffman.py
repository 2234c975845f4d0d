"""
Реализует кодирование Хаффмана для текстовых файлов.
Частые символы получают короткие коды; таблица кодов хранится вместе с данными,
поэтому для распаковки ничего кроме самого буфера не нужно.
"""

import heapq
import itertools
import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, NamedTuple, Optional, Sequence

from bitpack import BitReader, BitWriter
from codec_errors import MalformedTableError, TruncatedStreamError


METADATA_SEPARATOR = b'\n'


class Code(NamedTuple):
    value: int
    length: int

    def __str__(self):
        return format(self.value, '0{}b'.format(self.length))

    @staticmethod
    def parse(text: str) -> 'Code':
        if not isinstance(text, str) or not text or set(text) - {'0', '1'}:
            raise MalformedTableError(f"Invalid code: {text!r}")
        return Code(int(text, 2), len(text))


class HuffmanNode:
    def __init__(self, symbol: Optional[Hashable] = None, freq: int = 0,
                 left: Optional['HuffmanNode'] = None,
                 right: Optional['HuffmanNode'] = None):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.freq})"
        return f"HuffmanNode(freq={self.freq})"


class HuffmanTree:
    def __init__(self):
        self.root: Optional[HuffmanNode] = None
        self.codes: Dict[Hashable, Code] = {}

    def build(self, frequencies: Dict[Hashable, int]):
        if not frequencies:
            return

        # Порядковый номер разрешает равные частоты одинаково при каждом запуске
        order = itertools.count()
        heap = [(freq, next(order), HuffmanNode(symbol=symbol, freq=freq))
                for symbol, freq in frequencies.items()]
        heapq.heapify(heap)

        while len(heap) > 1:
            left_freq, _, left = heapq.heappop(heap)
            right_freq, _, right = heapq.heappop(heap)

            parent = HuffmanNode(freq=left_freq + right_freq, left=left, right=right)
            heapq.heappush(heap, (parent.freq, next(order), parent))

        self.root = heap[0][2]
        self._generate_codes()

    def _generate_codes(self):
        self.codes.clear()

        if self.root is None:
            return

        if self.root.is_leaf:
            self.codes[self.root.symbol] = Code(0, 1)
            return

        stack = [(self.root, 0, 0)]
        while stack:
            node, value, length = stack.pop()

            if node.is_leaf:
                self.codes[node.symbol] = Code(value, length)
                continue

            stack.append((node.right, (value << 1) | 1, length + 1))
            stack.append((node.left, value << 1, length + 1))


@dataclass
class HuffmanPayload:
    data: bytes = b''
    codes: Dict[Hashable, Code] = field(default_factory=dict)
    padding: int = 0
    kind: type = str
    tree: Optional[HuffmanNode] = field(default=None, compare=False, repr=False)

    def serialize(self) -> bytes:
        if self.kind is not str:
            raise TypeError("Only text payloads have a wire format")

        metadata = {
            'map': {symbol: str(code) for symbol, code in self.codes.items()},
            'padding': self.padding,
        }
        header = json.dumps(metadata, ensure_ascii=True, separators=(',', ':'))

        return header.encode('ascii') + METADATA_SEPARATOR + self.data

    @staticmethod
    def deserialize(data: bytes) -> 'HuffmanPayload':
        pos = data.find(METADATA_SEPARATOR)
        if pos == -1:
            raise MalformedTableError("Missing metadata separator")

        try:
            metadata = json.loads(data[:pos].decode('ascii'))
        except (ValueError, RecursionError) as e:
            raise MalformedTableError(f"Invalid metadata: {e}") from e

        if not isinstance(metadata, dict) or not isinstance(metadata.get('map'), dict):
            raise MalformedTableError("Metadata has no code map")

        padding = metadata.get('padding', 0)
        if isinstance(padding, bool) or not isinstance(padding, int) or not 0 <= padding <= 7:
            raise MalformedTableError(f"Invalid padding: {padding!r}")

        codes = {}
        for symbol, code in metadata['map'].items():
            if len(symbol) != 1:
                raise MalformedTableError(f"Invalid symbol: {symbol!r}")
            codes[symbol] = Code.parse(code)

        return HuffmanPayload(data=data[pos + 1:], codes=codes, padding=padding)


def build_tree(frequencies: Dict[Hashable, int]) -> Optional[HuffmanNode]:
    tree = HuffmanTree()
    tree.build(frequencies)
    return tree.root


def _collect(symbols: List, kind: type):
    if kind is str:
        return ''.join(symbols)
    if kind in (bytes, bytearray):
        return kind(symbols)
    return symbols


class HuffmanEncoder:
    @staticmethod
    def encode(data: Sequence) -> HuffmanPayload:
        kind = type(data) if isinstance(data, (str, bytes, bytearray)) else list

        if not data:
            return HuffmanPayload(kind=kind)

        frequencies = Counter(data)
        if None in frequencies:
            raise ValueError("None cannot be used as a Huffman symbol")

        tree = HuffmanTree()
        tree.build(frequencies)

        writer = BitWriter()
        codes = tree.codes
        for symbol in data:
            code = codes[symbol]
            writer.write(code.value, code.length)

        encoded, padding = writer.to_bytes()

        return HuffmanPayload(data=encoded, codes=dict(codes), padding=padding,
                              kind=kind, tree=tree.root)

    @staticmethod
    def decode(payload: HuffmanPayload):
        decode_table: Dict[Code, Hashable] = {}
        for symbol, code in payload.codes.items():
            if code in decode_table:
                raise MalformedTableError(
                    f"Code {code} is shared by {decode_table[code]!r} and {symbol!r}")
            decode_table[code] = symbol

        reader = BitReader(payload.data, payload.padding)

        if not decode_table:
            if len(reader):
                raise TruncatedStreamError("Bit stream without a code table")
            return _collect([], payload.kind)

        max_length = max(code.length for code in decode_table)

        output = []
        value = 0
        length = 0

        for bit in reader:
            value = (value << 1) | bit
            length += 1

            symbol = decode_table.get(Code(value, length))
            if symbol is not None:
                output.append(symbol)
                value = 0
                length = 0
            elif length >= max_length:
                raise TruncatedStreamError("Bit sequence matches no code")

        if length:
            raise TruncatedStreamError(f"Stream ends inside a code ({length} dangling bits)")

        return _collect(output, payload.kind)


def compress_with_huffman(text: str) -> bytes:
    return HuffmanEncoder.encode(text).serialize()


def decompress_with_huffman(data: bytes) -> str:
    return HuffmanEncoder.decode(HuffmanPayload.deserialize(data))


def render_tree(node: Optional[HuffmanNode]) -> str:
    if node is None:
        return '(empty)'

    lines = []

    def walk(current: HuffmanNode, prefix: str, edge: str):
        if current.is_leaf:
            lines.append(f"{prefix}{edge}{current.symbol!r} ({current.freq})")
            return

        lines.append(f"{prefix}{edge}* ({current.freq})")
        walk(current.left, prefix + '  ', '0: ')
        walk(current.right, prefix + '  ', '1: ')

    walk(node, '', '')
    return '\n'.join(lines)

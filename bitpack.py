"""
Упаковка последовательностей бит в байты и обратно.
Биты пишутся начиная со старшего; хвост последнего байта добивается нулями,
а число добавленных бит (0-7) возвращается отдельно.
"""

from typing import Iterable, Iterator, List, Tuple

from codec_errors import TruncatedStreamError


class BitWriter:
    __slots__ = ('buffer', 'acc', 'nbits', 'total_bits')

    def __init__(self):
        self.buffer = bytearray()
        self.acc = 0
        self.nbits = 0
        self.total_bits = 0

    def write_bit(self, bit: int):
        self.write(1 if bit else 0, 1)

    def write(self, value: int, length: int):
        self.acc = (self.acc << length) | (value & ((1 << length) - 1))
        self.nbits += length
        self.total_bits += length

        while self.nbits >= 8:
            self.nbits -= 8
            self.buffer.append((self.acc >> self.nbits) & 0xFF)

        self.acc &= (1 << self.nbits) - 1

    def to_bytes(self) -> Tuple[bytes, int]:
        padding = (8 - self.nbits % 8) % 8
        output = bytearray(self.buffer)

        if self.nbits:
            output.append((self.acc << padding) & 0xFF)

        return bytes(output), padding


class BitReader:
    def __init__(self, data: bytes, padding: int = 0):
        if not 0 <= padding <= 7:
            raise TruncatedStreamError(f"Invalid padding bit count: {padding}")
        if padding and not data:
            raise TruncatedStreamError("Padding declared for an empty bit stream")

        self.data = data
        self.padding = padding

    def __len__(self) -> int:
        return len(self.data) * 8 - self.padding

    def __iter__(self) -> Iterator[int]:
        remaining = len(self)

        for byte in self.data:
            for shift in range(7, -1, -1):
                if remaining == 0:
                    return
                remaining -= 1
                yield (byte >> shift) & 1


def pack(bits: Iterable[int]) -> Tuple[bytes, int]:
    writer = BitWriter()
    for bit in bits:
        writer.write_bit(bit)
    return writer.to_bytes()


def unpack(data: bytes, padding: int) -> List[int]:
    return list(BitReader(data, padding))

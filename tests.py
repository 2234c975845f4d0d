import io
import json
import os
import random
import shutil
import sys
import tempfile
import unittest
import zlib
from contextlib import redirect_stderr, redirect_stdout

from bitpack import BitReader, BitWriter, pack, unpack
from chunk_codec import (ChunkContainer, compress_chunked, decompress_chunked,
                         peek_chunk_count, split_chunks)
from codec_errors import (CodecError, CorruptContainerError, DecompressionError,
                          InputTooLargeError, MalformedDeltaError, MalformedTableError,
                          TruncatedStreamError, UnrecognizedFormatError)
from deflate_codec import deflate, inflate
from detection import (FORMAT_DEFLATE, PROBES, detect_and_decode, detect_format,
                       probe_chunked, probe_deflate, probe_huffman)
from huffman import (Code, HuffmanEncoder, HuffmanPayload, build_tree, compress_with_huffman,
                     decompress_with_huffman, render_tree)
from lcs_delta import (EditOp, OpKind, apply_delta, compress_delta, decode_script,
                       decompress_delta, encode_script, extract_delta, match_count)
from main import main
from selection import CodecId, ContentCategory, SelectionDecision, choose_codec
from settings import (BINARY_CHUNK_SIZE, KIB, MAX_CHUNK_COUNT, MIB, TEXT_CHUNK_SIZE,
                      StudioSettings)
from studio import CompressionStudio, hr_size


def lcs_length(a, b):
    previous = [0] * (len(b) + 1)
    for x in a:
        current = [0]
        for j, y in enumerate(b):
            current.append(previous[j] + 1 if x == y else max(previous[j + 1], current[j]))
        previous = current
    return previous[-1]


class TestBitPacking(unittest.TestCase):
    def test_pack_pads_last_byte(self):
        data, padding = pack([1, 0, 1])
        self.assertEqual(data, b'\xa0')
        self.assertEqual(padding, 5)

    def test_pack_full_byte(self):
        data, padding = pack([1, 1, 1, 1, 0, 0, 0, 0])
        self.assertEqual(data, b'\xf0')
        self.assertEqual(padding, 0)

    def test_empty_sequence(self):
        data, padding = pack([])
        self.assertEqual(data, b'')
        self.assertEqual(padding, 0)
        self.assertEqual(unpack(data, padding), [])

    def test_roundtrip(self):
        random.seed(7)
        for length in (1, 7, 8, 9, 15, 16, 17, 100):
            bits = [random.randint(0, 1) for _ in range(length)]
            self.assertEqual(unpack(*pack(bits)), bits)

    def test_writer_multi_bit_codes(self):
        writer = BitWriter()
        writer.write(0b101, 3)
        writer.write(0b11, 2)
        self.assertEqual(writer.to_bytes(), (b'\xb8', 3))
        self.assertEqual(writer.total_bits, 5)

    def test_writer_long_code_crosses_bytes(self):
        writer = BitWriter()
        writer.write(0b1, 1)
        writer.write(0xFFFF, 16)
        data, padding = writer.to_bytes()
        self.assertEqual(data, b'\xff\xff\x80')
        self.assertEqual(padding, 7)

    def test_reader_length(self):
        reader = BitReader(b'\xff\x00', 3)
        self.assertEqual(len(reader), 13)
        self.assertEqual(list(reader), [1] * 8 + [0] * 5)

    def test_invalid_padding(self):
        with self.assertRaises(TruncatedStreamError):
            unpack(b'\x00', 8)
        with self.assertRaises(TruncatedStreamError):
            unpack(b'', 3)


class TestHuffmanEncoding(unittest.TestCase):
    def test_frequent_symbol_gets_shortest_code(self):
        data = "aaaabbbccd"
        payload = HuffmanEncoder.encode(data)

        shortest = min(code.length for code in payload.codes.values())
        self.assertEqual(payload.codes['a'].length, shortest)
        self.assertEqual(HuffmanEncoder.decode(payload), data)

    def test_empty_input(self):
        payload = HuffmanEncoder.encode("")
        self.assertEqual(payload.data, b'')
        self.assertEqual(payload.padding, 0)
        self.assertIsNone(payload.tree)
        self.assertEqual(HuffmanEncoder.decode(payload), "")
        self.assertIsNone(build_tree({}))

    def test_single_symbol_uses_one_bit(self):
        payload = HuffmanEncoder.encode("AAAA")
        self.assertEqual(payload.codes, {'A': Code(0, 1)})
        self.assertEqual(payload.data, b'\x00')
        self.assertEqual(payload.padding, 4)
        self.assertTrue(payload.tree.is_leaf)
        self.assertEqual(HuffmanEncoder.decode(payload), "AAAA")

    def test_codes_are_prefix_free(self):
        payload = HuffmanEncoder.encode("The quick brown fox jumps over the lazy dog")
        codes = [str(code) for code in payload.codes.values()]
        for first in codes:
            for second in codes:
                if first != second:
                    self.assertFalse(second.startswith(first))

    def test_tree_frequencies(self):
        payload = HuffmanEncoder.encode("abracadabra")
        leaves = []

        def check(node):
            if node.is_leaf:
                leaves.append(node.symbol)
                return node.freq
            self.assertEqual(node.freq, check(node.left) + check(node.right))
            return node.freq

        self.assertEqual(check(payload.tree), 11)
        self.assertEqual(sorted(leaves), sorted(set("abracadabra")))

    def test_deterministic(self):
        first = HuffmanEncoder.encode("mississippi river")
        second = HuffmanEncoder.encode("mississippi river")
        self.assertEqual(first, second)

    def test_bytes_and_lists(self):
        data = bytes(range(256)) * 3
        self.assertEqual(HuffmanEncoder.decode(HuffmanEncoder.encode(data)), data)

        symbols = [1, 2, 2, 3, 3, 3]
        self.assertEqual(HuffmanEncoder.decode(HuffmanEncoder.encode(symbols)), symbols)

    def test_none_symbol_rejected(self):
        with self.assertRaises(ValueError):
            HuffmanEncoder.encode([1, None, 2])

    def test_compression_wrapper(self):
        data = "The quick brown fox jumps over the lazy dog\nи ещё строка\n"
        compressed = compress_with_huffman(data)
        self.assertEqual(decompress_with_huffman(compressed), data)

    def test_wire_header_has_no_raw_newline(self):
        data = "line one\nline two\n" * 20
        compressed = compress_with_huffman(data)

        header = compressed[:compressed.index(b'\n')]
        metadata = json.loads(header)
        self.assertIn('\n', metadata['map'])
        self.assertIn(metadata['padding'], range(8))

    def test_large_text(self):
        data = "Lorem ipsum dolor sit amet " * 200
        self.assertEqual(decompress_with_huffman(compress_with_huffman(data)), data)

    def test_non_injective_table(self):
        payload = HuffmanPayload(data=b'\x00', codes={'a': Code(0, 1), 'b': Code(0, 1)},
                                 padding=7)
        with self.assertRaises(MalformedTableError):
            HuffmanEncoder.decode(payload)

    def test_truncated_stream(self):
        codes = {'a': Code(0, 1), 'b': Code(0b10, 2), 'c': Code(0b11, 2)}
        payload = HuffmanPayload(data=b'\x80', codes=codes, padding=7)
        with self.assertRaises(TruncatedStreamError):
            HuffmanEncoder.decode(payload)

    def test_bits_without_table(self):
        with self.assertRaises(TruncatedStreamError):
            HuffmanEncoder.decode(HuffmanPayload(data=b'\x01'))

    def test_malformed_metadata(self):
        bad_inputs = [
            b'no separator here',
            b'not json\n\x00',
            b'[1, 2]\n\x00',
            b'{"map": {"a": "0"}, "padding": 9}\n\x00',
            b'{"map": {"a": "012"}, "padding": 0}\n\x00',
            b'{"map": {"ab": "0"}, "padding": 0}\n\x00',
        ]
        for data in bad_inputs:
            with self.assertRaises(MalformedTableError):
                HuffmanPayload.deserialize(data)

    def test_render_tree(self):
        payload = HuffmanEncoder.encode("aaaabbbccd")
        rendered = render_tree(payload.tree)
        self.assertTrue(rendered.startswith('* (10)'))
        self.assertIn("'a' (4)", rendered)
        self.assertEqual(render_tree(None), '(empty)')


class TestLcsDelta(unittest.TestCase):
    def test_kitten_sitting(self):
        ops = extract_delta("kitten", "sitting")
        self.assertEqual(apply_delta("kitten", ops), "sitting")
        self.assertEqual(match_count(ops), 4)

    def test_tie_break_prefers_delete(self):
        ops = extract_delta("ab", "ba")
        self.assertEqual(ops, [
            EditOp(OpKind.DELETE, 'a'),
            EditOp(OpKind.MATCH, 'b'),
            EditOp(OpKind.INSERT, 'a'),
        ])

    def test_empty_sides(self):
        self.assertEqual(extract_delta("", ""), [])
        self.assertEqual(extract_delta("", "ab"),
                         [EditOp(OpKind.INSERT, 'a'), EditOp(OpKind.INSERT, 'b')])
        self.assertEqual(extract_delta("ab", ""),
                         [EditOp(OpKind.DELETE, 'a'), EditOp(OpKind.DELETE, 'b')])

    def test_identical(self):
        ops = extract_delta("same text", "same text")
        self.assertTrue(all(op.kind == OpKind.MATCH for op in ops))

    def test_match_count_equals_lcs(self):
        random.seed(11)
        for _ in range(20):
            base = ''.join(random.choice('abc') for _ in range(random.randint(0, 30)))
            target = ''.join(random.choice('abc') for _ in range(random.randint(0, 30)))
            ops = extract_delta(base, target)
            self.assertEqual(apply_delta(base, ops), target)
            self.assertEqual(match_count(ops), lcs_length(base, target))

    def test_bytes(self):
        ops = extract_delta(b'abc', b'abd')
        self.assertEqual(apply_delta(b'abc', ops), b'abd')

    def test_input_too_large(self):
        with self.assertRaises(InputTooLargeError):
            extract_delta("abcd", "abcd", max_cells=10)

    def test_script_roundtrip(self):
        ops = extract_delta("kitten", "sitting")
        self.assertEqual(decode_script(encode_script(ops)), ops)

    def test_wire_format(self):
        compressed = compress_delta("kitten", "sitting")
        script = json.loads(zlib.decompress(compressed))
        self.assertEqual(set(script[0]), {'type', 'char'})
        self.assertEqual(decompress_delta("kitten", compressed), "sitting")

    def test_malformed_script(self):
        for data in (b'{"type": "match"}', b'not json', b'[{"type": "move", "char": "x"}]',
                     b'[{"type": "match"}]'):
            with self.assertRaises(MalformedDeltaError):
                decode_script(data)

        with self.assertRaises(MalformedDeltaError):
            apply_delta("abc", [EditOp('move', 'x')])


class TestDeflate(unittest.TestCase):
    def test_roundtrip(self):
        data = b"deflate me " * 50
        self.assertEqual(inflate(deflate(data)), data)
        self.assertEqual(inflate(deflate(b'')), b'')

    def test_corrupt_input(self):
        compressed = deflate(b"some data to compress" * 10)
        for data in (b'garbage', compressed[:-4], compressed + b'tail', b''):
            with self.assertRaises(DecompressionError):
                inflate(data)


class TestChunkCodec(unittest.TestCase):
    def test_zero_buffer_three_chunks(self):
        data = b'\x00' * (3 * MIB // 2)
        compressed = compress_chunked(data, 512 * KIB)

        self.assertEqual(peek_chunk_count(compressed), 3)
        container = ChunkContainer.deserialize(compressed)
        self.assertEqual(len(container.chunks), 3)
        for chunk in container.chunks:
            self.assertEqual(zlib.decompress(chunk), b'\x00' * (512 * KIB))

        self.assertEqual(decompress_chunked(compressed), data)

    def test_empty_buffer(self):
        compressed = compress_chunked(b'', 16)
        self.assertEqual(compressed, b'\x00\x00\x00\x00')
        self.assertEqual(decompress_chunked(compressed), b'')

    def test_chunk_sizes(self):
        data = bytes(range(256)) * 5 + b'tail'
        for chunk_size in (1, 7, 1000, len(data), len(data) + 1):
            self.assertEqual(decompress_chunked(compress_chunked(data, chunk_size)), data)

    def test_split_chunks(self):
        self.assertEqual(split_chunks(b'abcdefg', 3), [b'abc', b'def', b'g'])
        with self.assertRaises(ValueError):
            split_chunks(b'abc', 0)

    def test_header_layout(self):
        compressed = compress_chunked(b'abcdef', 4)
        container = ChunkContainer.deserialize(compressed)
        self.assertEqual(compressed[:4], b'\x02\x00\x00\x00')
        self.assertEqual(compressed[4:8], len(container.chunks[0]).to_bytes(4, 'little'))
        self.assertEqual(compressed[8:12], len(container.chunks[1]).to_bytes(4, 'little'))

    def test_parallel_matches_sequential(self):
        random.seed(3)
        data = bytes(random.randint(0, 15) for _ in range(50000))
        sequential = compress_chunked(data, 4096)
        parallel = compress_chunked(data, 4096, workers=4)
        self.assertEqual(sequential, parallel)
        self.assertEqual(decompress_chunked(parallel, workers=4), data)

    def test_corrupt_containers(self):
        valid = compress_chunked(b'hello world' * 10, 32)
        bad_inputs = [
            b'\x01\x00',
            b'\x02\x00\x00\x00\x05\x00\x00\x00',
            b'\x01\x00\x00\x00\xff\x00\x00\x00abc',
            valid + b'extra',
            valid[:-1],
        ]
        for data in bad_inputs:
            with self.assertRaises(CorruptContainerError):
                decompress_chunked(data)

    def test_bad_chunk_payload(self):
        data = ChunkContainer([b'xxxx']).serialize()
        with self.assertRaises(DecompressionError):
            decompress_chunked(data)


class TestSelection(unittest.TestCase):
    def test_text_boundaries(self):
        text = ContentCategory.TEXT
        self.assertEqual(choose_codec(text, 0, False).codec, CodecId.HUFFMAN)
        self.assertEqual(choose_codec(text, 10240, True).codec, CodecId.HUFFMAN)
        self.assertEqual(choose_codec(text, 10241, False).codec, CodecId.HUFFMAN)
        self.assertEqual(choose_codec(text, 10241, True).codec, CodecId.DELTA)
        self.assertEqual(choose_codec(text, 1048576, True).codec, CodecId.DELTA)
        self.assertEqual(choose_codec(text, 1048576, False).codec, CodecId.HUFFMAN)
        self.assertEqual(choose_codec(text, 1048577, True).codec, CodecId.CHUNKED)
        self.assertEqual(choose_codec(text, 1048577, False).chunk_size, TEXT_CHUNK_SIZE)

    def test_image_boundaries(self):
        image = ContentCategory.IMAGE
        self.assertEqual(choose_codec(image, 204800, False).codec, CodecId.LOSSY_IMAGE)
        self.assertEqual(choose_codec(image, 204801, False).codec, CodecId.CHUNKED)
        self.assertEqual(choose_codec(image, 10485760, False).codec, CodecId.CHUNKED)
        self.assertEqual(choose_codec(image, 10485761, True).codec, CodecId.CHUNKED)

    def test_other_categories(self):
        for category in (ContentCategory.VIDEO, ContentCategory.OTHER, 'unknown'):
            decision = choose_codec(category, 10, True)
            self.assertEqual(decision.codec, CodecId.CHUNKED)
            self.assertEqual(decision.chunk_size, BINARY_CHUNK_SIZE)

    def test_deterministic(self):
        first = choose_codec(ContentCategory.TEXT, 20000, False)
        second = choose_codec(ContentCategory.TEXT, 20000, False)
        self.assertEqual(first, second)
        self.assertIsInstance(first, SelectionDecision)
        self.assertIn("falling back", first.rationale)

    def test_category_from_filename(self):
        self.assertEqual(ContentCategory.from_filename('notes.txt'), ContentCategory.TEXT)
        self.assertEqual(ContentCategory.from_filename('NOTES.TXT'), ContentCategory.TEXT)
        self.assertEqual(ContentCategory.from_filename('page.html'), ContentCategory.TEXT)
        self.assertEqual(ContentCategory.from_filename('photo.png'), ContentCategory.IMAGE)
        self.assertEqual(ContentCategory.from_filename('movie.mp4'), ContentCategory.VIDEO)
        self.assertEqual(ContentCategory.from_filename('README'), ContentCategory.OTHER)


class TestDetection(unittest.TestCase):
    def test_probe_order(self):
        self.assertEqual(PROBES, (probe_chunked, probe_huffman, probe_deflate))

    def test_chunked(self):
        data = b'chunk me ' * 1000
        result = detect_and_decode(compress_chunked(data, 1024))
        self.assertEqual(result.format, CodecId.CHUNKED)
        self.assertEqual(result.data, data)

    def test_empty_chunked(self):
        result = detect_and_decode(compress_chunked(b'', 1024))
        self.assertEqual(result.format, CodecId.CHUNKED)
        self.assertEqual(result.data, b'')

    def test_huffman(self):
        text = "aaaabbbccd\nпривет"
        result = detect_and_decode(compress_with_huffman(text))
        self.assertEqual(result.format, CodecId.HUFFMAN)
        self.assertEqual(result.data, text.encode('utf-8'))

    def test_empty_huffman(self):
        self.assertEqual(detect_format(compress_with_huffman("")), CodecId.HUFFMAN)

    def test_delta_with_previous(self):
        compressed = compress_delta("kitten", "sitting")
        result = detect_and_decode(compressed, previous=b'kitten')
        self.assertEqual(result.format, CodecId.DELTA)
        self.assertEqual(result.data, b'sitting')

    def test_delta_without_previous(self):
        compressed = compress_delta("kitten", "sitting")
        result = detect_and_decode(compressed)
        self.assertEqual(result.format, FORMAT_DEFLATE)
        self.assertEqual(decode_script(result.data), extract_delta("kitten", "sitting"))

    def test_raw_deflate(self):
        result = detect_and_decode(deflate(b'plain deflate'), previous=b'unused')
        self.assertEqual(result.format, FORMAT_DEFLATE)
        self.assertEqual(result.data, b'plain deflate')

    def test_plausible_count_falls_through(self):
        with self.assertRaises(UnrecognizedFormatError):
            detect_and_decode(b'\x01\x00\x00\x00zz')

    def test_unrecognized(self):
        for data in (b'', b'\xff\xff\xff\xff garbage', b'{"map": 1}\n'):
            with self.assertRaises(UnrecognizedFormatError):
                detect_and_decode(data)

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(UnrecognizedFormatError, CodecError))
        self.assertTrue(issubclass(CodecError, ValueError))

    def test_deeply_nested_metadata(self):
        header = b'{"a":' + b'[' * 200000 + b'\n'
        with self.assertRaises(MalformedTableError):
            HuffmanPayload.deserialize(header)
        with self.assertRaises(UnrecognizedFormatError):
            detect_and_decode(header)

    def test_deeply_nested_script(self):
        nested = b'[' * 200000
        with self.assertRaises(MalformedDeltaError):
            decode_script(nested)

        result = detect_and_decode(deflate(nested), previous=b'base')
        self.assertEqual(result.format, FORMAT_DEFLATE)
        self.assertEqual(result.data, nested)

    def test_huffman_with_long_header(self):
        text = ''.join(chr(0x400 + i) for i in range(300)) * 2
        compressed = compress_with_huffman(text)
        self.assertGreater(compressed.index(b'\n'), KIB)

        result = detect_and_decode(compressed)
        self.assertEqual(result.format, CodecId.HUFFMAN)
        self.assertEqual(result.data, text.encode('utf-8'))


class TestStudio(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.studio = CompressionStudio(StudioSettings(verbose=False))

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_small_text_huffman(self):
        data = b"aaaabbbccd"
        result = self.studio.compress(data, ContentCategory.TEXT)
        self.assertEqual(result.algorithm, 'Huffman')
        self.assertEqual(result.decision.codec, CodecId.HUFFMAN)
        self.assertIsNotNone(result.tree)

        restored = self.studio.decompress(result.data)
        self.assertEqual(restored.data, data)
        self.assertEqual(restored.algorithm, 'Huffman (decompressed)')
        self.assertIsNotNone(restored.tree)

    def test_invalid_utf8_text_roundtrip(self):
        data = b'\xff\xfe binary-ish \x80 text'
        result = self.studio.compress(data, ContentCategory.TEXT)
        self.assertEqual(self.studio.decompress(result.data).data, data)

    def test_medium_text_delta(self):
        previous = b"line 0\n"
        data = b''.join(b"line %d\n" % i for i in range(1500))
        self.assertGreater(len(data), 10 * KIB)

        result = self.studio.compress(data, ContentCategory.TEXT, previous)
        self.assertEqual(result.algorithm, 'Delta(LCS)+deflate')

        restored = self.studio.decompress(result.data, previous)
        self.assertEqual(restored.data, data)
        self.assertEqual(restored.algorithm, 'Delta (decompressed)')

    def test_delta_falls_back_when_too_large(self):
        studio = CompressionStudio(StudioSettings(verbose=False, max_delta_cells=100))
        data = b"x" * (11 * KIB)

        result = studio.compress(data, ContentCategory.TEXT, b"x" * 20)
        self.assertEqual(result.algorithm, 'Huffman')
        self.assertEqual(result.decision.codec, CodecId.DELTA)
        self.assertTrue(any('falling back' in line for line in studio.log))
        self.assertEqual(studio.decompress(result.data).data, data)

    def test_medium_text_without_previous(self):
        data = b"abc" * 4000
        result = self.studio.compress(data, ContentCategory.TEXT)
        self.assertEqual(result.algorithm, 'Huffman')

    def test_remembered_previous(self):
        previous = b"base\n"
        data = b"base\n" + b"more text\n" * 1200

        self.studio.remember(previous)
        result = self.studio.compress(data, ContentCategory.TEXT)
        self.assertEqual(result.algorithm, 'Delta(LCS)+deflate')
        self.assertEqual(self.studio.decompress(result.data).data, data)

        self.studio.clear()
        self.assertIsNone(self.studio.previous)
        self.assertEqual(self.studio.log, [])

    def test_large_text_chunked(self):
        data = b"a" * (MIB + 1)
        result = self.studio.compress(data, ContentCategory.TEXT)
        self.assertEqual(result.algorithm, 'Chunk+deflate')
        self.assertEqual(result.decision.chunk_size, TEXT_CHUNK_SIZE)
        self.assertLess(result.output_size, result.original_size)
        self.assertEqual(self.studio.decompress(result.data).data, data)

    def test_small_image_passthrough(self):
        data = b'\x89PNG fake image'
        result = self.studio.compress(data, ContentCategory.IMAGE)
        self.assertEqual(result.algorithm, 'Image (passthrough)')
        self.assertEqual(result.data, data)

    def test_other_chunked(self):
        data = bytes(range(256)) * 40
        result = self.studio.compress(data, ContentCategory.OTHER)
        self.assertEqual(result.decision.chunk_size, BINARY_CHUNK_SIZE)
        self.assertEqual(self.studio.decompress(result.data).data, data)

    def test_log_is_recorded(self):
        self.studio.compress(b"hello", ContentCategory.TEXT)
        self.assertTrue(self.studio.log[0].startswith('Detected type: text'))

    def test_files(self):
        source = os.path.join(self.temp_dir, "notes.txt")
        compressed = os.path.join(self.temp_dir, "out", "notes.huff")
        restored = os.path.join(self.temp_dir, "out", "notes.restored")

        with open(source, 'wb') as f:
            f.write(b"Hello World! " * 100)

        result = self.studio.compress_file(source, compressed)
        self.assertEqual(result.algorithm, 'Huffman')
        self.assertLess(result.ratio, 100)
        self.assertTrue(os.path.isfile(compressed))

        self.studio.decompress_file(compressed, restored)
        with open(restored, 'rb') as f:
            self.assertEqual(f.read(), b"Hello World! " * 100)

    def test_tiny_chunk_size_stays_detectable(self):
        studio = CompressionStudio(StudioSettings(verbose=False, text_chunk_size=1,
                                                  binary_chunk_size=1))
        data = bytes(range(256)) * 40
        result = studio.compress(data, ContentCategory.OTHER)
        self.assertEqual(result.algorithm, 'Chunk+deflate')
        self.assertLess(peek_chunk_count(result.data), MAX_CHUNK_COUNT)
        self.assertTrue(any('Chunk size raised' in line for line in studio.log))

        decoded = studio.decompress(result.data)
        self.assertEqual(decoded.algorithm, 'Chunk+deflate (decompressed)')
        self.assertEqual(decoded.data, data)

    def test_ratio(self):
        result = self.studio.compress(b"", ContentCategory.TEXT)
        self.assertIsInstance(result.ratio, float)
        self.assertEqual(result.ratio, 0.0)

    def test_hr_size(self):
        self.assertEqual(hr_size(512), '512 B')
        self.assertEqual(hr_size(1536), '1.50 KB')
        self.assertEqual(hr_size(3 * MIB // 2), '1.50 MB')


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.source = os.path.join(self.temp_dir, "file1.txt")
        with open(self.source, 'wb') as f:
            f.write(b"Content of file 1\n" * 50)

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_compress_and_decompress(self):
        compressed = os.path.join(self.temp_dir, "file1.huff")
        restored = os.path.join(self.temp_dir, "file1.out")

        output = io.StringIO()
        with redirect_stdout(output):
            main(['-q', 'compress', self.source, '-o', compressed, '--show-tree'])
            main(['-q', 'decompress', compressed, '-o', restored])

        self.assertIn('* (900)', output.getvalue())
        with open(restored, 'rb') as f:
            self.assertEqual(f.read(), b"Content of file 1\n" * 50)

    def test_choose(self):
        output = io.StringIO()
        with redirect_stdout(output):
            main(['choose', self.source])
        self.assertIn(CodecId.HUFFMAN, output.getvalue())

    def test_unrecognized_input_exits(self):
        garbage = os.path.join(self.temp_dir, "garbage.bin")
        with open(garbage, 'wb') as f:
            f.write(b'\xff' * 16)

        errors = io.StringIO()
        with redirect_stderr(errors), self.assertRaises(SystemExit) as ctx:
            main(['-q', 'decompress', garbage, '-o', os.path.join(self.temp_dir, 'x')])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn('Error:', errors.getvalue())


def run_tests():
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestBitPacking))
    suite.addTests(loader.loadTestsFromTestCase(TestHuffmanEncoding))
    suite.addTests(loader.loadTestsFromTestCase(TestLcsDelta))
    suite.addTests(loader.loadTestsFromTestCase(TestDeflate))
    suite.addTests(loader.loadTestsFromTestCase(TestChunkCodec))
    suite.addTests(loader.loadTestsFromTestCase(TestSelection))
    suite.addTests(loader.loadTestsFromTestCase(TestDetection))
    suite.addTests(loader.loadTestsFromTestCase(TestStudio))
    suite.addTests(loader.loadTestsFromTestCase(TestCommandLine))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())

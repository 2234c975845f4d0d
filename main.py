"""
Командная строка для студии сжатия.
"""

import argparse
import sys
from pathlib import Path

from huffman import render_tree
from selection import ContentCategory
from settings import MAX_DELTA_CELLS, StudioSettings
from studio import CompressionStudio, hr_size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Compression Studio: Huffman, LCS delta and chunked deflate',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py compress notes.txt -o notes.huff
  python main.py compress notes_v2.txt -o notes.delta --previous notes.txt
  python main.py decompress notes.delta -o notes_v2.txt --previous notes.txt
  python main.py choose movie.mp4
        """
    )

    parser.add_argument('-q', '--quiet', action='store_true', help='Do not print progress')
    parser.add_argument('-l', '--level', type=int, default=6, help='Deflate level (0-9, default=6)')
    parser.add_argument('-w', '--workers', type=int, default=None,
                        help='Threads for chunk compression (default: single thread)')
    parser.add_argument('--chunk-size', type=int, default=None,
                        help='Override chunk size in bytes')
    parser.add_argument('--max-delta-cells', type=int, default=MAX_DELTA_CELLS,
                        help='Largest LCS table the delta codec may allocate')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    compress_parser = subparsers.add_parser('compress', help='Compress a file')
    compress_parser.add_argument('file', help='Input file')
    compress_parser.add_argument('-o', '--output', required=True, help='Output path')
    compress_parser.add_argument('-p', '--previous', help='Previous version of the file')
    compress_parser.add_argument('-c', '--category', choices=ContentCategory.ALL,
                                 help='Content category (default: guessed from file name)')
    compress_parser.add_argument('--show-tree', action='store_true',
                                 help='Print the Huffman tree')

    decompress_parser = subparsers.add_parser('decompress', help='Decompress a file')
    decompress_parser.add_argument('file', help='Compressed file')
    decompress_parser.add_argument('-o', '--output', required=True, help='Output path')
    decompress_parser.add_argument('-p', '--previous', help='Previous version used for delta')

    choose_parser = subparsers.add_parser('choose', help='Show which algorithm would be used')
    choose_parser.add_argument('file', help='Input file')
    choose_parser.add_argument('-p', '--previous', help='Previous version of the file')
    choose_parser.add_argument('-c', '--category', choices=ContentCategory.ALL,
                               help='Content category (default: guessed from file name)')

    return parser


def make_settings(args) -> StudioSettings:
    options = dict(level=args.level, workers=args.workers,
                   max_delta_cells=args.max_delta_cells, verbose=not args.quiet)
    if args.chunk_size is not None:
        options.update(text_chunk_size=args.chunk_size, binary_chunk_size=args.chunk_size)
    return StudioSettings(**options)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        studio = CompressionStudio(make_settings(args))

        if args.command == 'compress':
            result = studio.compress_file(args.file, args.output, args.previous, args.category)
            if args.show_tree:
                print(render_tree(result.tree))

        elif args.command == 'decompress':
            studio.decompress_file(args.file, args.output, args.previous)

        elif args.command == 'choose':
            with open(args.file, 'rb') as f:
                data = f.read()
            previous = None
            if args.previous:
                with open(args.previous, 'rb') as f:
                    previous = f.read()
            category = args.category or ContentCategory.from_filename(Path(args.file).name)

            decision = studio.choose(data, category, previous)
            print(f"{args.file}: {category}, {hr_size(len(data))} -> {decision.codec}")
            print(f"  {decision.rationale}")

    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

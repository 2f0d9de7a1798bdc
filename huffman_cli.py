# filename: huffman_cli.py

import argparse
import sys

from loguru import logger

import lzw_codec
from huffman_config import HUFFMAN_SUFFIX, LOG_LEVEL, LZW_SUFFIX, SCRAMBLE_HEADER
from huffman_core import PSEUDO_EOF
from huffman_errors import HuffmanError
from huffman_service import HuffmanService


def setup_logging(level=LOG_LEVEL):
    logger.remove()
    logger.add(sys.stderr, level=level)


def build_parser():
    parser = argparse.ArgumentParser(description="Huffman compression with a scrambled frequency header")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="loguru level for stderr output")
    sub = parser.add_subparsers(dest="mode", required=True)

    c = sub.add_parser("compress", help="compress a file")
    c.add_argument("input")
    c.add_argument("output", nargs="?", help=f"defaults to INPUT{HUFFMAN_SUFFIX} (or INPUT{LZW_SUFFIX})")
    c.add_argument("--lzw", action="store_true", help="use the LZW coder instead of Huffman")
    c.add_argument("--no-scramble", action="store_true", help="write the frequency table unscrambled")

    d = sub.add_parser("decompress", help="decompress a file")
    d.add_argument("input")
    d.add_argument("output")
    d.add_argument("--lzw", action="store_true", help="input was written with --lzw")
    d.add_argument("--no-scramble", action="store_true", help="input was written with --no-scramble")

    s = sub.add_parser("stats", help="print the code each byte of a file would get")
    s.add_argument("input")
    return parser


def _lzw_compress(input_path, output_path):
    with open(input_path, "rb") as f:
        data = f.read()
    blob = lzw_codec.dump_codes(lzw_codec.compress(data))
    with open(output_path, "wb") as f:
        f.write(blob)
    logger.info(f"wrote {len(blob)} bytes to {output_path}")


def _lzw_decompress(input_path, output_path):
    with open(input_path, "rb") as f:
        codes = lzw_codec.load_codes(f.read())
    data = lzw_codec.decompress(codes)
    with open(output_path, "wb") as f:
        f.write(data)
    logger.info(f"wrote {len(data)} bytes to {output_path}")


def _print_stats(service, input_path):
    with open(input_path, "rb") as f:
        report = service.inspect(f.read())
    total = sum(report.frequencies.values()) - 1
    print(f"{total} bytes, {len(report.frequencies) - 1} distinct")
    for symbol in sorted(report.frequencies):
        name = "EOF" if symbol == PSEUDO_EOF else f"0x{symbol:02x}"
        print(f"{name:>5} {report.frequencies[symbol]:>10} {report.lengths[symbol]:>3} bits")
    print(f"body: {report.body_bits} bits ({(report.body_bits + 7) // 8} bytes)")


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    scramble = SCRAMBLE_HEADER and not getattr(args, "no_scramble", False)
    service = HuffmanService(scramble=scramble)
    try:
        if args.mode == "compress":
            suffix = LZW_SUFFIX if args.lzw else HUFFMAN_SUFFIX
            output = args.output or args.input + suffix
            if args.lzw:
                _lzw_compress(args.input, output)
            else:
                service.compress_file(args.input, output)
        elif args.mode == "decompress":
            if args.lzw:
                _lzw_decompress(args.input, args.output)
            else:
                service.decompress_file(args.input, args.output)
        else:
            _print_stats(service, args.input)
    except (HuffmanError, OSError) as e:
        logger.error(f"{args.mode} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

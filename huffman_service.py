# filename: huffman_service.py

import io
import os
from collections import namedtuple

from loguru import logger

from huffman_bits import BitReader, BitWriter
from huffman_config import CHUNK_SIZE, SCRAMBLE_HEADER
from huffman_core import PSEUDO_EOF, HuffmanLogic, frequency_table
from huffman_errors import HuffmanError, SourceReadError, TruncatedStreamError
from huffman_header import read_header, write_header

CodeReport = namedtuple("CodeReport", ["frequencies", "lengths", "body_bits"])


def encode_stream(source, codes, writer, chunk_size=CHUNK_SIZE):
    """Write the code of every byte in `source`, then the PSEUDO_EOF code."""
    try:
        chunk = source.read(chunk_size)
        while chunk:
            for byte in chunk:
                code = codes.get(byte)
                if code is None:
                    raise SourceReadError(f"byte {byte} was not seen while counting frequencies")
                writer.write_code(code)
            chunk = source.read(chunk_size)
    except OSError as exc:
        raise SourceReadError(f"failed reading source: {exc}") from exc
    writer.write_code(codes[PSEUDO_EOF])


def decode_stream(reader, decode_table, sink, chunk_size=CHUNK_SIZE):
    """
    Translate bits back to bytes until PSEUDO_EOF is decoded.

    Padding after PSEUDO_EOF is never looked at. Running out of bits first
    raises TruncatedStreamError; bytes decoded since the last flush are
    dropped in that case. Returns the number of bytes written to `sink`.
    """
    out = bytearray()
    written = 0
    acc = 0
    length = 0
    while reader.bits_read < reader.size_in_bits:
        acc = (acc << 1) | reader.read_bit()
        length += 1
        symbol = decode_table.get((acc, length))
        if symbol is None:
            continue
        if symbol == PSEUDO_EOF:
            sink.write(bytes(out))
            return written + len(out)
        out.append(symbol)
        acc = 0
        length = 0
        if len(out) >= chunk_size:
            sink.write(bytes(out))
            written += len(out)
            out.clear()
    raise TruncatedStreamError(
        f"stream ended after {reader.size_in_bits} bits without an end-of-stream marker"
    )


class HuffmanService:
    def __init__(self, scramble=SCRAMBLE_HEADER):
        self.logic = HuffmanLogic()
        self.scramble = scramble

    def compress_stream(self, infile, outfile):
        # The encode pass rereads from wherever the caller left the source.
        try:
            start = infile.tell()
        except OSError as exc:
            raise SourceReadError(f"cannot locate source position: {exc}") from exc
        freqs = frequency_table(infile)
        logger.debug(f"{len(freqs) - 1} distinct bytes, {sum(freqs.values()) - 1} total")
        header_size = write_header(outfile, freqs, self.scramble)

        try:
            infile.seek(start)
        except OSError as exc:
            raise SourceReadError(f"cannot rewind source: {exc}") from exc

        with self.logic.encoding_tree(freqs) as tree:
            codes = self.logic.generate_codes(tree)
            with BitWriter(outfile) as writer:
                encode_stream(infile, codes, writer)
        logger.debug(f"header {header_size} bytes, body {writer.bits_written} bits")

    def decompress_stream(self, infile, outfile):
        freqs = self.read_frequencies(infile)
        with self.logic.encoding_tree(freqs) as tree:
            decode_table = self.logic.generate_decode_table(tree)
            reader = BitReader(infile)
            size = decode_stream(reader, decode_table, outfile)
        logger.debug(f"decoded {size} bytes from {reader.bits_read} of {reader.size_in_bits} bits")
        return size

    def read_frequencies(self, infile):
        return read_header(infile, self.scramble)

    def compress(self, data):
        out = io.BytesIO()
        self.compress_stream(io.BytesIO(data), out)
        return out.getvalue()

    def decompress(self, data):
        out = io.BytesIO()
        self.decompress_stream(io.BytesIO(data), out)
        return out.getvalue()

    def compress_file(self, input_path, output_path):
        with open(input_path, "rb") as infile:
            return self._write_file(output_path, lambda outfile: self.compress_stream(infile, outfile))

    def decompress_file(self, input_path, output_path):
        with open(input_path, "rb") as infile:
            return self._write_file(output_path, lambda outfile: self.decompress_stream(infile, outfile))

    def _write_file(self, output_path, job):
        outfile = open(output_path, "wb")
        try:
            with outfile:
                job(outfile)
                size = outfile.tell()
        except (HuffmanError, OSError):
            # A half-written output is never valid, don't leave it around.
            os.remove(output_path)
            raise
        logger.info(f"wrote {size} bytes to {output_path}")
        return size

    def inspect(self, data):
        freqs = frequency_table(io.BytesIO(data))
        with self.logic.encoding_tree(freqs) as tree:
            codes = self.logic.generate_codes(tree)
        lengths = {symbol: code.length for symbol, code in codes.items()}
        body_bits = sum(freqs[symbol] * lengths[symbol] for symbol in freqs)
        return CodeReport(freqs, lengths, body_bits)

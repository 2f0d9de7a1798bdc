# filename: huffman_bits.py

import io

from huffman_config import CHUNK_SIZE


class BitWriter:
    """Packs bits MSB-first into a binary file object."""

    def __init__(self, out, chunk_size=CHUNK_SIZE):
        self.out = out
        self.chunk_size = chunk_size
        self.bits_written = 0
        self._acc = 0
        self._pending = 0
        self._buffer = bytearray()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        # Only pad and flush a stream that was written completely.
        if exc_type is None:
            self.close()

    def write_bit(self, bit):
        if bit not in (0, 1):
            raise ValueError(f"Got unexpected bit: {bit}")
        self.write_code((bit, 1))

    def write_code(self, code):
        value, length = code
        self._acc = (self._acc << length) | value
        self._pending += length
        self.bits_written += length
        while self._pending >= 8:
            self._pending -= 8
            self._buffer.append((self._acc >> self._pending) & 0xFF)
        self._acc &= (1 << self._pending) - 1
        if len(self._buffer) >= self.chunk_size:
            self.flush()

    def flush(self):
        if self._buffer:
            self.out.write(bytes(self._buffer))
            self._buffer.clear()

    def close(self):
        # Zero-fill the last partial byte.
        if self._pending:
            self._buffer.append((self._acc << (8 - self._pending)) & 0xFF)
            self._acc = 0
            self._pending = 0
        self.flush()


class BitReader:
    """
    Reads bits MSB-first from a seekable binary file object.

    size_in_bits covers everything from the position the stream had when
    the reader was created up to its end.
    """

    def __init__(self, inp, chunk_size=CHUNK_SIZE):
        self.input = inp
        self.chunk_size = chunk_size
        start = inp.tell()
        end = inp.seek(0, io.SEEK_END)
        inp.seek(start)
        self.size_in_bits = (end - start) * 8
        self.bits_read = 0
        self._chunk = b""
        self._offset = 0

    def read_bit(self):
        if self.bits_read >= self.size_in_bits:
            raise EOFError("no bits left in stream")
        byte_index, bit_index = divmod(self.bits_read, 8)
        if bit_index == 0 and byte_index - self._offset >= len(self._chunk):
            self._offset = byte_index
            self._chunk = self.input.read(self.chunk_size)
            if not self._chunk:
                raise EOFError("stream ended early")
        byte = self._chunk[byte_index - self._offset]
        self.bits_read += 1
        return (byte >> (7 - bit_index)) & 1

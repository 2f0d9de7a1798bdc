# filename: huffman_header.py
#
# Header layout, ASCII up to the raw symbol bytes:
#
#     <N> <sym0><freq0> <sym1><freq1> ... <symN-1><freqN-1>
#
# N counts the byte symbols only. Each sym is one raw (scrambled) byte and
# each freq a decimal count followed by a single space. PSEUDO_EOF is never
# written; it always has frequency 1 and is put back on read. The encoded
# body starts right after the last space.

from huffman_core import PSEUDO_EOF, check_symbol
from huffman_errors import InvalidFrequencyError, MalformedHeaderError, MissingSentinelError
from huffman_scramble import descramble_table, scramble_table

DELIMITER = b" "
MAX_ENTRIES = 256


def header_bytes(frequencies, scramble=True):
    if PSEUDO_EOF not in frequencies:
        raise MissingSentinelError("No PSEUDO_EOF defined.")
    table = scramble_table(frequencies) if scramble else dict(frequencies)

    symbols = sorted(symbol for symbol in table if symbol != PSEUDO_EOF)
    out = bytearray(b"%d " % len(symbols))
    for symbol in symbols:
        check_symbol(symbol)
        freq = table[symbol]
        if freq < 0:
            raise InvalidFrequencyError(f"negative frequency {freq} for symbol {symbol}")
        out.append(symbol)
        out += b"%d " % freq
    return bytes(out)


def write_header(sink, frequencies, scramble=True):
    """Write the frequency table to `sink` and return the number of bytes written."""
    data = header_bytes(frequencies, scramble)
    sink.write(data)
    return len(data)


def _read_decimal(source, what):
    digits = bytearray()
    while True:
        ch = source.read(1)
        if not ch:
            raise MalformedHeaderError(f"header ended while reading {what}")
        if ch == DELIMITER:
            break
        if not ch.isdigit():
            raise MalformedHeaderError(f"unexpected byte {ch!r} in {what}")
        digits += ch
    if not digits:
        raise MalformedHeaderError(f"empty {what}")
    return int(digits)


def read_header(source, scramble=True):
    """
    Read a frequency table written by write_header.

    Leaves `source` positioned at the first byte of the encoded body.
    """
    count = _read_decimal(source, "entry count")
    if count > MAX_ENTRIES:
        raise MalformedHeaderError(f"header declares {count} entries, at most {MAX_ENTRIES} exist")

    result = {}
    for index in range(count):
        ch = source.read(1)
        if not ch:
            raise MalformedHeaderError(f"header ended after {index} of {count} entries")
        symbol = ch[0]
        freq = _read_decimal(source, f"frequency of entry {index}")
        if symbol in result:
            raise MalformedHeaderError(f"duplicate symbol {symbol} in header")
        result[symbol] = freq

    result[PSEUDO_EOF] = 1
    return descramble_table(result) if scramble else result

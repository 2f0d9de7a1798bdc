# filename: lzw_codec.py
#
# Dictionary coder offered next to the Huffman path. Codes are unbounded
# ints and the dictionary never resets, so memory grows with the input.

from loguru import logger

from huffman_errors import BadDictionaryIndexError


def compress(data):
    dictionary = {bytes([i]): i for i in range(256)}
    dict_size = 256
    codes = []
    w = b""
    for byte in data:
        wc = w + bytes([byte])
        if wc in dictionary:
            w = wc
        else:
            codes.append(dictionary[w])
            dictionary[wc] = dict_size
            dict_size += 1
            w = bytes([byte])
    if w:
        codes.append(dictionary[w])
    logger.debug(f"lzw: {len(data)} bytes -> {len(codes)} codes, dictionary size {dict_size}")
    return codes


def decompress(codes):
    if not codes:
        return b""
    dictionary = {i: bytes([i]) for i in range(256)}
    dict_size = 256

    first = codes[0]
    if first not in dictionary:
        raise BadDictionaryIndexError(f"bad first code {first}")
    w = dictionary[first]
    result = bytearray(w)
    for k in codes[1:]:
        if k in dictionary:
            entry = dictionary[k]
        elif k == dict_size:
            entry = w + w[:1]
        else:
            raise BadDictionaryIndexError(f"bad compressed code {k} (dictionary size {dict_size})")
        result += entry
        dictionary[dict_size] = w + entry[:1]
        dict_size += 1
        w = entry
    return bytes(result)


def dump_codes(codes):
    """Serialize codes as newline separated decimals."""
    return b"\n".join(b"%d" % code for code in codes)


def load_codes(blob):
    codes = []
    for line in blob.split(b"\n"):
        line = line.strip()
        if not line:
            continue
        if not line.isdigit():
            raise BadDictionaryIndexError(f"invalid code {line!r}")
        codes.append(int(line))
    return codes

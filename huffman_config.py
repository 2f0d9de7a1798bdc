# filename: huffman_config.py

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("HUFFMAN_LOG_LEVEL", "INFO").upper()

# Compress and decompress must agree on this, the header carries no flag for it.
SCRAMBLE_HEADER = _flag("HUFFMAN_SCRAMBLE_HEADER", True)

HUFFMAN_SUFFIX = os.getenv("HUFFMAN_SUFFIX", ".huf")
LZW_SUFFIX = ".lzw"

CHUNK_SIZE = int(os.getenv("HUFFMAN_CHUNK_SIZE", "65536"))

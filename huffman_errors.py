# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for every failure raised by the compressor."""


class SourceReadError(HuffmanError):
    """The byte source failed (or changed) while it was being read."""


class MalformedHeaderError(HuffmanError):
    """The frequency table at the front of a compressed stream cannot be parsed."""


class MissingSentinelError(HuffmanError):
    """A frequency table has no PSEUDO_EOF entry."""


class TruncatedStreamError(HuffmanError):
    """The encoded body ran out of bits before PSEUDO_EOF was decoded."""


class BadDictionaryIndexError(HuffmanError):
    """An LZW code that is neither in the dictionary nor the next free slot."""


class SymbolRangeError(HuffmanError):
    """A symbol outside the 0..256 alphabet."""


class InvalidFrequencyError(HuffmanError):
    """A frequency table entry with a count that cannot be written."""

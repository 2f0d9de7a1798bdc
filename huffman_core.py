# filename: huffman_core.py

import heapq
import itertools
from collections import Counter, namedtuple
from contextlib import contextmanager

from huffman_config import CHUNK_SIZE
from huffman_errors import MissingSentinelError, SourceReadError, SymbolRangeError

# Symbols 0-255 are raw bytes, 256 marks the end of the encoded body.
PSEUDO_EOF = 256
ALPHABET_SIZE = 257

# A prefix code packed into an int: `length` bits, most significant first.
Code = namedtuple("Code", ["value", "length"])


def check_symbol(symbol):
    if not 0 <= symbol < ALPHABET_SIZE:
        raise SymbolRangeError(f"symbol {symbol!r} is outside 0..{PSEUDO_EOF}")
    return symbol


def frequency_table(source, chunk_size=CHUNK_SIZE):
    """
    Count every byte of a binary file object in a single forward pass.

    The result always carries PSEUDO_EOF with a count of 1. The source is
    left at its end; rewinding it for the encode pass is up to the caller.
    """
    freqs = Counter()
    try:
        chunk = source.read(chunk_size)
        while chunk:
            freqs.update(chunk)
            chunk = source.read(chunk_size)
    except OSError as exc:
        raise SourceReadError(f"failed reading source: {exc}") from exc

    table = dict(freqs)
    table[PSEUDO_EOF] = 1
    return table


class HuffmanNode:
    def __init__(self, symbol, freq, left=None, right=None):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    def is_leaf(self):
        return self.symbol is not None


def free_tree(root):
    # Iterative so deep, skewed trees don't hit the recursion limit.
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        for child in (node.left, node.right):
            if child is not None:
                stack.append(child)
        node.left = None
        node.right = None


class HuffmanLogic:
    def build_tree(self, frequencies):
        """
        Build the encoding tree for a frequency table.

        Ties between equal weights go to whichever tree entered the heap
        first. Leaves enter in ascending symbol order, merged nodes enter
        as they are created, and the first tree popped becomes the 0 branch.
        """
        if PSEUDO_EOF not in frequencies:
            raise MissingSentinelError("frequency table has no PSEUDO_EOF entry")
        if frequencies[PSEUDO_EOF] != 1:
            raise MissingSentinelError(f"PSEUDO_EOF must have count 1, got {frequencies[PSEUDO_EOF]}")

        counter = itertools.count()
        priority_queue = []
        for symbol in sorted(frequencies):
            node = HuffmanNode(symbol, frequencies[symbol])
            heapq.heappush(priority_queue, (node.freq, next(counter), node))

        if len(priority_queue) == 1:
            # A lone leaf has an empty path; hang it under a root so it gets "0".
            _, _, leaf = priority_queue[0]
            return HuffmanNode(None, leaf.freq, left=leaf)

        while len(priority_queue) > 1:
            _, _, left = heapq.heappop(priority_queue)
            _, _, right = heapq.heappop(priority_queue)
            merged = HuffmanNode(None, left.freq + right.freq, left, right)
            heapq.heappush(priority_queue, (merged.freq, next(counter), merged))

        return priority_queue[0][2]

    @contextmanager
    def encoding_tree(self, frequencies):
        root = self.build_tree(frequencies)
        try:
            yield root
        finally:
            free_tree(root)

    def _walk(self, node, value, length, visit):
        if node.is_leaf():
            visit(node.symbol, Code(value, length))
            return
        if node.left is None and node.right is None:
            raise ValueError("internal tree node has no children")
        if node.left is not None:
            self._walk(node.left, value << 1, length + 1, visit)
        if node.right is not None:
            self._walk(node.right, (value << 1) | 1, length + 1, visit)

    def generate_codes(self, node):
        """Map each symbol to its Code."""
        codes = {}
        self._walk(node, 0, 0, codes.__setitem__)
        return codes

    def generate_decode_table(self, node):
        """Map each (value, length) code back to its symbol."""
        table = {}

        def visit(symbol, code):
            table[code] = symbol

        self._walk(node, 0, 0, visit)
        return table

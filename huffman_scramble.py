# filename: huffman_scramble.py
#
# Reversible relabelling of the frequency table stored in the header.
# The mapping s -> 255 - s is fixed and public: it hides nothing from
# anyone who has read this file and must not be mistaken for encryption.

from huffman_core import PSEUDO_EOF, check_symbol


def scramble_symbol(symbol):
    if symbol == PSEUDO_EOF:
        return symbol
    return 255 - check_symbol(symbol)


def scramble_table(frequencies):
    """
    Return a new table with every byte key s replaced by 255 - s.

    PSEUDO_EOF keeps its key. If two keys land on the same slot the one
    iterated later wins.
    """
    scrambled = {}
    for symbol, freq in frequencies.items():
        scrambled[scramble_symbol(symbol)] = freq
    return scrambled


# The mapping is its own inverse.
descramble_table = scramble_table

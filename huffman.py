import heapq
from itertools import count

from errors import EmptyInputError

LEFT_CODE = '0'
RIGHT_CODE = '1'


class HuffmanNode: # common base of tree nodes
    __slots__ = ("weight",)

    def __init__(self, weight):
        self.weight = weight


class Leaf(HuffmanNode):
    __slots__ = ("symbol",)

    def __init__(self, symbol, weight):
        super().__init__(weight)
        self.symbol = symbol # 16-bit code unit

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.weight})"


class InternalNode(HuffmanNode):
    __slots__ = ("left", "right")

    def __init__(self, left, right):
        super().__init__(left.weight + right.weight) # weight is always the sum of the children
        self.left = left
        self.right = right

    def __repr__(self):
        return f"InternalNode({self.weight}, {self.left!r}, {self.right!r})"


def build_huffman_tree(frequency_table): # frequency_table: dict of symbol -> frequency
    """
    Builds a Huffman tree by greedily merging the two lightest nodes.
    Returns the root, a bare Leaf when only one distinct symbol exists.
    """
    if not frequency_table:
        raise EmptyInputError("cannot build a Huffman tree from an empty frequency table")

    # (weight, insertion order, node) so equal weights never fall back to comparing nodes
    order = count()
    priority_queue = []
    for symbol, frequency in frequency_table.items():
        if frequency <= 0:
            raise ValueError(f"frequency of symbol {symbol!r} must be positive, got {frequency}")
        priority_queue.append((frequency, next(order), Leaf(symbol, frequency)))
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = InternalNode(left, right) # internal node with combined weight
        heapq.heappush(priority_queue, (merged_node.weight, next(order), merged_node))

    return priority_queue[0][2] # root of the tree


def generate_huffman_codes(root): # root: root of the Huffman tree
    codes = {}
    stack = [(root, '')] # explicit stack, a skewed tree can be deeper than the recursion limit
    while stack:
        node, current_code = stack.pop()

        # Leaf node -> assign code
        if isinstance(node, Leaf):
            codes[node.symbol] = current_code
            continue

        stack.append((node.right, current_code + RIGHT_CODE))
        stack.append((node.left, current_code + LEFT_CODE))

    return codes # return the mapping of symbols to their corresponding Huffman codes


def ensure_nonempty_codes(codes):
    # A one-leaf tree gives its symbol the empty code, which cannot be decoded.
    # Force it to '0' so every symbol costs exactly one bit.
    if len(codes) == 1:
        symbol = next(iter(codes))
        if codes[symbol] == '':
            return {symbol: LEFT_CODE}
    return codes


def is_prefix_free(codes) -> bool: # codes: iterable of bitstrings
    # after sorting, a code that prefixes another sorts directly before one of its extensions
    ordered = sorted(codes)
    return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))

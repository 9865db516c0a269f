class HuffmanError(Exception): # base class for every codec failure
    pass


class EmptyInputError(HuffmanError):
    """Raised when there are no symbols to build a Huffman tree from."""


class MalformedHeaderError(HuffmanError):
    """Raised when an encoded file's header is invalid or truncated."""


class MalformedBodyError(HuffmanError):
    """Raised when the packed body holds bits that match no code in the table."""


class InvalidOperationError(HuffmanError):
    """Raised when the operation selector is neither 'e' nor 'd'."""

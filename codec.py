"""
Huffman encoder / decoder

Encoding a stream with Huffman consists of the following steps:
1. Count how many times each symbol appears in the input
2. Build a Huffman tree from those frequencies, rare symbols end up deepest
3. Derive the encoding table, each symbol maps to the path from the root to its leaf
4. Replace every symbol by its code, pack the bits and write header + body

Decoding reads the table back from the header and replays the bitstream against it.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from os import PathLike
from typing import Dict, Iterable, List, Optional, Tuple, Union

import fileformat
from bitpack import pack_bits, unpack_bits
from errors import EmptyInputError, MalformedBodyError
from huffman import build_huffman_tree, ensure_nonempty_codes, generate_huffman_codes
from symbols import from_symbols, to_symbols

logger = logging.getLogger(__name__)

StrPath = Union[str, "PathLike[str]"]


@dataclass(frozen=True)
class CodecConfig:
    # encoding only, a file written with any config decodes from its header alone
    stop_at_nul: bool = False  # treat the first zero code unit as end of input


DEFAULT_CONFIG = CodecConfig()


def read_symbols(data: bytes, config: CodecConfig = DEFAULT_CONFIG) -> List[int]:
    symbols = to_symbols(data)
    if config.stop_at_nul and 0 in symbols:
        # compatibility: everything from the first zero code unit on is ignored
        cut = symbols.index(0)
        logger.debug("zero code unit at position %d, dropping %d symbols", cut, len(symbols) - cut)
        del symbols[cut:]
    return symbols


def count_frequencies(symbols: Iterable[int]) -> Dict[int, int]:
    ft: Dict[int, int] = {}
    for s in symbols:
        ft[s] = ft.get(s, 0) + 1
    return ft


def build_code_table(frequencies: Dict[int, int]) -> Dict[int, str]:
    root = build_huffman_tree(frequencies)
    return ensure_nonempty_codes(generate_huffman_codes(root))


def encode_parts(data: bytes, config: CodecConfig = DEFAULT_CONFIG) -> Tuple[int, Dict[int, str], bytes]:
    """
    Runs the encoding pipeline and returns (padding, code_map, body) ready to be written.
    Raises EmptyInputError when there is nothing to encode.
    """
    symbols = read_symbols(data, config)
    if not symbols:
        raise EmptyInputError("input contains no symbols to encode")

    code_map = build_code_table(count_frequencies(symbols))
    body, padding = pack_bits("".join(code_map[s] for s in symbols))
    logger.debug("encoded %d symbols: %d distinct, %d body bytes, padding %d",
                 len(symbols), len(code_map), len(body), padding)
    return padding, code_map, body


def encode(data: bytes, config: Optional[CodecConfig] = None) -> bytes:
    """Encodes data and returns the complete artifact (header + body)."""
    padding, code_map, body = encode_parts(data, config or DEFAULT_CONFIG)
    out = io.BytesIO()
    fileformat.write_encoded(out, padding, code_map, body)
    return out.getvalue()


def decode_symbols(bits: str, reverse_table: Dict[str, int]) -> List[int]:
    """
    Greedy prefix match: accumulate bits until they spell a code, emit its symbol, start over
    """
    decoded: List[int] = []
    start = 0
    for end in range(1, len(bits) + 1):
        symbol = reverse_table.get(bits[start:end])
        if symbol is not None:
            decoded.append(symbol)
            start = end

    if start != len(bits):
        raise MalformedBodyError(f"{len(bits) - start} trailing bits match no code in the table")
    return decoded


def decode_parts(padding: int, reverse_table: Dict[str, int], body: bytes) -> bytes:
    try:
        bits = unpack_bits(body, padding)
    except ValueError as e:
        raise MalformedBodyError(str(e)) from e

    symbols = decode_symbols(bits, reverse_table)
    logger.debug("decoded %d symbols from %d body bytes", len(symbols), len(body))
    try:
        return from_symbols(symbols)
    except UnicodeError as e:
        raise MalformedBodyError(f"decoded symbols do not form valid text: {e}") from e


def decode(data: bytes) -> bytes:
    stream = io.BytesIO(data)
    padding, reverse_table = fileformat.read_header(stream)
    body = fileformat.read_body(stream)
    return decode_parts(padding, reverse_table, body)


def encode_file(input_path: StrPath, output_path: StrPath, config: Optional[CodecConfig] = None) -> int:
    """Encodes input_path into output_path, returns the size of the input in bytes."""
    with open(input_path, "rb") as f:
        data = f.read()
    padding, code_map, body = encode_parts(data, config or DEFAULT_CONFIG)
    fileformat.write_encoded_file(output_path, padding, code_map, body)
    return len(data)


def decode_file(input_path: StrPath, output_path: StrPath) -> int:
    """Decodes input_path into output_path, returns the number of bytes written."""
    padding, reverse_table, body = fileformat.read_encoded_file(input_path)
    decoded = decode_parts(padding, reverse_table, body)
    with open(output_path, "wb") as f:
        f.write(decoded)
    return len(decoded)

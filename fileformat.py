"""
Encoded file layout

    padding      int32   zero bits appended to the body, 0..7
    table_size   int32   number of distinct symbols
    table_size times:
        symbol       uint16  code unit
        code_length  int32   bit length of the code (only the low byte is significant)
        code         ceil(code_length / 8) bytes, MSB first, zero padded
    body         the packed bitstream up to end of file

All integers are big-endian.
"""

from __future__ import annotations

import logging
import struct
from os import PathLike
from typing import BinaryIO, Dict, Tuple, Union

from bitpack import pack_bits, unpack_bits
from errors import MalformedHeaderError
from huffman import is_prefix_free

logger = logging.getLogger(__name__)

INT = struct.Struct(">i")
SYMBOL = struct.Struct(">H")

MAX_CODE_LENGTH = 0xFF
MAX_SYMBOL = 0xFFFF

StrPath = Union[str, "PathLike[str]"]


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    chunk = stream.read(size)
    if chunk is None or len(chunk) != size:
        got = 0 if chunk is None else len(chunk)
        raise MalformedHeaderError(f"stream ended while reading {what}: expected {size} bytes, got {got}")
    return chunk


def _read_int(stream: BinaryIO, what: str) -> int:
    return INT.unpack(_read_exact(stream, INT.size, what))[0]


def write_table(stream: BinaryIO, table: Dict[int, str]) -> None:
    stream.write(INT.pack(len(table)))
    for symbol, code in table.items():
        if not 0 <= symbol <= MAX_SYMBOL:
            raise ValueError(f"symbol {symbol} does not fit in a 16-bit code unit")
        if len(code) > MAX_CODE_LENGTH:
            raise ValueError(f"code for symbol {symbol} is {len(code)} bits long, at most {MAX_CODE_LENGTH} fit in the header")
        packed, _ = pack_bits(code) # entry-local padding, independent of the body's
        stream.write(SYMBOL.pack(symbol))
        stream.write(INT.pack(len(code)))
        stream.write(packed)


def read_table(stream: BinaryIO) -> Dict[str, int]:
    """
    Reads the encoding table and returns it reversed, code -> symbol,
    which is what the decoder looks codes up with.
    """
    table_size = _read_int(stream, "table size")
    if table_size < 0:
        raise MalformedHeaderError(f"negative table size {table_size}")

    reverse_table: Dict[str, int] = {}
    for index in range(table_size):
        symbol = SYMBOL.unpack(_read_exact(stream, SYMBOL.size, f"symbol of entry {index}"))[0]
        code_length = _read_int(stream, f"code length of entry {index}") & 0xFF
        if code_length == 0:
            raise MalformedHeaderError(f"entry {index} (symbol {symbol}) has an empty code")

        chunk = _read_exact(stream, (code_length + 7) // 8, f"code of entry {index}")
        code = unpack_bits(chunk, len(chunk) * 8 - code_length)
        if code in reverse_table:
            raise MalformedHeaderError(f"code {code} is assigned to both {reverse_table[code]} and {symbol}")
        reverse_table[code] = symbol

    if not is_prefix_free(reverse_table):
        raise MalformedHeaderError("codes in the table are not prefix-free")

    return reverse_table


def write_header(stream: BinaryIO, padding: int, table: Dict[int, str]) -> None:
    if not 0 <= padding <= 7:
        raise ValueError(f"padding must be in [0, 7], got {padding}")
    stream.write(INT.pack(padding))
    write_table(stream, table)


def read_header(stream: BinaryIO) -> Tuple[int, Dict[str, int]]:
    padding = _read_int(stream, "padding")
    if not 0 <= padding <= 7:
        raise MalformedHeaderError(f"padding must be in [0, 7], got {padding}")
    reverse_table = read_table(stream)
    logger.debug("read header: padding=%d, %d table entries", padding, len(reverse_table))
    return padding, reverse_table


def read_body(stream: BinaryIO) -> bytes:
    return stream.read()


def write_encoded(stream: BinaryIO, padding: int, table: Dict[int, str], body: bytes) -> None:
    write_header(stream, padding, table)
    stream.write(body)


def write_encoded_file(path: StrPath, padding: int, table: Dict[int, str], body: bytes) -> None:
    # OSError propagates as is; a failed write may leave a truncated file behind
    with open(path, "wb") as f:
        write_encoded(f, padding, table, body)
    logger.debug("wrote %s: %d table entries, %d body bytes", path, len(table), len(body))


def read_encoded_file(path: StrPath) -> Tuple[int, Dict[str, int], bytes]:
    with open(path, "rb") as f:
        padding, reverse_table = read_header(f)
        body = read_body(f)
    return padding, reverse_table, body

from __future__ import annotations

from typing import List, Sequence

ENCODING = "utf-8"
_UNIT_CODEC = "utf-16-be"
_ERRORS = "surrogateescape" # undecodable bytes become lone surrogates and come back unchanged


def to_symbols(data: bytes) -> List[int]:
    """
    Splits raw input into 16-bit code units.
    The input is decoded as UTF-8 and each UTF-16 code unit is one symbol,
    bytes that are not valid UTF-8 are kept as one escaped code unit each.
    """
    units = data.decode(ENCODING, _ERRORS).encode(_UNIT_CODEC, "surrogatepass")
    return [(units[i] << 8) | units[i + 1] for i in range(0, len(units), 2)]


def from_symbols(symbols: Sequence[int]) -> bytes:
    """
    Joins code units back into bytes.
    Raises UnicodeError when the units hold an unpaired surrogate that no input can produce.
    """
    units = bytearray()
    for unit in symbols:
        units.append(unit >> 8)
        units.append(unit & 0xFF)
    return units.decode(_UNIT_CODEC, "surrogatepass").encode(ENCODING, _ERRORS)

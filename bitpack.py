from __future__ import annotations

from typing import Tuple


def padding_for(bit_count: int) -> int:
    """Number of zero bits needed to round bit_count up to a whole byte."""
    return (8 - bit_count % 8) % 8


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Converts a '0'/'1' string into packed bytes, most significant bit first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bits:
        if ch == '1':
            acc = (acc << 1) | 1
        elif ch == '0':
            acc = acc << 1
        else:
            raise ValueError(f"bitstring may only contain '0' and '1', found {ch!r}")
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc & 0xFF)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        acc = acc << pad_bits
        out.append(acc & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    """
    Expands packed bytes back to a '0'/'1' string and drops the trailing padding
    """
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be in [0, 7], got {pad_bits}")
    total_bits = len(packed) * 8 - pad_bits
    if total_bits < 0:
        raise ValueError(f"{pad_bits} padding bits requested from an empty byte sequence")

    bits = "".join(f"{byte & 0xFF:08b}" for byte in packed)
    return bits[:total_bits]

import pytest

from bitpack import pack_bits, padding_for, unpack_bits


def test_pack_empty():
    assert pack_bits('') == (b'', 0)


def test_pack_single_bit_is_msb_first():
    assert pack_bits('1') == (b'\x80', 7)


def test_pack_full_byte_has_no_padding():
    assert pack_bits('10100101') == (b'\xa5', 0)


def test_pack_nine_bits_spans_two_bytes():
    assert pack_bits('111111111') == (b'\xff\x80', 7)


def test_padding_bound():
    for n in range(0, 33):
        _, pad = pack_bits('1' * n)
        assert 0 <= pad <= 7
        assert (pad == 0) == (n % 8 == 0)
        assert pad == padding_for(n)


def test_pack_rejects_non_binary_characters():
    with pytest.raises(ValueError):
        pack_bits('0120')


def test_unpack_drops_padding():
    assert unpack_bits(b'\xa0', 5) == '101'
    assert unpack_bits(b'\xff\x80', 7) == '111111111'


def test_unpack_high_bytes():
    assert unpack_bits(bytearray([0xFF, 0x80]), 0) == '1111111110000000'


def test_unpack_empty():
    assert unpack_bits(b'', 0) == ''


@pytest.mark.parametrize("pad", [-1, 8])
def test_unpack_rejects_padding_out_of_range(pad):
    with pytest.raises(ValueError):
        unpack_bits(b'\x00', pad)


def test_unpack_rejects_padding_without_bytes():
    with pytest.raises(ValueError):
        unpack_bits(b'', 3)


def test_unpack_inverts_pack():
    bits = '0110100111010'
    packed, pad = pack_bits(bits)
    assert unpack_bits(packed, pad) == bits

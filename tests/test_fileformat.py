import io
import struct

import pytest

import fileformat
from errors import MalformedHeaderError


def _header_bytes(padding, entries):
    out = struct.pack(">i", padding) + struct.pack(">i", len(entries))
    for symbol, length, code_bytes in entries:
        out += struct.pack(">H", symbol) + struct.pack(">i", length) + code_bytes
    return out


def test_header_layout():
    out = io.BytesIO()
    fileformat.write_header(out, 3, {ord('a'): '0', ord('b'): '101'})
    assert out.getvalue() == _header_bytes(3, [(ord('a'), 1, b'\x00'), (ord('b'), 3, b'\xa0')])


def test_header_round_trip_with_nine_bit_code():
    table = {ord('A'): '101010101', ord('B'): '0', ord('C'): '11', ord('D'): '100', 0x20AC: '1011'}
    out = io.BytesIO()
    fileformat.write_header(out, 5, table)

    padding, reverse_table = fileformat.read_header(io.BytesIO(out.getvalue()))
    assert padding == 5
    assert reverse_table == {code: symbol for symbol, code in table.items()}


def test_nine_bit_code_uses_two_bytes():
    out = io.BytesIO()
    fileformat.write_table(out, {ord('A'): '111111111'})
    assert out.getvalue()[-2:] == b'\xff\x80'
    assert len(out.getvalue()) == 4 + 2 + 4 + 2


def test_read_table_inverts_write_table():
    table = {1: '00', 2: '01', 3: '10', 4: '110', 5: '1110', 6: '11110', 7: '111110', 8: '1111110',
             9: '11111110', 10: '111111110', 11: '111111111'}
    out = io.BytesIO()
    fileformat.write_table(out, table)
    assert fileformat.read_table(io.BytesIO(out.getvalue())) == {c: s for s, c in table.items()}


def test_body_follows_header():
    out = io.BytesIO()
    fileformat.write_encoded(out, 6, {ord('a'): '0', ord('b'): '1'}, b'\x40')
    stream = io.BytesIO(out.getvalue())
    fileformat.read_header(stream)
    assert fileformat.read_body(stream) == b'\x40'


def test_negative_table_size():
    with pytest.raises(MalformedHeaderError):
        fileformat.read_header(io.BytesIO(struct.pack(">ii", 0, -1)))


@pytest.mark.parametrize("padding", [-1, 8, 1000])
def test_padding_out_of_range(padding):
    with pytest.raises(MalformedHeaderError):
        fileformat.read_header(io.BytesIO(_header_bytes(padding, [(97, 1, b'\x00')])))


def test_truncated_header():
    data = _header_bytes(0, [(97, 1, b'\x00'), (98, 9, b'\xff\x80')])
    for cut in range(len(data)):
        with pytest.raises(MalformedHeaderError):
            fileformat.read_header(io.BytesIO(data[:cut]))


def test_empty_code_rejected():
    with pytest.raises(MalformedHeaderError):
        fileformat.read_header(io.BytesIO(_header_bytes(0, [(97, 0, b'')])))


def test_code_length_only_low_byte_counts():
    # 0x101 masks to a 1 bit code
    padding, reverse_table = fileformat.read_header(io.BytesIO(_header_bytes(0, [(97, 0x101, b'\x80')])))
    assert reverse_table == {'1': 97}


def test_duplicate_code_rejected():
    with pytest.raises(MalformedHeaderError):
        fileformat.read_header(io.BytesIO(_header_bytes(0, [(97, 1, b'\x00'), (98, 1, b'\x00')])))


def test_prefix_code_rejected():
    with pytest.raises(MalformedHeaderError):
        fileformat.read_header(io.BytesIO(_header_bytes(0, [(97, 1, b'\x00'), (98, 2, b'\x00')])))


def test_write_rejects_code_longer_than_255_bits():
    with pytest.raises(ValueError):
        fileformat.write_table(io.BytesIO(), {97: '1' * 256})


def test_write_rejects_symbol_beyond_16_bits():
    with pytest.raises(ValueError):
        fileformat.write_table(io.BytesIO(), {0x10000: '0'})


def test_encoded_file_round_trip(tmp_path):
    path = tmp_path / "out.huff"
    fileformat.write_encoded_file(path, 2, {ord('a'): '0', ord('b'): '10', ord('c'): '11'}, b'\x2c')
    padding, reverse_table, body = fileformat.read_encoded_file(path)
    assert padding == 2
    assert reverse_table == {'0': ord('a'), '10': ord('b'), '11': ord('c')}
    assert body == b'\x2c'


def test_write_failure_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        fileformat.write_encoded_file(tmp_path / "missing" / "out.huff", 0, {97: '0'}, b'')


def test_read_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        fileformat.read_encoded_file(tmp_path / "nope.huff")

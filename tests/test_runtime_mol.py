"""Tests for molecule primitives and combinators (byte-exact layouts)."""

import pytest

from molgen.runtime import mol
from molgen.runtime.mol import CodecError


def test_uint_little_endian():
    assert mol.Uint32.encode(1) == bytes.fromhex("01000000")
    assert mol.Uint64.encode(0x0102) == bytes.fromhex("0201000000000000")
    assert mol.Uint32.decode(bytes.fromhex("ff000000")) == 255
    assert mol.Uint128.byte_length == 16


def test_uint_accepts_hex_and_decimal_strings():
    assert mol.Uint32.encode("0x10") == mol.Uint32.encode(16)
    assert mol.Uint32.encode("16") == mol.Uint32.encode(16)


def test_uint_out_of_range_raises():
    with pytest.raises(CodecError):
        mol.Uint8.encode(256)
    with pytest.raises(CodecError):
        mol.Uint32.encode(-1)


def test_uint_rejects_bool():
    with pytest.raises(CodecError):
        mol.Uint8.encode(True)


def test_big_numbers_round_trip():
    value = (1 << 128) - 1
    assert mol.Uint128.decode(mol.Uint128.encode(value)) == value
    value = (1 << 255) + 7
    assert mol.Uint256.decode(mol.Uint256.encode(value)) == value


def test_decode_wrong_length_raises():
    with pytest.raises(CodecError):
        mol.Uint32.decode(b"\x01\x02")


def test_decode_accepts_hex_input():
    assert mol.Uint16.decode("0x3412") == 0x1234


def test_bytes_from_requires_prefix():
    with pytest.raises(CodecError):
        mol.bytes_from("1234")
    with pytest.raises(CodecError):
        mol.bytes_from("0x123")
    assert mol.bytes_from("0xABcd") == b"\xab\xcd"
    assert mol.hex_from(b"\xab\xcd") == "0xabcd"


def test_byte32_decodes_to_hex():
    value = "0x" + "11" * 32
    data = mol.Byte32.encode(value)
    assert len(data) == 32
    assert mol.Byte32.decode(data) == value


def test_bytes_layout():
    assert mol.Bytes.encode("0x1234") == bytes.fromhex("020000001234")
    assert mol.Bytes.encode(b"") == bytes.fromhex("00000000")
    assert mol.Bytes.decode(bytes.fromhex("020000001234")) == "0x1234"


def test_bytes_header_mismatch_raises():
    with pytest.raises(CodecError):
        mol.Bytes.decode(bytes.fromhex("0300000012"))


def test_string_utf8():
    assert mol.String.encode("abc") == bytes.fromhex("03000000616263")
    assert mol.String.decode(mol.String.encode("héllo")) == "héllo"
    with pytest.raises(CodecError):
        mol.String.encode(b"abc")


def test_struct_minimal_is_33_bytes():
    codec = mol.struct({"a": mol.Uint8, "b": mol.Byte32})
    value = {"a": 1, "b": "0x" + "00" * 32}
    data = codec.encode(value)
    assert codec.byte_length == 33
    assert len(data) == 33
    assert data[0] == 1
    assert codec.decode(data) == value


def test_struct_rejects_dynamic_field():
    with pytest.raises(CodecError):
        mol.struct({"a": mol.Bytes})


def test_struct_missing_field_raises():
    codec = mol.struct({"a": mol.Uint8, "b": mol.Uint8})
    with pytest.raises(CodecError, match="Missing field 'b'"):
        codec.encode({"a": 1})


def test_table_layout():
    codec = mol.table({"a": mol.Uint8, "b": mol.Bytes})
    data = codec.encode({"a": 1, "b": "0x"})
    # total 17, offsets 12 and 13, then 01, then an empty Bytes
    assert data == bytes.fromhex("11000000" "0c000000" "0d000000" "01" "00000000")
    assert codec.decode(data) == {"a": 1, "b": "0x"}


def test_empty_table_is_header_only():
    codec = mol.table({})
    assert codec.encode({}) == bytes.fromhex("04000000")
    assert codec.decode(bytes.fromhex("04000000")) == {}


def test_table_decode_tolerates_appended_fields():
    v2 = mol.table({"a": mol.Uint8, "b": mol.Uint8, "c": mol.Uint8})
    v1 = mol.table({"a": mol.Uint8, "b": mol.Uint8})
    assert v1.decode(v2.encode({"a": 1, "b": 2, "c": 3})) == {"a": 1, "b": 2}


def test_table_decode_missing_fields_raises():
    v1 = mol.table({"a": mol.Uint8})
    v2 = mol.table({"a": mol.Uint8, "b": mol.Uint8})
    with pytest.raises(CodecError):
        v2.decode(v1.encode({"a": 1}))


def test_fixvec_layout():
    assert mol.Uint16Vec.encode([]) == bytes.fromhex("00000000")
    assert mol.Uint16Vec.encode([1, 2]) == bytes.fromhex("02000000" "0100" "0200")
    assert mol.Uint16Vec.decode(bytes.fromhex("02000000" "0100" "0200")) == [1, 2]


def test_fixvec_count_mismatch_raises():
    with pytest.raises(CodecError):
        mol.Uint16Vec.decode(bytes.fromhex("03000000" "0100" "0200"))


def test_fixvec_rejects_dynamic_item():
    with pytest.raises(CodecError):
        mol.fixvec(mol.Bytes)


def test_dynvec_layout():
    assert mol.BytesVec.encode([]) == bytes.fromhex("04000000")
    data = mol.BytesVec.encode(["0x12", "0x3456"])
    # total 23, offsets 12 and 17
    assert data == bytes.fromhex("17000000" "0c000000" "11000000" "0100000012" "020000003456")
    assert mol.BytesVec.decode(data) == ["0x12", "0x3456"]


def test_dynvec_total_size_mismatch_raises():
    with pytest.raises(CodecError):
        mol.BytesVec.decode(bytes.fromhex("05000000"))


def test_dynvec_bad_offset_raises():
    with pytest.raises(CodecError):
        mol.BytesVec.decode(bytes.fromhex("0c000000" "03000000" "00000000"))


def test_vector_picks_layout_by_item_size():
    assert mol.vector(mol.Uint8).encode([7]) == mol.fixvec(mol.Uint8).encode([7])
    assert mol.vector(mol.String).encode(["a"]) == mol.dynvec(mol.String).encode(["a"])


def test_option_layout():
    assert mol.BytesOpt.encode(None) == b""
    assert mol.BytesOpt.decode(b"") is None
    assert mol.BytesOpt.encode("0x01") == mol.Bytes.encode("0x01")
    assert mol.Byte32Opt.decode(mol.Byte32Opt.encode("0x" + "ab" * 32)) == "0x" + "ab" * 32


def test_byte_array_fixed_length():
    codec = mol.byte_array(10)
    assert codec.byte_length == 10
    with pytest.raises(CodecError):
        codec.encode("0x00")


def test_codec_map():
    flag = mol.Uint8.map(in_map=lambda b: 1 if b else 0, out_map=bool)
    assert flag.encode(True) == b"\x01"
    assert flag.decode(b"\x00") is False
    assert flag.byte_length == 1


def test_records_accept_attribute_objects():
    class Point:
        x = 1
        y = 2

    codec = mol.struct({"x": mol.Uint8, "y": mol.Uint8})
    assert codec.encode(Point()) == b"\x01\x02"

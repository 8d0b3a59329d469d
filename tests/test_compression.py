"""Tests for the BER index codec and the zstd and raw deflate wrappers."""

import zlib

import pytest

from joypad_keymap.compression import (compress, decode_varint, decompress,
                                       deflate_compress, deflate_decompress,
                                       make_deflate_compressor,
                                       encode_varint, make_compressor)


@pytest.mark.parametrize("value, encoded", [
    (0, b"\x00"),
    (6, b"\x06"),
    (127, b"\x7f"),
    (128, b"\x81\x00"),
    (300, b"\x82\x2c"),
    (16383, b"\xff\x7f"),
    (16384, b"\x81\x80\x00"),
])
def test_encode_varint_most_significant_group_first(value, encoded):
    """Continuation bit is set on every group except the last."""
    assert encode_varint(value) == encoded
    assert decode_varint(encoded) == (value, len(encoded))


def test_decode_varint_from_offset():
    """Decoding starts at the offset and reports where the value ended."""
    data = b"\xaa" + encode_varint(1000) + b"\x05"
    value, end = decode_varint(data, 1)
    assert value == 1000
    assert data[end] == 0x05


def test_decode_varint_truncated():
    with pytest.raises(ValueError):
        decode_varint(b"\x81")


def test_encode_varint_rejects_negative():
    with pytest.raises(ValueError):
        encode_varint(-1)


def test_zstd_round_trip():
    """Compressed blobs decompress to the exact input."""
    data = b"Move Left/Right\x00" * 50
    packed = compress(data)
    assert len(packed) < len(data)
    assert decompress(packed) == data
    assert decompress(make_compressor(3)(data)) == data


def test_compress_is_deterministic():
    data = bytes(range(256)) * 4
    assert compress(data) == compress(data)


def test_raw_deflate_round_trip():
    """Deflate blobs carry no zlib header, as the host inflater expects."""
    data = b"Quit to Title\x00" * 40
    packed = deflate_compress(data)
    assert len(packed) < len(data)
    assert zlib.decompress(packed, -15) == data
    assert deflate_decompress(packed) == data
    assert deflate_decompress(make_deflate_compressor(1)(b"")) == b""

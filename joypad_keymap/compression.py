# ==================================================
# joypad_keymap/compression.py
# ==================================================
import zlib

import zstandard as zstd

from .const import COMPRESSION_LEVEL

# -------- BER index helpers ----------------------------------------------
# 7-bit groups, most significant first, high bit set on all but the last.

def encode_varint(n: int) -> bytes:
    if n < 0:
        raise ValueError(f"varint must be non-negative, got {n}")
    out = bytearray([n & 0x7F])
    n >>= 7
    while n:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.reverse()
    return bytes(out)

def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Return ``(value, offset just past the encoded value)``."""
    value = 0
    while True:
        if offset >= len(data):
            raise ValueError("truncated varint")
        byte = data[offset]
        offset += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, offset

# -------- zstd wrappers ---------------------------------------------------

cctx = zstd.ZstdCompressor(level=COMPRESSION_LEVEL)
dctx = zstd.ZstdDecompressor()

def compress(data: bytes) -> bytes:
    return cctx.compress(data)

def decompress(data: bytes) -> bytes:
    return dctx.decompress(data)

def make_compressor(level: int):
    """Compressor callable for a non-default level (same frame format)."""
    return zstd.ZstdCompressor(level=level).compress

# -------- raw deflate (no zlib header) -----------------------------------
# what the DOSBox Pure host inflates its embedded map_buckets with

def deflate_compress(data: bytes, level: int = 9) -> bytes:
    co = zlib.compressobj(level, zlib.DEFLATED, -15)
    return co.compress(data) + co.flush()

def deflate_decompress(data: bytes) -> bytes:
    return zlib.decompress(data, -15)

def make_deflate_compressor(level: int = 9):
    return lambda data: deflate_compress(data, level)

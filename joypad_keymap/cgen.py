# ==================================================
# joypad_keymap/cgen.py
# ==================================================
"""C header/source rendering of a compiled keymap."""
from .compiler import CompiledKeymap
from .errors import CapacityExceeded

MAX_C_STRING   = 65510          # longest literal compilers reliably accept
LINE_BREAK_AT  = 950
KEYS_PER_LINE  = 128

_ESCAPES = {8: "\\b", 12: "\\f", 10: "\\n", 13: "\\r", 9: "\\t", 11: "\\v",
            34: '\\"', 92: "\\\\"}

_PLAIN, _OCTAL, _TRIGRAPH = 0, 1, 2

# ------------------------------------------------------------------
def to_c_string(buf: bytes) -> str:
    """Quote ``buf`` as a C string literal, wrapped every ~950 characters."""
    if len(buf) > MAX_C_STRING:
        raise CapacityExceeded(f"Too long to string encode ({len(buf)}), use byte array notation")
    out, line_len, mode = ['"'], 0, _PLAIN
    for i, p in enumerate(buf):
        if p in _ESCAPES:
            a, mode = _ESCAPES[p], _PLAIN
        elif p == 63:                                   # '?', avoid ??x trigraphs
            a, mode = ("\\?" if mode == _TRIGRAPH else "?"), _TRIGRAPH
        elif 48 <= p <= 57:                             # digit would extend an octal escape
            a = f"\\{p:o}" if mode == _OCTAL else chr(p)
        elif 32 <= p <= 126:
            a, mode = chr(p), _PLAIN
        elif p == 0 and i == len(buf) - 1:
            a = ""                                      # implicit terminator
        else:
            a, mode = f"\\{p:o}", _OCTAL
        line_len += len(a)
        if line_len > LINE_BREAK_AT:
            out.append('"\n\t\t"')
            line_len = 0
        out.append(a)
    out.append('"')
    return "".join(out)


def render_header(keymap: CompiledKeymap) -> str:
    return (
        '#include "include/config.h"\n'
        "\n"
        "struct MAPBucket\n"
        "{\n"
        "\tconst Bit8u* idents_compressed;\n"
        "\tBit32u idents_size_compressed;\n"
        "\tBit32u idents_size_uncompressed;\n"
        "\tconst Bit8u* mappings_compressed;\n"
        "\tBit32u mappings_size_compressed;\n"
        "\tBit32u mappings_size_uncompressed;\n"
        "\tBit32u mappings_action_offset;\n"
        "};\n"
        "\n"
        f"enum {{ MAP_TABLE_SIZE = {keymap.table_size}, MAP_BUCKETS = {keymap.bucket_count} }};\n"
        "extern const Bit32u map_keys[MAP_TABLE_SIZE];\n"
        "extern const MAPBucket map_buckets[MAP_BUCKETS];\n"
    )


def render_source(keymap: CompiledKeymap, header_name: str = "keyb2joypad.h") -> str:
    parts = [
        "// Original data from the Keyb2Joypad Project\n"
        "// Copyright Jemy Murphy and bigjim - Used with permission\n"
        "// Amendments and fixes done by the DOSBox Pure project\n"
        "\n"
        f'#include "{header_name}"\n'
        "\n"
        "const Bit32u map_keys[MAP_TABLE_SIZE] = {"
    ]
    for i, key in enumerate(keymap.keys.tolist()):
        if i:
            parts.append(",")
        if i % KEYS_PER_LINE == 0:
            parts.append("\n\t")
        parts.append(str(key))
    parts.append("\n};\n\nconst MAPBucket map_buckets[MAP_BUCKETS] =\n{\n")

    for bk in keymap.buckets:
        parts.append(
            "\t{\n"
            f"\t\t(const Bit8u*){to_c_string(bk.idents_compressed)},\n"
            f"\t\t{len(bk.idents_compressed)},\n"
            f"\t\t{bk.ident_size},\n"
            f"\t\t(const Bit8u*){to_c_string(bk.mappings_compressed)},\n"
            f"\t\t{len(bk.mappings_compressed)},\n"
            f"\t\t{bk.mapping_size},\n"
            f"\t\t{bk.action_offset},\n"
            "\t},\n"
        )
    parts.append("};\n")
    return "".join(parts)

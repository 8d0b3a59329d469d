# ==================================================
# examples/build_keymap.py
# ==================================================
import argparse, logging, sys
from pathlib import Path

from joypad_keymap import KeymapCompiler, KeymapError, load_catalog
from joypad_keymap.cgen import render_header, render_source
from joypad_keymap.compiler import verify
from joypad_keymap.compression import (decompress, deflate_decompress,
                                       make_compressor, make_deflate_compressor)
from joypad_keymap.const import BUCKETS, COMMON_ACTIONS, COMPRESSION_LEVEL, TABLE_SIZE

log = logging.getLogger("build_keymap")

def main(argv=None):
    p = argparse.ArgumentParser(description="compile keyb2joypad.yml into C source")
    p.add_argument("yml", nargs="?", default="keyb2joypad.yml", help="catalogue path")
    p.add_argument("output", nargs="?", default="keyb2joypad", help="output path without extension")
    p.add_argument("--buckets", type=int, default=BUCKETS)
    p.add_argument("--table-size", type=int, default=TABLE_SIZE)
    p.add_argument("--level", type=int, default=None,
                   help=f"compression level (zstd default {COMPRESSION_LEVEL}, deflate 9)")
    p.add_argument("--deflate", action="store_true",
                   help="raw deflate blobs, as the DOSBox Pure host expects")
    p.add_argument("--fixed-actions", action="store_true",
                   help="seed action pools with the built-in common actions")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(message)s")

    if args.deflate:
        compressor = make_deflate_compressor(9 if args.level is None else args.level)
        decompressor = deflate_decompress
    else:
        compressor = make_compressor(COMPRESSION_LEVEL if args.level is None else args.level)
        decompressor = decompress

    compiler = KeymapCompiler(table_size=args.table_size, buckets=args.buckets,
                              common_actions=COMMON_ACTIONS if args.fixed_actions else None,
                              compressor=compressor)
    try:
        log.info("Loading %s ...", args.yml)
        keymap = compiler.compile(load_catalog(args.yml))
        verify(keymap, decompressor)
        header, source = render_header(keymap), render_source(keymap, Path(args.output).name + ".h")
    except KeymapError as e:
        log.error("%s", e)
        return 1

    for ext, text in ((".h", header), (".cpp", source)):
        path = Path(args.output + ext)
        log.info("Writing %s ...", path)
        path.write_text(text, encoding="utf-8")
    log.info("Done!")
    return 0

if __name__ == "__main__":
    sys.exit(main())

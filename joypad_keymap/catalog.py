# ==================================================
# joypad_keymap/catalog.py
# ==================================================
"""
Reader for the line oriented ``keyb2joypad.yml`` catalogue::

    - game:
      name: "Some Game"
      year: 1993
      identifier_1: GAME.EXE, 123456
      input_pad_a: z Jump
      input_pad_lstick_left: left Move Left
      input_wheel_1: F1+F2 Menu   # trailing comment

Only the subset of YAML the catalogue uses is understood; anything else
is a ``CatalogSyntaxError``.
"""
import re
from pathlib import Path
from typing import Iterable, Iterator

from .compiler import TitleRecord
from .errors import CatalogSyntaxError
from .mapping import Binding

_NAME   = re.compile(r'^\s*name:\s*"(.*)"')
_YEAR   = re.compile(r"^\s*year:\s*(\d+)")
_IDENT  = re.compile(r"^\s*identifier_\d+:\s*(\S+?)\s*,\s*(\d+)")
_INPUT  = re.compile(r"^\s*input_(pad|wheel)_(\w+?)(?:_(\w+)|):\s*(\S+)(?:\s+(.*?)|)\s*(#|$)")


def parse_binding(line: str) -> Binding | None:
    m = _INPUT.match(line)
    if not m:
        return None
    device, button, part, keys, action = m.group(1, 2, 3, 4, 5)
    name = f"{button}_{part}" if part else button
    if device == "wheel":
        name = f"wheel_{name}"
    return Binding(name, tuple(keys.split("+")), action or "", line.strip())


def iter_titles(lines: Iterable[str]) -> Iterator[TitleRecord]:
    title = None
    for lineno, line in enumerate(lines, 1):
        line = line.rstrip("\r\n")
        if line.startswith("-"):                      # separator, rest of line ignored
            if title is not None and title.name:
                yield title
                title = None
            continue
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        if title is None:
            title = TitleRecord(name="", year=None, line=lineno)

        if m := _NAME.match(line):
            if title.name:
                raise CatalogSyntaxError(f"Multiple gamename keys for {title.name} on line {lineno}")
            title.name = m.group(1)
        elif m := _YEAR.match(line):
            if title.year:
                raise CatalogSyntaxError(f"Multiple gameyear keys for {title.name} on line {lineno}")
            title.year = int(m.group(1))
        elif m := _IDENT.match(line):
            title.identifiers.append((m.group(1), int(m.group(2))))
        elif (binding := parse_binding(line)) is not None:
            title.bindings.append(binding)
        else:
            raise CatalogSyntaxError(f"Unknown YML entry '{line}' on line {lineno}")

    if title is not None:
        if not title.name and (title.year or title.bindings or title.identifiers):
            raise CatalogSyntaxError("Had data but not a game name at the end of the YML file")
        if title.name:
            yield title


def parse_catalog(text: str) -> list[TitleRecord]:
    return list(iter_titles(text.splitlines()))


def load_catalog(path: str | Path) -> list[TitleRecord]:
    return parse_catalog(Path(path).read_text(encoding="utf-8"))

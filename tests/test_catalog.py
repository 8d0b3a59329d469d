"""Tests for the keyb2joypad.yml reader."""

import pytest

from joypad_keymap.catalog import parse_binding, parse_catalog
from joypad_keymap.errors import CatalogSyntaxError

SAMPLE = """\
# keyboard to joypad mappings
- game:
  name: "Commander Keen"
  year: 1990
  identifier_1: KEEN1.EXE, 51190
  identifier_2: LEVEL01.CK1, 1008
  input_pad_a: leftctrl Jump
  input_pad_lstick_left: left Move Left
  input_pad_lstick_right: right Move Right   # walk
  input_wheel_1: F1+F2 Help

- game:
  name: "Dune"
  year: 1992
  identifier_1: DUNE.EXE, 12000
  input_pad_start: enter
"""


def test_parse_sample():
    keen, dune = parse_catalog(SAMPLE)
    assert keen.name == "Commander Keen"
    assert keen.year == 1990
    assert keen.identifiers == [("KEEN1.EXE", 51190), ("LEVEL01.CK1", 1008)]
    assert [b.button for b in keen.bindings] == ["a", "lstick_left", "lstick_right", "wheel_1"]
    assert keen.bindings[2].action == "Move Right"
    assert keen.bindings[3].keys == ("F1", "F2")
    assert dune.bindings[0].action == ""
    assert dune.line == 13


def test_parse_binding_variants():
    assert parse_binding("  input_pad_l2: q").button == "l2"
    assert parse_binding("  input_pad_rstick_down: s Duck").button == "rstick_down"
    assert parse_binding("  year: 1990") is None


def test_repeated_name_key():
    with pytest.raises(CatalogSyntaxError):
        parse_catalog('- game:\n  name: "A"\n  name: "B"\n')


def test_unknown_entry():
    with pytest.raises(CatalogSyntaxError):
        parse_catalog('- game:\n  name: "A"\n  genre: platform\n')


def test_data_without_name():
    with pytest.raises(CatalogSyntaxError):
        parse_catalog("- game:\n  year: 1990\n")

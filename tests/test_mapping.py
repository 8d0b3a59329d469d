"""Tests for binding normalization and analog half merging."""

import pytest

from joypad_keymap.const import KEY_CODES, KEY_NONE, WHEEL_BTN_ID
from joypad_keymap.errors import DuplicateBinding, InvalidKeyCount, UnknownSymbol
from joypad_keymap.mapping import (Binding, MappingNormalizer, MappingRecord,
                                   interleave, merge_actions, normalize)

K = KEY_CODES


def test_single_button_record():
    """'button A = key z' encodes one key, no label flag."""
    (rec,) = normalize("Game", [Binding("a", ("z",))])
    assert rec == MappingRecord(8, (K["z"],))
    assert rec.button_byte == 8
    assert rec.raw() == bytes([8, 30])


def test_key_names_are_case_insensitive():
    (rec,) = normalize("Game", [Binding("start", ("ENTER", "LeftShift"), "Start")])
    assert rec.keys == (K["enter"], K["leftshift"])
    assert rec.button_byte == (1 << 6) | 0x20 | 3
    assert rec.raw() == bytes([rec.button_byte]) + b"Start\x00" + bytes(rec.keys)


def test_extended_actions_start_at_200():
    (rec,) = normalize("Game", [Binding("b", ("mouse_move_up",))])
    assert rec.keys == (200,)


def test_interleave_pads_shorter_half():
    assert interleave([1], [2, 3]) == (1, 2, KEY_NONE, 3)
    assert interleave([1, 2, 3], []) == (1, 0, 2, 0, 3, 0)


def test_analog_merge_keys():
    """[A] and [B,C] interleave positionally, shorter half padded with none."""
    norm = MappingNormalizer("Game")
    norm.add(Binding("lstick_left", ("a",)))
    rec = norm.add(Binding("lstick_right", ("b", "c")))
    assert rec.keys == (K["a"], K["b"], KEY_NONE, K["c"])
    assert rec.analog
    assert rec.button_byte == (1 << 6) | 16
    assert len(norm) == 1


def test_analog_merge_shared_verb():
    """'Move Left' + 'Move Right' collapse to 'Move Left/Right'."""
    recs = normalize("Game", [Binding("lstick_left", ("left",), "Move Left"),
                              Binding("lstick_right", ("right",), "Move Right")])
    assert recs[0].action == "Move Left\x01Right"
    assert recs[0].label == "Move Left/Right"
    assert recs[0].button_byte & 0x20


def test_analog_second_half_first():
    """Binding order of the halves does not change the merged record."""
    a = normalize("Game", [Binding("rstick_down", ("s",), "Move Down"),
                           Binding("rstick_up", ("w",), "Move Up")])
    b = normalize("Game", [Binding("rstick_up", ("w",), "Move Up"),
                           Binding("rstick_down", ("s",), "Move Down")])
    assert a == b
    assert a[0].keys == (K["w"], K["s"])
    assert a[0].label == "Move Up/Down"


def test_analog_first_half_alone():
    (rec,) = normalize("Game", [Binding("lstick_down", ("down",), "Duck")])
    assert rec.keys == (KEY_NONE, K["down"])
    assert rec.action == "Nothing\x01Duck"


def test_merge_actions_without_common_verb():
    assert merge_actions("Walk Left", "Run Right") == "Walk Left\x01Run Right"
    assert merge_actions("Jump", "") == "Jump\x01Nothing"
    assert merge_actions("", "") == ""


def test_analog_half_without_label_keeps_other():
    recs = normalize("Game", [Binding("lstick_up", ("up",)),
                              Binding("lstick_down", ("down",), "Crouch")])
    assert recs[0].action == "Nothing\x01Crouch"


def test_analog_same_half_twice():
    norm = MappingNormalizer("Game")
    norm.add(Binding("lstick_left", ("a",)))
    norm.add(Binding("lstick_right", ("d",)))
    with pytest.raises(DuplicateBinding):
        norm.add(Binding("lstick_left", ("q",)))


def test_analog_record_keeps_first_position():
    recs = normalize("Game", [Binding("lstick_up", ("up",)),
                              Binding("a", ("z",)),
                              Binding("lstick_down", ("down",))])
    assert [r.button for r in recs] == [17, 8]


def test_duplicate_button():
    with pytest.raises(DuplicateBinding):
        normalize("Game", [Binding("a", ("z",)), Binding("a", ("x",))])


@pytest.mark.parametrize("keys", [(), ("a", "b", "c", "d")])
def test_invalid_key_count(keys):
    with pytest.raises(InvalidKeyCount):
        normalize("Game", [Binding("a", keys)])


@pytest.mark.parametrize("binding", [
    Binding("a", ("nosuchkey",)),
    Binding("a", ("none",)),
    Binding("turbo", ("z",)),
])
def test_unknown_symbols(binding):
    with pytest.raises(UnknownSymbol):
        normalize("Game", [binding])


def test_wheel_slots_in_order():
    recs = normalize("Game", [Binding("wheel_1", ("F1",), "Menu"),
                              Binding("wheel_2", ("F2",), "Map")])
    assert [r.button for r in recs] == [WHEEL_BTN_ID, WHEEL_BTN_ID]


def test_wheel_slot_out_of_order():
    with pytest.raises(UnknownSymbol):
        normalize("Game", [Binding("wheel_2", ("F1",))])

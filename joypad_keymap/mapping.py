# ==================================================
# joypad_keymap/mapping.py
# ==================================================
"""
Per-title normalization of input bindings into mapping records.

Analog sticks are bound one half at a time (``lstick_left`` then
``lstick_right``); both halves end up in a single record whose keys are
stored as interleaved ``(half0, half1)`` pairs and whose label holds both
half labels separated by ``ACTION_SEP``.
"""
import re
from dataclasses import dataclass
from typing import Sequence

from .const import (ACTION_NOTHING, ACTION_SEP, ANALOG_SECOND_HALF,
                    BTN_ACTION_FLAG, BTN_COUNT_SHIFT, BUTTON_CODES, KEY_CODES,
                    KEY_NONE, MAX_KEYS, WHEEL_BTN_ID, is_analog)
from .compression import encode_varint
from .errors import DuplicateBinding, InvalidKeyCount, UnknownSymbol

_VERB = re.compile(r"^(\S+) (.+)$", re.S)


@dataclass(frozen=True)
class Binding:
    button: str                     # "a", "lstick_up", "wheel_1", ...
    keys: Sequence[str]
    action: str = ""
    line: str = ""                  # source text, for error messages


@dataclass(frozen=True)
class MappingRecord:
    button: int
    keys: tuple[int, ...]
    action: str = ""
    analog: bool = False

    @property
    def button_byte(self) -> int:
        count = len(self.keys) // (2 if self.analog else 1)
        return (((count - 1) << BTN_COUNT_SHIFT)
                | (BTN_ACTION_FLAG if self.action else 0)
                | self.button)

    @property
    def label(self) -> str:
        """Action text as pooled: analog halves shown as ``a/b``."""
        return self.action.replace(ACTION_SEP, "/", 1)

    def raw(self) -> bytes:
        """Encoding with the label inline; structural identity of the record."""
        text = (self.action + "\0").encode("utf-8") if self.action else b""
        return bytes([self.button_byte]) + text + bytes(self.keys)

    def pooled(self, action_idx: int | None) -> bytes:
        """Encoding with the label replaced by its pool offset."""
        head = bytes([self.button_byte])
        if self.action:
            head += encode_varint(action_idx)
        return head + bytes(self.keys)


# ── helpers ───────────────────────────────────────────────────
def resolve_keys(names: Sequence[str], where: str) -> list[int]:
    if not 0 < len(names) <= MAX_KEYS:
        raise InvalidKeyCount(f"{len(names)} keys in button mapping {where}, expected 1 to {MAX_KEYS}")
    codes = []
    for name in names:
        code = KEY_CODES.get(name.strip().lower())
        if code is None:
            raise UnknownSymbol(f"Unknown key '{name}' listed in button mapping {where}")
        codes.append(code)
    return codes

def interleave(half0: Sequence[int], half1: Sequence[int]) -> tuple[int, ...]:
    n = max(len(half0), len(half1))
    h0 = list(half0) + [KEY_NONE] * (n - len(half0))
    h1 = list(half1) + [KEY_NONE] * (n - len(half1))
    return tuple(k for pair in zip(h0, h1) for k in pair)

def merge_actions(action0: str, action1: str) -> str:
    m0, m1 = _VERB.match(action0), _VERB.match(action1)
    if m0 and m1 and m0.group(1) == m1.group(1):
        return f"{m0.group(1)} {m0.group(2)}{ACTION_SEP}{m1.group(2)}"
    if action0 or action1:
        return f"{action0 or ACTION_NOTHING}{ACTION_SEP}{action1 or ACTION_NOTHING}"
    return ""


class MappingNormalizer:
    """Collects one title's bindings in order of first appearance."""
    def __init__(self, title: str = ""):
        self.title   = title
        self._records: list[MappingRecord] = []
        self._index: dict[int, int] = {}       # button id -> record position
        self._wheels = 0

    def __len__(self):
        return len(self._records)

    def records(self) -> list[MappingRecord]:
        return list(self._records)

    # ------------------------------------------------------------------
    def add(self, binding: Binding) -> MappingRecord:
        where = f"'{binding.line or binding.button}' of game '{self.title}'"
        name  = binding.button.lower()

        if name.startswith("wheel_"):
            return self._add_wheel(name, binding, where)

        btn_id = BUTTON_CODES.get(name)
        if btn_id is None:
            raise UnknownSymbol(f"Unknown button mapping {where}")
        keys = resolve_keys(binding.keys, where)
        action = binding.action.strip()

        if is_analog(btn_id):
            half = 1 if name.rsplit("_", 1)[1] in ANALOG_SECOND_HALF else 0
            return self._add_analog(btn_id, half, keys, action, where)

        if btn_id in self._index:
            raise DuplicateBinding(f"Duplicated input mapping {where}")
        record = MappingRecord(btn_id, tuple(keys), action)
        self._index[btn_id] = len(self._records)
        self._records.append(record)
        return record

    def _add_wheel(self, name: str, binding: Binding, where: str) -> MappingRecord:
        num = name[len("wheel_"):]
        if not num.isdigit() or int(num) != self._wheels + 1:
            raise UnknownSymbol(f"Wheel number out of order {where}")
        self._wheels += 1
        record = MappingRecord(WHEEL_BTN_ID, tuple(resolve_keys(binding.keys, where)),
                               binding.action.strip())
        self._records.append(record)
        return record

    def _add_analog(self, btn_id: int, half: int, keys: list[int], action: str,
                    where: str) -> MappingRecord:
        pos = self._index.get(btn_id)
        if pos is None:                                  # first half
            halves = (keys, []) if half == 0 else ([], keys)
            if action:
                action = (f"{action}{ACTION_SEP}{ACTION_NOTHING}" if half == 0
                          else f"{ACTION_NOTHING}{ACTION_SEP}{action}")
            record = MappingRecord(btn_id, interleave(*halves), action, analog=True)
            self._index[btn_id] = len(self._records)
            self._records.append(record)
            return record

        old = self._records[pos]
        if old.keys[half] != KEY_NONE:
            raise DuplicateBinding(f"Duplicated input mapping {where}")
        old_halves = (old.keys[0::2], old.keys[1::2])
        old_labels = (old.action.split(ACTION_SEP) + [""])[:2] if old.action else ["", ""]

        halves = (keys, old_halves[1]) if half == 0 else (old_halves[0], keys)
        labels = (action, old_labels[1]) if half == 0 else (old_labels[0], action)
        record = MappingRecord(btn_id, interleave(*halves), merge_actions(*labels), analog=True)
        self._records[pos] = record
        return record


def normalize(title: str, bindings: Sequence[Binding]) -> list[MappingRecord]:
    norm = MappingNormalizer(title)
    for binding in bindings:
        norm.add(binding)
    return norm.records()

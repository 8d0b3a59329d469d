# ==================================================
# joypad_keymap/table.py
# ==================================================
from typing import Optional

import numpy as np

from .const import BUCKETS, TABLE_SIZE
from .errors import (DuplicateFingerprint, InvalidLayout, ReservedFingerprint,
                     TableFull)

FNV_SEED  = 0x811C9DC5
FNV_PRIME = 0x01000193

# ── fingerprints ──────────────────────────────────────────────
def dbp_hash(data: str | bytes) -> int:
    """32-bit FNV hash over the characters (or bytes) of ``data``."""
    codes = data if isinstance(data, (bytes, bytearray)) else map(ord, data)
    h = FNV_SEED
    for c in codes:
        h = ((h * FNV_PRIME) & 0xFFFFFFFF) ^ c
    return h

def hash_size(h: int, size: int) -> int:
    return (h ^ (size << 3)) & 0xFFFFFFFF

def fingerprint(filename: str, size: int) -> int:
    return hash_size(dbp_hash(filename), size)


class FingerprintTable:
    """Fixed-capacity open-addressing table of 32-bit fingerprints."""
    def __init__(self, table_size: int = TABLE_SIZE, buckets: int = BUCKETS):
        if table_size % buckets:
            raise InvalidLayout(f"table size {table_size} must be a multiple of the bucket count {buckets}")
        self.table_size = table_size
        self.buckets    = buckets
        self.keys       = np.zeros(table_size, dtype=np.uint32)
        self._owners: dict[int, str] = {}     # fingerprint -> description

    def __len__(self):
        return len(self._owners)

    @property
    def fill_rate(self) -> float:
        return len(self._owners) / self.table_size

    # ------------------------------------------------------------------
    def bucket_of(self, slot: int) -> int:
        return slot % self.buckets

    def row_of(self, slot: int) -> int:
        return slot // self.buckets

    # ------------------------------------------------------------------
    def insert(self, fp: int, description: str) -> int:
        if fp == 0:
            raise ReservedFingerprint(f"{description} has fingerprint 0")
        owner = self._owners.get(fp)
        if owner is not None and owner != description:
            raise DuplicateFingerprint(f"DUPLICATE {description} [{owner}]")

        slot = fp % self.table_size
        for _ in range(self.table_size):
            held = int(self.keys[slot])
            if held == 0 or held == fp:
                self.keys[slot] = fp
                self._owners[fp] = description
                return slot
            slot = (slot + 1) % self.table_size
        raise TableFull(f"HASH TABLE FULL @ {description}")

    def lookup(self, fp: int) -> Optional[int]:
        if fp == 0:
            return None
        slot = fp % self.table_size
        for _ in range(self.table_size):
            held = int(self.keys[slot])
            if held == fp:
                return slot
            if held == 0:
                return None
            slot = (slot + 1) % self.table_size
        return None

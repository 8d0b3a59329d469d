# ==================================================
# joypad_keymap/bucket.py
# ==================================================
import struct
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .const import (BUCKETS, IDENT_FMT, IDENT_SIZE, MAPREF_FMT, MAX_MAPPINGS,
                    MAX_POOL_OFFSET, TABLE_SIZE, YEAR_EPOCH, YEAR_MAX_OFFSET)
from .errors import CapacityExceeded, InvalidYear
from .mapping import MappingRecord


class StringPool:
    """Append-only pool of NUL terminated strings; index = byte offset."""
    def __init__(self, seed: Iterable[str] = ()):
        self._index: dict[str, int] = {}
        self._data = bytearray()
        for s in seed:
            self.intern(s)

    def __len__(self):
        return len(self._index)

    def __contains__(self, s: str):
        return s in self._index

    @property
    def size(self) -> int:
        return len(self._data)

    def intern(self, s: str, data: bytes | None = None) -> int:
        """Offset of ``s``; on first sight ``data`` (default: ``s``) is appended."""
        idx = self._index.get(s)
        if idx is None:
            idx = len(self._data)
            self._index[s] = idx
            self._data += (s.encode("utf-8") if data is None else data) + b"\0"
        return idx

    def to_bytes(self) -> bytes:
        return bytes(self._data)


@dataclass(frozen=True)
class MapReference:
    bucket: int
    offset: int

    def to_bytes(self) -> bytes:
        return struct.pack(MAPREF_FMT, self.bucket, self.offset)


class Bucket:
    """Four growing regions: idents, titles, mapping sets, action labels."""
    def __init__(self, number: int, rows: int = TABLE_SIZE // BUCKETS,
                 common_actions: Sequence[str] = ()):
        self.number   = number
        self.idents   = np.zeros((rows, IDENT_SIZE), dtype=np.uint8)
        self.titles   = StringPool()
        self.actions  = StringPool(common_actions)
        self.maps     = bytearray()
        self.map_sets = 0
        self.records  = 0
        self.used_rows: set[int] = set()

    # -- titles --------------------------------------------------------
    def intern_title(self, name: str, year: int) -> int:
        key = f"{name} (#{year})"
        if key in self.titles:
            return self.titles.intern(key)
        if not 0 <= year - YEAR_EPOCH <= YEAR_MAX_OFFSET:
            raise InvalidYear(f"Invalid year {year} for game {name}")
        if self.titles.size > MAX_POOL_OFFSET:
            raise CapacityExceeded("Title data too large, need more buckets")
        return self.titles.intern(key, bytes([year - YEAR_EPOCH]) + name.encode("utf-8"))

    # -- mapping sets --------------------------------------------------
    def append_set(self, records: Sequence[MappingRecord]) -> int:
        offset = len(self.maps)
        if offset > MAX_POOL_OFFSET:
            raise CapacityExceeded(f"Map data too large in bucket {self.number}, need more buckets")
        self.maps.append(len(records))
        for rec in records:
            idx = self.actions.intern(rec.label) if rec.action else None
            self.maps += rec.pooled(idx)
        self.map_sets += 1
        self.records  += len(records)
        return offset

    # -- identification ------------------------------------------------
    def put_ident(self, row: int, ref: MapReference, title_idx: int):
        self.used_rows.add(row)
        self.idents[row] = np.frombuffer(
            struct.pack(IDENT_FMT, ref.bucket, ref.offset, title_idx), dtype=np.uint8)

    # -- regions -------------------------------------------------------
    def ident_region(self) -> bytes:
        return self.idents.tobytes() + self.titles.to_bytes()

    def mapping_region(self) -> bytes:
        return bytes(self.maps) + self.actions.to_bytes()


class MappingDeduplicator:
    """Stores each distinct mapping set once, round-robin over the buckets."""
    def __init__(self, buckets: Sequence[Bucket]):
        self.buckets = buckets
        self._refs: dict[bytes, MapReference] = {}
        self.action_count: Counter[str] = Counter()

    def __len__(self):
        return len(self._refs)

    @staticmethod
    def key_of(records: Sequence[MappingRecord]) -> bytes:
        return b"".join(rec.raw() for rec in records)

    def commit(self, records: Sequence[MappingRecord], title: str = "") -> MapReference:
        key = self.key_of(records)
        ref = self._refs.get(key)
        if ref is not None:
            return ref
        if len(records) > MAX_MAPPINGS:
            raise CapacityExceeded(f"Game {title} has more than {MAX_MAPPINGS} mappings")

        bucket = self.buckets[len(self._refs) % len(self.buckets)]
        ref = MapReference(bucket.number, bucket.append_set(records))
        self._refs[key] = ref
        self.action_count.update(rec.label for rec in records if rec.action)
        return ref

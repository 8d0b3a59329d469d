# ==================================================
# joypad_keymap/compiler.py
# ==================================================
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from .bucket import Bucket, MapReference, MappingDeduplicator
from .compression import compress, decode_varint, decompress
from .const import (BTN_ACTION_FLAG, BTN_COUNT_SHIFT, BTN_ID_MASK, BUCKETS,
                    COMMON_ACTIONS_BUDGET, MAX_BLOB_SIZE, TABLE_SIZE, is_analog)
from .errors import CapacityExceeded, KeymapError, MissingField
from .mapping import Binding, MappingRecord, normalize
from .table import FingerprintTable, dbp_hash, fingerprint

log = logging.getLogger(__name__)


@dataclass
class TitleRecord:
    name: str
    year: Optional[int]
    identifiers: list[tuple[str, int]] = field(default_factory=list)
    bindings: list[Binding] = field(default_factory=list)
    line: int = 0                   # first catalogue line, 0 if built in code

    def validate(self):
        where = f" (line {self.line})" if self.line else ""
        if not self.name:
            raise MissingField(f"Title without a name{where}")
        if not self.year:
            raise MissingField(f"Game {self.name} with no year info{where}")
        if not self.bindings:
            raise MissingField(f"Game {self.name} ({self.year}) with no input mappings{where}")
        if not self.identifiers:
            raise MissingField(f"Game {self.name} ({self.year}) with no identifiers{where}")


@dataclass
class CompiledBucket:
    number: int
    ident_region: bytes             # idents table ++ title pool
    mapping_region: bytes           # mapping pool ++ action pool
    action_offset: int              # == mapping pool length
    idents_compressed: bytes
    mappings_compressed: bytes

    @property
    def ident_size(self) -> int:
        return len(self.ident_region)

    @property
    def mapping_size(self) -> int:
        return len(self.mapping_region)

    # ------------------------------------------------------------------
    def action_at(self, idx: int) -> str:
        start = self.action_offset + idx
        end = self.mapping_region.index(b"\0", start)
        return self.mapping_region[start:end].decode("utf-8")

    def decode_mapping_set(self, offset: int) -> list[MappingRecord]:
        """Read the mapping set at ``offset`` back into records (labels resolved)."""
        data = self.mapping_region
        count, pos = data[offset], offset + 1
        out = []
        for _ in range(count):
            btn = data[pos]
            pos += 1
            button, analog = btn & BTN_ID_MASK, is_analog(btn & BTN_ID_MASK)
            label = ""
            if btn & BTN_ACTION_FLAG:
                idx, pos = decode_varint(data, pos)
                label = self.action_at(idx)
            n = ((btn >> BTN_COUNT_SHIFT) + 1) * (2 if analog else 1)
            out.append(MappingRecord(button, tuple(data[pos:pos + n]), label, analog))
            pos += n
        return out


@dataclass
class CompiledKeymap:
    table_size: int
    keys: np.ndarray                # uint32 fingerprint per slot, 0 = empty
    buckets: list[CompiledBucket]
    stats: dict = field(default_factory=dict)

    @property
    def bucket_count(self) -> int:
        return len(self.buckets)

    @property
    def compressed_total(self) -> int:
        return sum(len(b.idents_compressed) + len(b.mappings_compressed) for b in self.buckets)


# ── warm set ──────────────────────────────────────────────────
def pick_common_actions(mapping_sets: Iterable[Sequence[MappingRecord]],
                        budget: int = COMMON_ACTIONS_BUDGET) -> list[str]:
    """Most used labels over the distinct mapping sets, until ``budget`` bytes are pooled."""
    seen, counts = set(), Counter()
    for records in mapping_sets:
        key = MappingDeduplicator.key_of(records)
        if key in seen:
            continue
        seen.add(key)
        counts.update(rec.label for rec in records if rec.action)

    # stable sort keeps first appearance ahead on equal counts
    ranked = sorted(counts, key=counts.__getitem__, reverse=True)
    picked, used = [], 0
    for label in ranked:
        if used >= budget:
            break
        picked.append(label)
        used += len(label.encode("utf-8")) + 1
    return picked


class KeymapCompiler:
    def __init__(self, table_size: int = TABLE_SIZE, buckets: int = BUCKETS,
                 common_actions: Sequence[str] | None = None,
                 compressor: Callable[[bytes], bytes] = compress):
        self.table_size     = table_size
        self.bucket_count   = buckets
        self.common_actions = common_actions
        self.compressor     = compressor

    # ------------------------------------------------------------------
    def compile(self, titles: Iterable[TitleRecord]) -> CompiledKeymap:
        normalized = []
        for title in titles:
            title.validate()
            normalized.append((title, normalize(title.name, title.bindings)))

        warm = self.common_actions
        if warm is None:
            warm = pick_common_actions(records for _, records in normalized)
        log.debug("Action pool warm set: %s", warm)

        table   = FingerprintTable(self.table_size, self.bucket_count)
        buckets = [Bucket(i, self.table_size // self.bucket_count, warm)
                   for i in range(self.bucket_count)]
        dedup   = MappingDeduplicator(buckets)

        for title, records in normalized:
            ref = dedup.commit(records, title.name)
            self._identify(title, ref, table, buckets)

        log.info("Games: %d", len(normalized))
        log.info("Hash Table Entries: %d", len(table))
        log.info("Hash Table Fill Rate: %.2f%%", table.fill_rate * 100)
        log.info("Distinct mapping sets: %d", len(dedup))
        top = ", ".join(f'"{a}" /* {n} */' for a, n in dedup.action_count.most_common(len(warm) or 1))
        log.info("Common Actions: %s", top)

        compiled = [self._emit(bk) for bk in buckets]
        keymap = CompiledKeymap(self.table_size, table.keys, compiled, stats={
            "games": len(normalized),
            "entries": len(table),
            "fill_rate": table.fill_rate,
            "mapping_sets": len(dedup),
            "common_actions": list(warm),
        })
        log.info("Compressed Total: %d", keymap.compressed_total)
        log.info("Map Table Size: %d", self.table_size * 4)
        log.info("Binary Blob Total: %d", keymap.compressed_total + self.table_size * 4)
        return keymap

    # ------------------------------------------------------------------
    def _identify(self, title: TitleRecord, ref: MapReference,
                  table: FingerprintTable, buckets: list[Bucket]):
        for id_file, id_size in title.identifiers:
            desc = f"Identification file {id_file} (size: {id_size}) for game {title.name}"
            slot = table.insert(fingerprint(id_file, id_size), desc)
            bucket = buckets[table.bucket_of(slot)]
            title_idx = bucket.intern_title(title.name, title.year)
            bucket.put_ident(table.row_of(slot), ref, title_idx)

    def _emit(self, bk: Bucket) -> CompiledBucket:
        idents, maps = bk.ident_region(), bk.mapping_region()
        log.info("Bucket [%d]:", bk.number)
        log.info("\tIdents: Count = %d - Bytes = %d - Hash = %d",
                 len(bk.used_rows), bk.idents.size, dbp_hash(bk.idents.tobytes()))
        log.info("\tTitle:  Count = %d - Bytes = %d - Hash = %d",
                 len(bk.titles), bk.titles.size, dbp_hash(bk.titles.to_bytes()))
        log.info("\tMap:    Count = %d (%d records) - Bytes = %d - Hash = %d",
                 bk.map_sets, bk.records, len(bk.maps), dbp_hash(bytes(bk.maps)))
        log.info("\tAction: Count = %d - Bytes = %d - Hash = %d",
                 len(bk.actions), bk.actions.size, dbp_hash(bk.actions.to_bytes()))

        idents_c, maps_c = self.compressor(idents), self.compressor(maps)
        for raw, packed in ((idents, idents_c), (maps, maps_c)):
            if max(len(raw), len(packed)) > MAX_BLOB_SIZE:
                raise CapacityExceeded(f"Bucket {bk.number} region of {len(raw)} bytes is too large")
        log.info("\tIdents + Title: Compressed %d to %d bytes", len(idents), len(idents_c))
        log.info("\tMap + Action: Compressed %d to %d bytes", len(maps), len(maps_c))
        return CompiledBucket(bk.number, idents, maps, len(bk.maps), idents_c, maps_c)


def compile_catalog(titles: Iterable[TitleRecord], **kw) -> CompiledKeymap:
    return KeymapCompiler(**kw).compile(titles)


def verify(keymap: CompiledKeymap, decompressor: Callable[[bytes], bytes] = decompress):
    """Check every bucket blob decompresses back to its region."""
    for bk in keymap.buckets:
        if decompressor(bk.idents_compressed) != bk.ident_region:
            raise KeymapError(f"Bucket {bk.number} idents blob does not round-trip")
        if decompressor(bk.mappings_compressed) != bk.mapping_region:
            raise KeymapError(f"Bucket {bk.number} mappings blob does not round-trip")

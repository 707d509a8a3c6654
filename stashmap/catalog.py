import logging
import os
import re
from dataclasses import dataclass

import numpy as np

_logger = logging.getLogger(__name__)

HASH_RE = re.compile(r"[0-9A-Fa-f]{16}")
FIELD_SEP = " - "
MIN_LINE_LENGTH = 20


@dataclass(frozen=True)
class CatalogEntry:
    identity_hash: int
    x: float
    y: float
    z: float
    map_index: int
    label: str

    @property
    def hash_hex(self):
        return f"{self.identity_hash:016X}"


def parse_spawner_line(line, map_index):
    """
    One point spawner per line:
        "<label>" - <16 hex digit hash> - ... V3f(x, y, z) ...
    Returns None for lines that do not follow that shape.
    """
    line = line.rstrip("\r")
    if len(line) < MIN_LINE_LENGTH:
        return None

    d1 = line.find(FIELD_SEP)
    if d1 < 0:
        return None
    hash_start = d1 + len(FIELD_SEP)
    d2 = line.find(FIELD_SEP, hash_start)
    if d2 < 0:
        return None
    hash_str = line[hash_start:d2]
    if not HASH_RE.fullmatch(hash_str):
        return None

    v = line.find("V3f(")
    if v < 0:
        return None
    coord_start = v + 4
    coord_end = line.find(")", coord_start)
    if coord_end < 0:
        return None
    parts = line[coord_start:coord_end].split(",")
    if len(parts) != 3:
        return None
    try:
        # Catalog positions are single precision
        x, y, z = (float(np.float32(p.strip())) for p in parts)
    except ValueError:
        return None

    return CatalogEntry(
        identity_hash=int(hash_str, 16),
        x=x, y=y, z=z,
        map_index=map_index,
        label=line[:d1].strip(" \t\""),
    )


def parse_spawner_text(content, map_index):
    entries = []
    for line in content.split("\n"):
        entry = parse_spawner_line(line, map_index)
        if entry is not None:
            entries.append(entry)
    return entries


def load_spawner_file(path, map_index):
    if not os.path.exists(path):
        _logger.warning("Spawner file not found: %s", path)
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        entries = parse_spawner_text(f.read(), map_index)
    _logger.info("Loaded %d spawners for map %d from %s", len(entries), map_index, path)
    return entries


class SpawnCatalog:
    """Ordered spawner entries with a first-wins index by hash."""

    def __init__(self, entries=()):
        self.entries = []
        self._by_hash = {}
        self.extend(entries)

    @classmethod
    def load(cls, data_path, spawner_files):
        catalog = cls()
        for map_index, filename in enumerate(spawner_files):
            catalog.extend(load_spawner_file(os.path.join(data_path, filename), map_index))
        return catalog

    def extend(self, entries):
        for entry in entries:
            self.entries.append(entry)
            first = self._by_hash.get(entry.identity_hash)
            if first is None:
                self._by_hash[entry.identity_hash] = entry
            else:
                _logger.warning(
                    "Duplicate spawner hash %s (%r, map %d); keeping %r, map %d",
                    entry.hash_hex, entry.label, entry.map_index, first.label, first.map_index,
                )

    def find(self, identity_hash):
        return self._by_hash.get(identity_hash)

    def for_map(self, map_index):
        return [e for e in self.entries if e.map_index == map_index]

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def resolve_spawn(record, catalog):
    """Catalog entry whose hash matches the record, or None when the origin is unknown."""
    if isinstance(catalog, SpawnCatalog):
        return catalog.find(record.identity_hash)
    for entry in catalog:
        if entry.identity_hash == record.identity_hash:
            return entry
    return None


class SpawnResolver:
    def __init__(self, catalog):
        self.catalog = catalog

    def resolve(self, record):
        return resolve_spawn(record, self.catalog)

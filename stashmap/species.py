import logging
import os

_logger = logging.getLogger(__name__)

# Internal species numbering diverges from the national dex from 917 on.
# national = internal + SPECIES_DELTAS[internal - SPECIES_DELTA_BASE]
SPECIES_DELTA_BASE = 917
SPECIES_DELTAS = (
    65, -1, -1, -1, -1, 31, 31, 47, 47, 29, 29, 53, 31, 31, 46, 44, 30, 30, -7, -7, -7, 13, 13,
    -2, -2, 23, 23, 24, -21, -21, 27, 27, 47, 47, 47, 26, 14, -33, -33, -33, -17, -17, 3, -29,
    12, -12, -31, -31, -31, 3, 3, -24, -24, -44, -44, -30, -30, -28, -28, 23, 23, 6, 7, 29, 8,
    3, 4, 4, 20, 4, 23, 6, 3, 3, 4, -1, 13, 9, 7, 5, 7, 9, 9, -43, -43, -43, -68, -68, -68, -58,
    -58, -25, -29, -31, 6, -1, 6, 0, 0, 0, 3, 3, 4, 2, 3, 3, -5, -12, -12,
)


class SpeciesResolver:
    def __init__(self, base=SPECIES_DELTA_BASE, deltas=SPECIES_DELTAS):
        self.base = base
        self.deltas = tuple(deltas)

    def resolve(self, internal):
        """Internal species ordinal -> national dex number."""
        shift = internal - self.base
        if shift < 0 or shift >= len(self.deltas):
            return internal
        return (internal + self.deltas[shift]) & 0xFFFF


class SpeciesNames:
    """National dex number -> display name, one name per line of the source file."""

    def __init__(self, names=()):
        self.names = list(names)

    @classmethod
    def from_text(cls, content):
        names = [line.rstrip("\r") for line in content.split("\n")]
        # A trailing newline does not start another entry
        if not content or content.endswith("\n"):
            names.pop()
        return cls(names)

    @classmethod
    def load(cls, path):
        if not os.path.exists(path):
            _logger.warning("Species name table not found: %s", path)
            return cls()
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            table = cls.from_text(f.read())
        _logger.info("Loaded %d species names from %s", len(table), path)
        return table

    def __len__(self):
        return len(self.names)

    def name(self, species_id):
        if 0 <= species_id < len(self.names):
            return self.names[species_id]
        return f"Species #{species_id}"

import logging
import struct
from dataclasses import dataclass

from .cipher import EntryCipher
from .errors import InputSizeMismatch
from .species import SpeciesResolver

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StashRecord:
    identity_hash: int
    species_internal: int
    species_id: int

    @property
    def hash_hex(self):
        return f"{self.identity_hash:016X}"


class StashBlockDecoder:
    """
    Shiny stash snapshot: 10 slots of 0x1F0 bytes each.

    Slot layout:
      0x00  u64  spawner hash (0 or TERMINATOR_HASH ends the list)
      0x08  0x158-byte encrypted entry, species u16 at entry offset 0x08

    Slots are front-packed, so the first terminating hash ends the scan.
    """

    SLOT_SIZE = 0x1F0
    MAX_SLOTS = 10
    STASH_SIZE = SLOT_SIZE * MAX_SLOTS
    TERMINATOR_HASH = 0xCBF29CE484222645
    ENTRY_OFFSET = 0x08
    ENTRY_SIZE = EntryCipher.ENTRY_SIZE
    SPECIES_OFFSET = 0x08

    def __init__(self, cipher=None, species=None, verify_checksum=False):
        self.cipher = cipher or EntryCipher()
        self.species = species or SpeciesResolver()
        self.verify_checksum = verify_checksum

    def decode(self, raw):
        if len(raw) != self.STASH_SIZE:
            raise InputSizeMismatch(self.STASH_SIZE, len(raw))

        records = []
        seen = set()
        for slot in range(self.MAX_SLOTS):
            ptr = slot * self.SLOT_SIZE
            identity_hash = struct.unpack_from("<Q", raw, ptr)[0]
            if identity_hash == 0 or identity_hash == self.TERMINATOR_HASH:
                break

            start = ptr + self.ENTRY_OFFSET
            entry = bytearray(raw[start:start + self.ENTRY_SIZE])
            self.cipher.decrypt(entry)

            if self.verify_checksum and not self.cipher.is_valid(entry):
                _logger.warning("Slot %d (%016X): checksum mismatch, skipped", slot, identity_hash)
                continue

            species_internal = struct.unpack_from("<H", entry, self.SPECIES_OFFSET)[0]
            if species_internal == 0:
                _logger.debug("Slot %d (%016X): empty entry", slot, identity_hash)
                continue
            if identity_hash in seen:
                _logger.debug("Slot %d (%016X): duplicate hash", slot, identity_hash)
                continue

            seen.add(identity_hash)
            records.append(StashRecord(
                identity_hash=identity_hash,
                species_internal=species_internal,
                species_id=self.species.resolve(species_internal),
            ))

        _logger.debug("Decoded %d stash records", len(records))
        return records


def decode_stash(raw, verify_checksum=False):
    return StashBlockDecoder(verify_checksum=verify_checksum).decode(raw)

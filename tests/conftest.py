"""
Shared fixtures: plaintext entry / snapshot builders and an in-memory session.
"""

import struct

import pytest

from stashmap.cipher import EntryCipher
from stashmap.errors import MemoryReadError, SessionUnavailable
from stashmap.memory import MemorySession, ProcessMetadata
from stashmap.stash import StashBlockDecoder

SLOT_SIZE = StashBlockDecoder.SLOT_SIZE
ENTRY_SIZE = EntryCipher.ENTRY_SIZE


def make_entry(ec, species, seed_byte=0, valid_checksum=False):
    """Decrypted entry with a recognisable byte pattern and `species` at 0x08."""
    data = bytearray(ENTRY_SIZE)
    struct.pack_into("<I", data, 0, ec)
    for i in range(EntryCipher.HEADER_SIZE, ENTRY_SIZE):
        data[i] = (i * 7 + seed_byte) & 0xFF
    struct.pack_into("<H", data, StashBlockDecoder.SPECIES_OFFSET, species)
    if valid_checksum:
        struct.pack_into("<H", data, 6, EntryCipher().checksum(data))
    return data


def build_snapshot(slots, valid_checksum=False):
    """slots: (hash, ec, species) per slot, front to back. Remaining slots stay zero."""
    raw = bytearray(StashBlockDecoder.STASH_SIZE)
    cipher = EntryCipher()
    for i, (identity_hash, ec, species) in enumerate(slots):
        ptr = i * SLOT_SIZE
        struct.pack_into("<Q", raw, ptr, identity_hash)
        entry = make_entry(ec, species, seed_byte=i, valid_checksum=valid_checksum)
        cipher.encrypt(entry)
        start = ptr + StashBlockDecoder.ENTRY_OFFSET
        raw[start:start + ENTRY_SIZE] = entry
    return bytes(raw)


class FakeSession(MemorySession):
    """Memory made of (address -> bytes) regions."""

    def __init__(self, meta, regions=None, fail_open=False):
        self.meta = meta
        self.regions = dict(regions or {})
        self.fail_open = fail_open
        self.opened = 0
        self.closed = 0

    def open(self):
        if self.fail_open:
            raise SessionUnavailable("No cheat process (is Atmosphere running?)")
        self.opened += 1

    def close(self):
        self.closed += 1

    def metadata(self):
        return self.meta

    def read(self, address, size):
        for base, data in self.regions.items():
            if base <= address and address + size <= base + len(data):
                return data[address - base:address - base + size]
        raise MemoryReadError(f"unmapped read at 0x{address:X}")


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def snapshot_factory():
    return build_snapshot


@pytest.fixture
def session_factory():
    """
    Session whose pointer chain leads to `raw`:
        main + base_pointer -> P1; P1 + 0x120 -> P2; P2 + 0x168 -> STASH
    """
    def make(raw, build_id=bytes.fromhex("BCE5D5393B5AA3A8"), base_pointer=0x610A710,
             title_id=0x0100F43008C44000, fail_open=False):
        main_base = 0x8000000
        p1, p2, stash = 0x20000000, 0x30000000, 0x40000000
        regions = {
            main_base + base_pointer: struct.pack("<Q", p1),
            p1 + 0x120: struct.pack("<Q", p2),
            p2 + 0x168: struct.pack("<Q", stash),
            stash: bytes(raw),
        }
        meta = ProcessMetadata(title_id=title_id, build_id=build_id + bytes(24), main_base=main_base)
        return FakeSession(meta, regions, fail_open=fail_open)
    return make

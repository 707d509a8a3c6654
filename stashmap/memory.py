import logging
import struct
from contextlib import contextmanager
from dataclasses import dataclass

from .errors import MemoryReadError, UnsupportedVersion, WrongTitle
from .stash import StashBlockDecoder

_logger = logging.getLogger(__name__)

TITLE_ID = 0x0100F43008C44000
# Offsets added after each pointer hop, starting from main + base_pointer
POINTER_CHAIN = (0x120, 0x168, 0x0)


@dataclass(frozen=True)
class GameVersion:
    build_id: bytes
    label: str
    base_pointer: int

    @property
    def build_id_hex(self):
        return self.build_id.hex().upper()


# Keyed by the first 8 bytes of the main executable's build id
VERSIONS = (
    GameVersion(bytes.fromhex("BCE5D5393B5AA3A8"), "2.0.1", 0x610A710),
    GameVersion(bytes.fromhex("8A1C86C437394B69"), "2.0.0", 0x6105710),
    GameVersion(bytes.fromhex("179C3843B984F878"), "1.0.3", 0x5F0E250),
)


def find_version(build_id, versions=VERSIONS):
    key = bytes(build_id[:8])
    for version in versions:
        if version.build_id == key:
            return version
    raise UnsupportedVersion(key.hex().upper())


@dataclass(frozen=True)
class ProcessMetadata:
    title_id: int
    build_id: bytes
    main_base: int


class MemorySession:
    """
    Read access to the running game's memory.

    Implementations wrap the platform debug service:
      open()      attach, raising SessionUnavailable when no process can be opened
      close()     detach, always called once open() succeeded
      metadata()  ProcessMetadata of the attached process
      read()      `size` bytes at `address`, raising MemoryReadError on failure
    """

    def open(self):
        raise NotImplementedError

    def close(self):
        pass

    def metadata(self):
        raise NotImplementedError

    def read(self, address, size):
        raise NotImplementedError


@contextmanager
def open_session(session):
    session.open()
    try:
        yield session
    finally:
        session.close()


def read_u64(session, address):
    data = session.read(address, 8)
    if len(data) != 8:
        raise MemoryReadError(f"short read at 0x{address:X}")
    return struct.unpack("<Q", data)[0]


def resolve_stash_address(session, main_base, version, chain=POINTER_CHAIN):
    addr = main_base + version.base_pointer
    for hop, offset in enumerate(chain):
        try:
            ptr = read_u64(session, addr)
        except MemoryReadError as exc:
            raise MemoryReadError(f"Pointer resolve failed at hop {hop} (0x{addr:X})") from exc
        addr = ptr + offset
    _logger.debug("Stash address for v%s: 0x%X", version.label, addr)
    return addr


@dataclass(frozen=True)
class StashSnapshot:
    version: GameVersion
    address: int
    raw: bytes


def read_snapshot(session, title_id=TITLE_ID, versions=VERSIONS, size=StashBlockDecoder.STASH_SIZE):
    """Attach, check title and version, follow the pointer chain and copy the stash block."""
    with open_session(session):
        meta = session.metadata()
        if meta.title_id != title_id:
            raise WrongTitle(meta.title_id)
        version = find_version(meta.build_id, versions)
        address = resolve_stash_address(session, meta.main_base, version)
        try:
            raw = bytes(session.read(address, size))
        except MemoryReadError as exc:
            raise MemoryReadError("Stash read failed") from exc
        if len(raw) != size:
            raise MemoryReadError(f"Stash read failed: got {len(raw)} of {size} bytes")
    _logger.info("Read %d byte stash snapshot at 0x%X (v%s)", size, address, version.label)
    return StashSnapshot(version=version, address=address, raw=raw)

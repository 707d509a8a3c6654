import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .catalog import CatalogEntry, resolve_spawn
from .errors import (
    InputSizeMismatch,
    MemoryReadError,
    SessionUnavailable,
    UnsupportedVersion,
    WrongTitle,
)
from .memory import read_snapshot
from .stash import StashBlockDecoder, StashRecord
from .transform import MAPS, map_definition, project

_logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"


class ReadStatus(enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    SESSION_UNAVAILABLE = "session_unavailable"
    WRONG_TITLE = "wrong_title"
    UNSUPPORTED_VERSION = "unsupported_version"
    READ_FAILED = "read_failed"
    SIZE_MISMATCH = "size_mismatch"


@dataclass(frozen=True)
class ResolvedRecord:
    record: StashRecord
    location: Optional[CatalogEntry] = None

    @property
    def map_index(self):
        return self.location.map_index if self.location is not None else None

    @property
    def location_label(self):
        return self.location.label if self.location is not None else UNKNOWN_LOCATION


@dataclass
class StashReadResult:
    status: ReadStatus
    records: List[ResolvedRecord] = field(default_factory=list)
    version: Optional[str] = None
    build_id: Optional[str] = None
    message: str = ""

    @property
    def ok(self):
        return self.status in (ReadStatus.OK, ReadStatus.EMPTY)


def resolve_records(records, catalog, known_only=False):
    resolved = []
    for record in records:
        location = resolve_spawn(record, catalog)
        if location is None:
            _logger.debug("No spawner for %s", record.hash_hex)
            if known_only:
                continue
        resolved.append(ResolvedRecord(record=record, location=location))
    return resolved


def decode_and_resolve(raw, catalog, decoder=None, known_only=False):
    decoder = decoder or StashBlockDecoder()
    return resolve_records(decoder.decode(raw), catalog, known_only=known_only)


def focus_point(resolved, maps=MAPS):
    """(MapDefinition, (px, py)) for a record with a known map, else None."""
    if resolved is None or resolved.location is None:
        return None
    map_def = map_definition(resolved.location.map_index, maps)
    if map_def is None:
        return None
    return map_def, project(map_def, resolved.location.x, resolved.location.z)


def read_stash_records(session, catalog, decoder=None, known_only=False):
    """Read, decode and resolve the live stash. Failures come back as a status, not an exception."""
    try:
        snapshot = read_snapshot(session)
    except SessionUnavailable as exc:
        return StashReadResult(ReadStatus.SESSION_UNAVAILABLE, message=str(exc))
    except WrongTitle:
        return StashReadResult(ReadStatus.WRONG_TITLE, message="Pokemon Legends: Z-A is not running")
    except UnsupportedVersion as exc:
        return StashReadResult(ReadStatus.UNSUPPORTED_VERSION, build_id=exc.build_id,
                               message="Unsupported game version")
    except MemoryReadError as exc:
        _logger.warning("Stash read failed: %s", exc)
        return StashReadResult(ReadStatus.READ_FAILED, message=str(exc))

    version = snapshot.version
    try:
        records = decode_and_resolve(snapshot.raw, catalog, decoder=decoder, known_only=known_only)
    except InputSizeMismatch as exc:
        return StashReadResult(ReadStatus.SIZE_MISMATCH, version=version.label,
                               build_id=version.build_id_hex, message=str(exc))

    if not records:
        return StashReadResult(ReadStatus.EMPTY, version=version.label,
                               build_id=version.build_id_hex, message="Shiny stash is empty")
    return StashReadResult(
        ReadStatus.OK,
        records=records,
        version=version.label,
        build_id=version.build_id_hex,
        message=f"{len(records)} shiny entries loaded (v{version.label})",
    )

from .catalog import CatalogEntry, SpawnCatalog, SpawnResolver, resolve_spawn
from .cipher import EntryCipher
from .errors import InputSizeMismatch, StashError, UnsupportedVersion
from .pipeline import ReadStatus, ResolvedRecord, StashReadResult, read_stash_records, resolve_records
from .species import SpeciesNames, SpeciesResolver
from .stash import StashBlockDecoder, StashRecord, decode_stash
from .transform import MAPS, MapDefinition, project

__version__ = "0.1.0"

import logging
import os
from dataclasses import dataclass, field, fields

import yaml

from .catalog import SpawnCatalog
from .errors import ConfigError
from .species import SpeciesNames

_logger = logging.getLogger(__name__)

DEFAULT_SPAWNER_FILES = (
    "t1_point_spawners.txt",
    "t2_point_spawners.txt",
    "t3_point_spawners.txt",
    "t4_point_spawners.txt",
)


@dataclass
class StashMapConfig:
    data_path: str = "data"
    species_file: str = "species_en.txt"
    spawner_files: list = field(default_factory=lambda: list(DEFAULT_SPAWNER_FILES))
    image_path: str = "data"
    verify_checksum: bool = False
    known_only: bool = False
    # x, y, w, h of the panel map previews are fitted into
    map_area: tuple = (20, 20, 680, 630)

    @property
    def species_path(self):
        return os.path.join(self.data_path, self.species_file)

    def image_file(self, map_def):
        return os.path.join(self.image_path, map_def.image_file)


def config_from_dict(raw):
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")

    known = {f.name for f in fields(StashMapConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    values = dict(raw)
    for key in ("data_path", "species_file", "image_path"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"{key} must be a string")
    if "spawner_files" in values:
        files = values["spawner_files"]
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ConfigError("spawner_files must be a list of file names")
    if "map_area" in values:
        area = values["map_area"]
        if not isinstance(area, (list, tuple)) or len(area) != 4:
            raise ConfigError("map_area must be [x, y, w, h]")
        try:
            values["map_area"] = tuple(int(v) for v in area)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"map_area must be [x, y, w, h] integers: {exc}") from exc
    for key in ("verify_checksum", "known_only"):
        if key in values and not isinstance(values[key], bool):
            raise ConfigError(f"{key} must be true or false")
    return StashMapConfig(**values)


def load_config(path=None):
    """Read a YAML config. No path, or a missing file, gives the defaults."""
    if not path or not os.path.exists(path):
        if path:
            _logger.info("Config %s not found, using defaults", path)
        return StashMapConfig()
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return config_from_dict(raw)


def load_catalog(config):
    return SpawnCatalog.load(config.data_path, config.spawner_files)


def load_species_names(config):
    return SpeciesNames.load(config.species_path)

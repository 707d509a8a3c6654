from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class MapDefinition:
    """
    World -> map image projection, centred on the image midpoint:
        px = W/2 + dirX * (rangeX / scaleX) * (x + offsetX)
        py = H/2 + dirZ * (rangeZ / scaleZ) * (z + offsetZ)
    """

    name: str
    image_file: str
    image_width: float
    image_height: float
    range_x: float
    range_z: float
    scale_x: float
    scale_z: float
    direction_x: float
    direction_z: float
    offset_x: float
    offset_z: float

    def convert_x(self, x):
        return (self.image_width / 2.0) + (self.direction_x * ((self.range_x / self.scale_x) * (x + self.offset_x)))

    def convert_z(self, z):
        return (self.image_height / 2.0) + (self.direction_z * ((self.range_z / self.scale_z) * (z + self.offset_z)))


# Index = map selector of the spawner catalog
MAPS = (
    MapDefinition("Lumiose City", "lumiose.png", 4096, 4096,
                  3940, 3940, 1000, 1000, -1, -1, 500, 500),
    MapDefinition("Lysandre Labs", "LysandreLabs.png", 2160, 2160,
                  1662, 2041, 1662.0 / 10.291021, 2041.0 / 10.291021, -1, -1, -3, -80),
    MapDefinition("The Sewers", "Sewers.png", 2160, 2160,
                  1364, 1975, 1364.0 / 6.2, 1975.0 / 6.2, 1, 1, 1, 146),
    MapDefinition("The Sewers B", "SewersB.png", 2160, 2160,
                  1521, 1966, 1521.0 / 16.714285, 1966.0 / 16.714285, 1, 1, 39, 45),
)


def map_definition(map_index, maps=MAPS):
    if 0 <= map_index < len(maps):
        return maps[map_index]
    return None


def project(map_def, world_x, world_z):
    """World (x, z) -> pixel (x, y) in the map's own image space. Not clipped."""
    return map_def.convert_x(world_x), map_def.convert_z(world_z)


def project_many(map_def, world_x, world_z):
    xs = np.asarray(world_x, dtype=np.float64)
    zs = np.asarray(world_z, dtype=np.float64)
    return map_def.convert_x(xs), map_def.convert_z(zs)


@dataclass(frozen=True)
class DisplayRect:
    """Where a map image lands once fitted into a display area."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def fit(cls, image_size, area):
        """
        Scale `image_size` into `area` (x, y, w, h) keeping aspect, 2 px border, centred.

        The scale is single precision: 2160 px maps fit to 625, not 626.
        """
        tw, th = image_size
        ax, ay, aw, ah = area
        sc = min(np.float32(aw - 4) / np.float32(tw), np.float32(ah - 4) / np.float32(th))
        dw = int(np.float32(tw) * sc)
        dh = int(np.float32(th) * sc)
        return cls(ax + (aw - dw) // 2, ay + (ah - dh) // 2, dw, dh)

    def contains(self, px, py):
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height

    def clamp_inside(self, px, py, margin=4):
        px = max(self.x + margin, min(px, self.x + self.width - margin))
        py = max(self.y + margin, min(py, self.y + self.height - margin))
        return px, py


def to_display(map_def, rect, pixel_x, pixel_y):
    """Map-image pixel -> display pixel inside `rect` (truncating, like an int cast)."""
    px = rect.x + int((pixel_x / map_def.image_width) * rect.width)
    py = rect.y + int((pixel_y / map_def.image_height) * rect.height)
    return px, py

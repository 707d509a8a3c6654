import logging
import os

import numpy as np
from PIL import Image, ImageDraw

from .pipeline import focus_point
from .transform import MAPS, DisplayRect, project_many, to_display

_logger = logging.getLogger(__name__)

COL_BG = (0x16, 0x16, 0x2B)
COL_PANEL = (0x1E, 0x1E, 0x38)
COL_BORDER = (0x30, 0x30, 0x55)
COL_SPAWNER = (0xFF, 0xFF, 0xFF, 0x20)
COL_GOLD = (0xFF, 0xD7, 0x00, 0xCC)
COL_OUTLINE = (0x00, 0x00, 0x00, 0xAA)
COL_RED = (0xFF, 0x33, 0x33, 0xFF)
COL_RING = (0xFF, 0xFF, 0xFF, 0xFF)
COL_CROSS = (0xFF, 0xFF, 0xFF, 0xCC)


def load_map_image(path):
    if not os.path.exists(path):
        _logger.warning("Map image not found: %s", path)
        return None
    with Image.open(path) as img:
        return img.convert("RGB")


def _circle(draw, cx, cy, r, fill=None, outline=None):
    draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=fill, outline=outline)


def render_preview(map_image, focus, catalog, records=(), maps=MAPS, area=(20, 20, 680, 630)):
    """
    Draw the focus record's map fitted into `area`, with:
      - every catalog spawner of that map as a dim dot
      - the other stash records on that map as gold dots
      - the focus record as a red dot with ring and crosshair, kept inside the map
    Returns None when the focus record has no known map.
    """
    point = focus_point(focus, maps)
    if point is None:
        _logger.info("No map for focus record; preview skipped")
        return None
    map_def, (fx, fz) = point
    map_index = focus.location.map_index

    ax, ay, aw, ah = area
    canvas = Image.new("RGB", (ax * 2 + aw, ay * 2 + ah), COL_BG)
    draw = ImageDraw.Draw(canvas, "RGBA")
    draw.rectangle((ax, ay, ax + aw - 1, ay + ah - 1), fill=COL_PANEL, outline=COL_BORDER)

    rect = DisplayRect.fit(map_image.size, area)
    canvas.paste(map_image.resize((rect.width, rect.height), Image.Resampling.LANCZOS), (rect.x, rect.y))

    spawners = [e for e in catalog if e.map_index == map_index]
    if spawners:
        tex_x, tex_z = project_many(map_def, [e.x for e in spawners], [e.z for e in spawners])
        # trunc() matches the int cast used for single points
        px = rect.x + np.trunc(tex_x / map_def.image_width * rect.width).astype(int)
        py = rect.y + np.trunc(tex_z / map_def.image_height * rect.height).astype(int)
        inside = (px >= rect.x) & (px < rect.x + rect.width) & (py >= rect.y) & (py < rect.y + rect.height)
        if inside.any():
            draw.point(list(zip(px[inside].tolist(), py[inside].tolist())), fill=COL_SPAWNER)

    for resolved in records:
        if resolved.record == focus.record or resolved.map_index != map_index:
            continue
        loc = resolved.location
        tex_x, tex_z = map_def.convert_x(loc.x), map_def.convert_z(loc.z)
        px, py = to_display(map_def, rect, tex_x, tex_z)
        if not rect.contains(px, py):
            continue
        _circle(draw, px, py, 5, fill=COL_GOLD, outline=COL_OUTLINE)

    px, py = rect.clamp_inside(*to_display(map_def, rect, fx, fz))
    _circle(draw, px, py, 12, outline=COL_RING)
    _circle(draw, px, py, 11, outline=COL_RING)
    _circle(draw, px, py, 8, fill=COL_RED)
    draw.line((px - 18, py, px - 13, py), fill=COL_CROSS)
    draw.line((px + 13, py, px + 18, py), fill=COL_CROSS)
    draw.line((px, py - 18, px, py - 13), fill=COL_CROSS)
    draw.line((px, py + 13, px, py + 18), fill=COL_CROSS)
    return canvas


def export_preview(config, focus, catalog, records, output_path, maps=MAPS):
    point = focus_point(focus, maps)
    if point is None:
        return False
    map_def = point[0]
    image = load_map_image(config.image_file(map_def))
    if image is None:
        return False
    canvas = render_preview(image, focus, catalog, records, maps=maps, area=config.map_area)
    canvas.save(output_path)
    _logger.info("Saved %s preview to %s", map_def.name, output_path)
    return True

import argparse
import logging
import os
import sys

from .config import load_catalog, load_config, load_species_names
from .errors import ConfigError, InputSizeMismatch
from .pipeline import decode_and_resolve, focus_point
from .preview import export_preview
from .stash import StashBlockDecoder


def print_records(resolved, names):
    print(f"[STASH] {len(resolved)} shiny entries")
    for i, entry in enumerate(resolved):
        rec = entry.record
        line = f"  {i:2d}  #{rec.species_id:03d} {names.name(rec.species_id):<16} {rec.hash_hex}  {entry.location_label}"
        loc = entry.location
        if loc is not None:
            line += f"  (map {loc.map_index}, X: {loc.x:.1f}  Y: {loc.y:.1f}  Z: {loc.z:.1f})"
        print(line)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stashmap",
        description="Decode a shiny stash snapshot and locate each entry's spawn point",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    dump_cmd = commands.add_parser("dump", help="print decoded stash entries with their spawn points")
    dump_cmd.add_argument("snapshot", help="raw stash dump (10 x 0x1F0 bytes)")
    dump_cmd.add_argument("--focus", type=int, default=0, help="entry to project onto its map")
    dump_cmd.add_argument("--preview", default=None, help="write a PNG map preview for the focus entry")
    dump_cmd.add_argument("--config", default="stashmap.yaml", help="YAML config (defaults if missing)")
    dump_cmd.add_argument("-v", "--verbose", action="store_true")
    dump_cmd.set_defaults(handler=dump)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"[!] {exc}")
        return 2
    return args.handler(args, config)


def dump(args, config):
    """Decode a snapshot file, list its entries and project the focus entry onto its map."""
    if not os.path.exists(args.snapshot):
        print(f"[!] Snapshot not found: {args.snapshot}")
        return 1
    with open(args.snapshot, "rb") as f:
        raw = f.read()

    catalog = load_catalog(config)
    names = load_species_names(config)
    decoder = StashBlockDecoder(verify_checksum=config.verify_checksum)
    try:
        resolved = decode_and_resolve(raw, catalog, decoder=decoder, known_only=config.known_only)
    except InputSizeMismatch as exc:
        print(f"[!] {exc}")
        return 1

    if not resolved:
        print("[STASH] Shiny stash is empty")
        return 0
    print_records(resolved, names)

    if not 0 <= args.focus < len(resolved):
        print(f"[!] Focus index {args.focus} out of range")
        return 1
    focus = resolved[args.focus]
    point = focus_point(focus)
    if point is None:
        print(f"[MAP] #{args.focus}: unknown spawn location")
        return 0
    map_def, (px, py) = point
    print(f"[MAP] #{args.focus}: {map_def.name} pixel ({px:.1f}, {py:.1f}) of {map_def.image_width}x{map_def.image_height}")

    if args.preview:
        if export_preview(config, focus, catalog, resolved, args.preview):
            print(f"[MAP] Saved preview to {args.preview}")
        else:
            print("[!] Preview not written (map image missing)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

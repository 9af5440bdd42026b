import argparse
import logging
import sys
from pathlib import Path

from . import DATA_DIR, DB_PATH, MAX_SPECIES_ID, MAX_WORKERS, configure_logging
from .catalog import CatalogStore
from .dex_scraper import save_species_data, scrape_species
from .errors import StorageFault
from .fusion_totals import compute_fusion_totals, write_fusion_totals
from .sources import build_image_records, read_credit_list, read_dex_entries, read_sprite_manifest, scan_sprite_directory
from .sprites import autogen_identifiers, catalog_identifiers, extract_sprites

logger = logging.getLogger(__name__)


def build_catalog(args):
    store = CatalogStore(args.db)
    if args.sprite_dir:
        manifest = scan_sprite_directory(args.sprite_dir)
    else:
        manifest = read_sprite_manifest(args.sprites)
    records = build_image_records(read_credit_list(args.credits), manifest)
    try:
        store.rebuild_schema()
        images = store.load_images(records)
        entries = store.load_dex_entries(read_dex_entries(args.dex)) if args.dex.exists() else None
    except StorageFault as e:
        logger.error(f"Catalog build failed: {e}")
        return 1
    if entries is None:
        logger.warning(f"No dex entries at {args.dex}")
    logger.info(f"Catalog built: {images.inserted} images in {args.db}")
    return 0


def fusion_totals(args):
    store = CatalogStore(args.db)
    try:
        totals = compute_fusion_totals(store, args.first, args.last, max_workers=args.workers)
    except StorageFault as e:
        logger.error(f"Fusion count failed: {e}")
        return 1
    write_fusion_totals(totals, args.output)
    return 0


def extract(args):
    identifiers = []
    if args.catalog:
        try:
            identifiers.extend(catalog_identifiers(CatalogStore(args.db).iter_sprite_ids()))
        except StorageFault as e:
            logger.error(f"Cannot read sprites from catalog: {e}")
            return 1
    if args.autogen:
        identifiers.extend(autogen_identifiers(args.sheets))
    report = extract_sprites(identifiers, args.sheets, args.output)
    return 0 if report.extracted or not identifiers else 1


def scrape(args):
    data = scrape_species(args.first, args.last, max_workers=args.workers)
    save_species_data(data, args.output)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="fusiondex", description="Fusion sprite catalog tools")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="catalog database path")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("build-catalog", help="drop and reload the sprite catalog")
    p.add_argument("--credits", type=Path, default=DATA_DIR / "credits.txt")
    p.add_argument("--sprites", type=Path, default=DATA_DIR / "sprites.txt")
    p.add_argument("--sprite-dir", type=Path, help="scan a directory instead of reading the sprite manifest")
    p.add_argument("--dex", type=Path, default=DATA_DIR / "dex.csv")
    p.set_defaults(func=build_catalog)

    p = sub.add_parser("fusion-totals", help="count head/body fusions per species")
    p.add_argument("--first", type=int, default=1)
    p.add_argument("--last", type=int, default=MAX_SPECIES_ID)
    p.add_argument("--workers", type=int, default=MAX_WORKERS)
    p.add_argument("--output", type=Path, default=DATA_DIR / "fusion_totals.json")
    p.set_defaults(func=fusion_totals)

    p = sub.add_parser("extract-sprites", help="slice sprites out of their spritesheets")
    p.add_argument("--sheets", type=Path, default=DATA_DIR / "spritesheets")
    p.add_argument("--output", type=Path, default=DATA_DIR / "sprites")
    p.add_argument("--no-catalog", dest="catalog", action="store_false", help="skip catalog sprites")
    p.add_argument("--autogen", action="store_true", help="also slice every autogen sheet")
    p.set_defaults(func=extract)

    p = sub.add_parser("scrape-dex", help="scrape species pages into JSON")
    p.add_argument("--first", type=int, default=501)
    p.add_argument("--last", type=int, default=600)
    p.add_argument("--workers", type=int, default=MAX_WORKERS)
    p.add_argument("--output", type=Path, default=DATA_DIR / "fusiondex_data.json")
    p.set_defaults(func=scrape)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.command.replace("-", "_"))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

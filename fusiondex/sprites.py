import logging
from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path

from PIL import Image

from . import MAX_SPECIES_ID, SPRITE_SIZE
from .errors import OutOfBounds, ParseError
from .identifiers import SpriteCategory, SpriteIdentifier, parse_sprite_id
from .positions import resolve_position

logger = logging.getLogger(__name__)

SHEET_DIRS = {
    SpriteCategory.BASE: Path("spritesheets_base"),
    SpriteCategory.CUSTOM: Path("spritesheets_custom"),
    SpriteCategory.AUTOGEN: Path("spritesheets_autogen"),
}


@dataclass
class ExtractReport:
    extracted: list = field(default_factory=list)
    skipped: list = field(default_factory=list)


def sheet_path_for(identifier, sheets_dir):
    root = Path(sheets_dir) / SHEET_DIRS[identifier.category]
    head = str(identifier.head_id)
    if identifier.category is SpriteCategory.CUSTOM:
        return root / head / f"{head}{identifier.alt_letter}.png"
    return root / f"{head}.png"


def output_path_for(identifier, output_dir):
    root = Path(output_dir) / identifier.category.value
    if identifier.category is SpriteCategory.BASE:
        return root / f"{identifier.sprite_id}.png"
    return root / str(identifier.head_id) / f"{identifier.sprite_id}.png"


def crop_sprite(sheet_path, rect):
    with Image.open(sheet_path) as sheet:
        if rect.x + rect.width > sheet.width or rect.y + rect.height > sheet.height:
            raise OutOfBounds(f"{rect} exceeds {sheet_path} ({sheet.width}x{sheet.height})")
        return sheet.crop(rect.box)


def catalog_identifiers(sprite_ids):
    identifiers = []
    for sprite_id in sprite_ids:
        try:
            identifiers.append(parse_sprite_id(sprite_id))
        except ParseError as e:
            logger.warning(f"Skipping sprite {sprite_id!r}: {e}")
    return identifiers


def autogen_identifiers(sheets_dir, max_species=MAX_SPECIES_ID):
    autogen_dir = Path(sheets_dir) / SHEET_DIRS[SpriteCategory.AUTOGEN]
    if not autogen_dir.exists():
        logger.info(f"No autogen spritesheets at {autogen_dir}")
        return []

    identifiers = []
    for sheet in sorted(autogen_dir.glob("*.png"), key=lambda p: (len(p.stem), p.stem)):
        if not sheet.stem.isdigit():
            logger.warning(f"Ignoring autogen sheet with unexpected name: {sheet.name}")
            continue
        head_id = int(sheet.stem)
        identifiers.extend(
            SpriteIdentifier(head_id=head_id, body_id=body_id, category=SpriteCategory.AUTOGEN)
            for body_id in range(1, max_species + 1)
        )
    return identifiers


def extract_sprites(identifiers, sheets_dir, output_dir, tile_size=SPRITE_SIZE):
    """Crop every identifier out of its spritesheet, opening each sheet once."""
    report = ExtractReport()
    keyed = sorted(identifiers, key=lambda i: str(sheet_path_for(i, sheets_dir)))

    for sheet_path, group in groupby(keyed, key=lambda i: sheet_path_for(i, sheets_dir)):
        group = list(group)
        done = set()
        logger.info(f"Processing spritesheet {sheet_path} ({len(group)} sprites)")
        try:
            with Image.open(sheet_path) as sheet:
                sheet.load()
                for identifier in group:
                    try:
                        rect = resolve_position(
                            identifier, sheet_width=sheet.width, sheet_height=sheet.height, tile_size=tile_size
                        )
                    except OutOfBounds as e:
                        logger.info(f"Skipping sprite {identifier}: {e}")
                        report.skipped.append((identifier.sprite_id, "OutOfBounds"))
                        continue

                    out_path = output_path_for(identifier, output_dir)
                    out_path.parent.mkdir(parents=True, exist_ok=True)
                    sheet.crop(rect.box).save(out_path)
                    report.extracted.append(out_path)
                    done.add(identifier)
        except OSError as e:
            logger.error(f"Error processing sheet {sheet_path}: {e}")
            report.skipped.extend((i.sprite_id, "IOError") for i in group if i not in done)

    logger.info(f"Extracted {len(report.extracted)} sprites, skipped {len(report.skipped)}")
    return report

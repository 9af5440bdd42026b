import csv
import logging
from dataclasses import dataclass
from pathlib import Path

from .identifiers import IMAGE_SUFFIXES, strip_image_suffix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreditRecord:
    sprite_id: str
    artists: str = ""
    comments: str = ""


def _read_lines(path):
    with Path(path).open("r", encoding="utf-8-sig") as f:
        for line in f.read().splitlines():
            if line.strip():
                yield line


def read_credit_list(path):
    """Read ``sprite_id,artists,type,comments`` lines.

    The type column is recomputed from the sprite id later, so it is dropped
    here. Comments keep any commas they contain.
    """
    records = []
    for line in _read_lines(path):
        parts = line.split(",", 3)
        parts += [""] * (4 - len(parts))
        sprite_id, artists, _type, comments = parts
        records.append(CreditRecord(sprite_id=sprite_id.strip(), artists=artists, comments=comments))
    logger.info(f"Read {len(records)} credit lines from {path}")
    return records


def read_sprite_manifest(path):
    return sorted({strip_image_suffix(line) for line in _read_lines(path)})


def scan_sprite_directory(directory):
    directory = Path(directory)
    if not directory.exists():
        logger.info(f"No sprite directory at {directory}")
        return []
    return sorted(
        strip_image_suffix(p.name)
        for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES
    )


def build_image_records(credits, manifest):
    """Credit rows in file order, then manifest sprites nobody credited yet.

    The type column is left empty; the catalog derives it from the sprite id.
    """
    records = [(c.sprite_id, c.artists, "", c.comments) for c in credits]
    credited = {c.sprite_id for c in credits}
    missing = [s for s in manifest if s not in credited]
    records.extend((s, "", "", "") for s in missing)
    logger.info(f"Sprite records: {len(records)} ({len(missing)} from manifest only)")
    return records


def read_dex_entries(path):
    entries = []
    with Path(path).open("r", encoding="utf-8-sig", newline="") as f:
        for row in csv.reader(f):
            if not row or not any(cell.strip() for cell in row):
                continue
            row = [cell.strip() for cell in row] + [""] * 3
            sprite, entry, author = row[:3]
            entries.append((sprite, entry, author))
    logger.info(f"Read {len(entries)} dex entries from {path}")
    return entries

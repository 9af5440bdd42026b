"""
Catalog store: images, artist credits and dex entries in SQLite.

Tables:
  images          : one row per sprite, keyed by canonical sprite id
  image_artists   : one row per (sprite, artist); co-credits are split
  dex_entry       : flavor texts, several per sprite allowed

Every build drops and recreates the tables; there is no incremental load.
"""

import logging
import sqlite3
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path

from .errors import DuplicateKey, ParseError, StorageFault
from .identifiers import parse_sprite_id, strip_image_suffix

logger = logging.getLogger(__name__)

ARTIST_SEPARATOR = " & "
UNCREDITED_ARTIST = "Coming Soon (WIP)"

DROP_TABLES = """
    DROP TABLE IF EXISTS dex_entry;
    DROP TABLE IF EXISTS image_artists;
    DROP TABLE IF EXISTS images;
"""

CREATE_TABLES = """
    CREATE TABLE images (
        sprite_id TEXT PRIMARY KEY,
        base_id TEXT NOT NULL,
        type TEXT NOT NULL,
        comments TEXT
    );

    CREATE TABLE image_artists (
        sprite_id TEXT NOT NULL,
        artist_name TEXT NOT NULL,
        FOREIGN KEY (sprite_id) REFERENCES images (sprite_id)
    );

    CREATE TABLE dex_entry (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        sprite_id TEXT NOT NULL,
        entry TEXT,
        author TEXT
    );
"""

CREATE_INDEXES = """
    CREATE INDEX IF NOT EXISTS idx_images_base_id ON images (base_id);
    CREATE INDEX IF NOT EXISTS idx_images_base_sprite_id ON images (base_id, sprite_id);
    CREATE INDEX IF NOT EXISTS idx_image_artists_sprite_id_name ON image_artists (sprite_id, artist_name);
    CREATE INDEX IF NOT EXISTS idx_image_artists_artist_name_sprite_id ON image_artists (artist_name, sprite_id);
    CREATE INDEX IF NOT EXISTS idx_dex_entry_sprite_id_author ON dex_entry (sprite_id, author);
    CREATE INDEX IF NOT EXISTS idx_dex_entry_author ON dex_entry (author);
"""

# GLOB has no "one or more digits"; the NOT GLOB half rejects any non-digit
FUSION_COUNT_QUERY = """
    SELECT COUNT(DISTINCT base_id) FROM images
    WHERE base_id GLOB ? AND base_id NOT GLOB ?
"""


@dataclass
class LoadReport:
    inserted: int = 0
    duplicates: list = field(default_factory=list)
    skipped: list = field(default_factory=list)

    def skip(self, token, reason):
        self.skipped.append((token, reason))


def split_artists(artist_line):
    names = [name.strip() for name in (artist_line or "").split(ARTIST_SEPARATOR)]
    return [name or UNCREDITED_ARTIST for name in names]


def sanitize_entry(text):
    return (text or "").replace("#", "_")


class CatalogStore:
    def __init__(self, db_path):
        self.db_path = Path(db_path)

    def connect(self, create=False) -> sqlite3.Connection:
        if not create and not self.db_path.exists():
            raise StorageFault(f"No catalog at {self.db_path}")
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise StorageFault(f"Cannot open catalog {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def rebuild_schema(self):
        logger.info(f"Rebuilding catalog schema in {self.db_path}")
        try:
            with closing(self.connect(create=True)) as conn:
                conn.execute("PRAGMA foreign_keys = OFF")
                conn.executescript(DROP_TABLES)
                conn.executescript(CREATE_TABLES)
                conn.executescript(CREATE_INDEXES)
                conn.execute("PRAGMA foreign_keys = ON")
                conn.execute("VACUUM")
        except sqlite3.Error as e:
            raise StorageFault(f"Error initializing catalog: {e}") from e
        logger.info("Catalog tables created")

    def load_images(self, records):
        """Insert ``(sprite_id, artists, type, comments)`` rows in one transaction.

        The stored type is always recomputed from the sprite id. Unparseable
        and duplicate ids are skipped; any SQLite error rolls back the batch
        and is raised as StorageFault.
        """
        report = LoadReport()
        seen = set()
        try:
            with closing(self.connect()) as conn:
                with conn:
                    for sprite_token, artists, _type, comments in records:
                        try:
                            identifier = parse_sprite_id(sprite_token)
                        except ParseError as e:
                            logger.warning(f"Skipping sprite {sprite_token!r}: {e}")
                            report.skip(sprite_token, e.reason)
                            continue

                        sprite_id = identifier.sprite_id
                        if sprite_id in seen:
                            logger.warning(str(DuplicateKey(sprite_id)))
                            report.duplicates.append(sprite_id)
                            continue
                        seen.add(sprite_id)

                        conn.execute(
                            "INSERT INTO images (sprite_id, base_id, type, comments) VALUES (?, ?, ?, ?)",
                            (sprite_id, identifier.base_id, identifier.image_type, comments or ""),
                        )
                        conn.executemany(
                            "INSERT INTO image_artists (sprite_id, artist_name) VALUES (?, ?)",
                            [(sprite_id, name) for name in split_artists(artists)],
                        )
                        report.inserted += 1
        except sqlite3.Error as e:
            logger.error(f"Error inserting images, load rolled back: {e}")
            raise StorageFault(f"Image load failed: {e}") from e

        logger.info(f"Inserted {report.inserted} images ({len(report.duplicates)} duplicates, {len(report.skipped)} skipped)")
        return report

    def load_dex_entries(self, records):
        report = LoadReport()
        try:
            with closing(self.connect()) as conn:
                with conn:
                    for sprite_token, entry, author in records:
                        try:
                            identifier = parse_sprite_id(strip_image_suffix(sprite_token))
                        except ParseError as e:
                            logger.warning(f"Skipping dex entry for {sprite_token!r}: {e}")
                            report.skip(sprite_token, e.reason)
                            continue
                        conn.execute(
                            "INSERT INTO dex_entry (sprite_id, entry, author) VALUES (?, ?, ?)",
                            (identifier.sprite_id, sanitize_entry(entry), author),
                        )
                        report.inserted += 1
        except sqlite3.Error as e:
            logger.error(f"Error inserting dex entries, load rolled back: {e}")
            raise StorageFault(f"Dex entry load failed: {e}") from e

        logger.info(f"Inserted {report.inserted} dex entries ({len(report.skipped)} skipped)")
        return report

    def count_fusions(self, species_id, as_head):
        species_id = int(species_id)
        if as_head:
            params = (f"{species_id}.[0-9]*", f"{species_id}.*[^0-9]*")
        else:
            params = (f"[0-9]*.{species_id}", f"*[^0-9]*.{species_id}")
        try:
            with closing(self.connect()) as conn:
                row = conn.execute(FUSION_COUNT_QUERY, params).fetchone()
        except sqlite3.Error as e:
            raise StorageFault(f"Fusion count failed for {species_id}: {e}") from e
        return row[0] if row else 0

    def _query(self, sql, params=()):
        try:
            with closing(self.connect()) as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageFault(f"Catalog query failed: {e}") from e

    def get_image(self, sprite_id):
        rows = self._query("SELECT * FROM images WHERE sprite_id = ?", (sprite_id,))
        return dict(rows[0]) if rows else None

    def artists_for(self, sprite_id):
        rows = self._query("SELECT artist_name FROM image_artists WHERE sprite_id = ? ORDER BY rowid", (sprite_id,))
        return [r["artist_name"] for r in rows]

    def dex_entries_for(self, sprite_id):
        rows = self._query("SELECT entry, author FROM dex_entry WHERE sprite_id = ? ORDER BY id", (sprite_id,))
        return [dict(r) for r in rows]

    def iter_sprite_ids(self):
        for row in self._query("SELECT sprite_id FROM images ORDER BY sprite_id"):
            yield row["sprite_id"]

    def table_counts(self):
        return {
            table: self._query(f"SELECT COUNT(*) FROM {table}")[0][0]
            for table in ("images", "image_artists", "dex_entry")
        }

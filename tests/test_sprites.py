"""
Tests for slicing sprites out of generated spritesheets.
"""

import pytest
from PIL import Image

from fusiondex.errors import OutOfBounds
from fusiondex.identifiers import SpriteCategory, parse_sprite_id
from fusiondex.positions import Rectangle
from fusiondex.sprites import (
    autogen_identifiers,
    catalog_identifiers,
    crop_sprite,
    extract_sprites,
    output_path_for,
    sheet_path_for,
)

TILE = 4
RED = (255, 0, 0)


@pytest.fixture
def sheets_dir(tmp_path):
    root = tmp_path / "sheets"

    custom = Image.new("RGB", (20 * TILE, 2 * TILE))
    custom.paste(RED, (1 * TILE, 1 * TILE, 2 * TILE, 2 * TILE))  # cell 21
    (root / "spritesheets_custom" / "7").mkdir(parents=True)
    custom.save(root / "spritesheets_custom" / "7" / "7.png")

    base = Image.new("RGB", (10 * TILE, TILE))
    base.paste(RED, (2 * TILE, 0, 3 * TILE, TILE))  # alt "b"
    (root / "spritesheets_base").mkdir()
    base.save(root / "spritesheets_base" / "25.png")
    return root


class TestPaths:
    def test_sheet_paths(self, tmp_path):
        assert sheet_path_for(parse_sprite_id("25c"), tmp_path) == tmp_path / "spritesheets_base" / "25.png"
        assert sheet_path_for(parse_sprite_id("7.21b"), tmp_path) == tmp_path / "spritesheets_custom" / "7" / "7b.png"
        autogen = parse_sprite_id("7.21", SpriteCategory.AUTOGEN)
        assert sheet_path_for(autogen, tmp_path) == tmp_path / "spritesheets_autogen" / "7.png"

    def test_output_paths(self, tmp_path):
        assert output_path_for(parse_sprite_id("25c"), tmp_path) == tmp_path / "base" / "25c.png"
        assert output_path_for(parse_sprite_id("7.21b"), tmp_path) == tmp_path / "custom" / "7" / "7.21b.png"
        autogen = parse_sprite_id("7.21", SpriteCategory.AUTOGEN)
        assert output_path_for(autogen, tmp_path) == tmp_path / "autogen" / "7" / "7.21.png"


class TestCropSprite:
    def test_crop(self, sheets_dir):
        sprite = crop_sprite(sheets_dir / "spritesheets_custom" / "7" / "7.png", Rectangle(TILE, TILE, TILE, TILE))
        assert sprite.size == (TILE, TILE)
        assert sprite.getpixel((0, 0)) == RED

    def test_out_of_bounds(self, sheets_dir):
        with pytest.raises(OutOfBounds):
            crop_sprite(sheets_dir / "spritesheets_base" / "25.png", Rectangle(0, TILE, TILE, TILE))

    def test_missing_sheet(self, tmp_path):
        with pytest.raises(OSError):
            crop_sprite(tmp_path / "missing.png", Rectangle(0, 0, TILE, TILE))


class TestExtractSprites:
    def test_extracts_resolved_cells(self, sheets_dir, tmp_path):
        out = tmp_path / "out"
        report = extract_sprites(
            [parse_sprite_id("7.21"), parse_sprite_id("25b"), parse_sprite_id("25")],
            sheets_dir, out, tile_size=TILE,
        )
        assert sorted(report.extracted) == sorted([
            out / "custom" / "7" / "7.21.png",
            out / "base" / "25b.png",
            out / "base" / "25.png",
        ])
        assert report.skipped == []
        with Image.open(out / "custom" / "7" / "7.21.png") as img:
            assert img.size == (TILE, TILE)
            assert img.getpixel((1, 1)) == RED
        with Image.open(out / "base" / "25.png") as img:
            assert img.getpixel((1, 1)) == (0, 0, 0)

    def test_out_of_bounds_and_missing_sheets_are_skipped(self, sheets_dir, tmp_path):
        report = extract_sprites(
            [parse_sprite_id("7.45"), parse_sprite_id("8.1"), parse_sprite_id("7.1")],
            sheets_dir, tmp_path / "out", tile_size=TILE,
        )
        assert report.extracted == [tmp_path / "out" / "custom" / "7" / "7.1.png"]
        assert sorted(report.skipped) == [("7.45", "OutOfBounds"), ("8.1", "IOError")]


class TestIdentifiers:
    def test_autogen_identifiers(self, tmp_path):
        autogen_dir = tmp_path / "spritesheets_autogen"
        autogen_dir.mkdir()
        for name in ["10.png", "2.png", "x.png"]:
            (autogen_dir / name).write_bytes(b"")
        idents = autogen_identifiers(tmp_path, max_species=2)
        assert [i.sprite_id for i in idents] == ["2.1", "2.2", "10.1", "10.2"]
        assert all(i.category is SpriteCategory.AUTOGEN for i in idents)

    def test_no_autogen_directory(self, tmp_path):
        assert autogen_identifiers(tmp_path) == []

    def test_catalog_identifiers_skip_bad_ids(self):
        assert [i.sprite_id for i in catalog_identifiers(["1", "bad", "1.2a"])] == ["1", "1.2a"]

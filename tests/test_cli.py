"""
End-to-end runs of the command line jobs against temporary inputs.
"""

import json

import pytest
from PIL import Image

from fusiondex.catalog import UNCREDITED_ARTIST, CatalogStore
from fusiondex.cli import build_parser, main


@pytest.fixture
def inputs(write_text):
    return {
        "credits": write_text("data/credits.txt", "1.2,Alice & Bob,main,\r\n1.2,Carol,main,dup\r\n2.1a,Dan,alt,\r\n"),
        "sprites": write_text("data/sprites.txt", "1.2.png\r\n2.1a.png\r\n3.1.png\r\n"),
        "dex": write_text("data/dex.csv", '1.2.png,"A #1 fusion, truly",Ann\n'),
    }


@pytest.fixture(autouse=True)
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def build(db, inputs):
    return main([
        "--db", str(db), "build-catalog",
        "--credits", str(inputs["credits"]),
        "--sprites", str(inputs["sprites"]),
        "--dex", str(inputs["dex"]),
    ])


class TestBuildCatalog:
    def test_build(self, tmp_path, inputs):
        db = tmp_path / "catalog.sqlite"
        assert build(db, inputs) == 0

        store = CatalogStore(db)
        assert list(store.iter_sprite_ids()) == ["1.2", "2.1a", "3.1"]
        assert store.artists_for("1.2") == ["Alice", "Bob"]
        assert store.artists_for("3.1") == [UNCREDITED_ARTIST]
        assert store.dex_entries_for("1.2") == [{"entry": "A _1 fusion, truly", "author": "Ann"}]
        assert (tmp_path / "logs" / "build_catalog.log").exists()

    def test_rebuild_is_a_full_reload(self, tmp_path, inputs):
        db = tmp_path / "catalog.sqlite"
        assert build(db, inputs) == 0
        assert build(db, inputs) == 0
        assert CatalogStore(db).table_counts() == {"images": 3, "image_artists": 4, "dex_entry": 1}

    def test_missing_dex_file_is_tolerated(self, tmp_path, inputs):
        inputs["dex"] = tmp_path / "data" / "absent.csv"
        assert build(tmp_path / "catalog.sqlite", inputs) == 0


class TestFusionTotals:
    def test_report(self, tmp_path, inputs):
        db = tmp_path / "catalog.sqlite"
        build(db, inputs)
        out = tmp_path / "fusion_totals.json"
        assert main(["--db", str(db), "fusion-totals", "--first", "1", "--last", "3", "--output", str(out)]) == 0
        assert json.loads(out.read_text(encoding="utf-8")) == {
            "1": {"head": 1, "body": 2},
            "2": {"head": 1, "body": 1},
            "3": {"head": 1, "body": 0},
        }

    def test_missing_catalog_fails_cleanly(self, tmp_path):
        db = tmp_path / "missing.sqlite"
        out = tmp_path / "fusion_totals.json"
        assert main(["--db", str(db), "fusion-totals", "--last", "2", "--output", str(out)]) == 1
        assert not db.exists()
        assert not out.exists()


class TestExtractSprites:
    def test_extracts_catalog_sprites(self, tmp_path, inputs):
        db = tmp_path / "catalog.sqlite"
        build(db, inputs)
        sheets = tmp_path / "sheets"
        for head in ("1", "3"):
            (sheets / "spritesheets_custom" / head).mkdir(parents=True)
            Image.new("RGB", (20 * 288, 288)).save(sheets / "spritesheets_custom" / head / f"{head}.png")
        out = tmp_path / "sprites"

        code = main(["--db", str(db), "extract-sprites", "--sheets", str(sheets), "--output", str(out)])
        assert code == 0
        assert (out / "custom" / "1" / "1.2.png").exists()
        assert (out / "custom" / "3" / "3.1.png").exists()
        # no 2a sheet exists
        assert not (out / "custom" / "2" / "2.1a.png").exists()

    def test_missing_catalog_fails_cleanly(self, tmp_path):
        db = tmp_path / "missing.sqlite"
        code = main(["--db", str(db), "extract-sprites", "--sheets", str(tmp_path / "sheets")])
        assert code == 1
        assert not db.exists()

    def test_catalog_without_schema_fails_cleanly(self, tmp_path):
        db = tmp_path / "bare.sqlite"
        db.write_bytes(b"")
        assert main(["--db", str(db), "extract-sprites", "--sheets", str(tmp_path / "sheets")]) == 1


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_defaults(self):
        args = build_parser().parse_args(["fusion-totals"])
        assert args.first == 1
        assert args.last >= args.first

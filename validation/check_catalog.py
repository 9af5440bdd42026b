import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fusiondex import DATA_DIR, DB_PATH
from fusiondex.catalog import CatalogStore
from fusiondex.errors import StorageFault

TOTALS_PATH = DATA_DIR / "fusion_totals.json"


def check_catalog(db_path):
    if not db_path.exists():
        print(f"MISSING: catalog at {db_path}")
        return False
    try:
        counts = CatalogStore(db_path).table_counts()
    except StorageFault as e:
        print(f"CORRUPT: catalog | {e}")
        return False
    size_mb = db_path.stat().st_size / (1024 * 1024)
    summary = " | ".join(f"{table}={count}" for table, count in counts.items())
    print(f"OK  catalog | {size_mb:.2f} MB | {summary}")
    if not counts.get("images"):
        print("WARN: catalog has no images")
    return True


def validate_totals_schema(path):
    if not path.exists():
        print(f"optional missing: fusion totals at {path}")
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"CORRUPT: fusion totals | {e}")
        return False
    if not isinstance(data, dict):
        print("FAIL: fusion totals must be a dict")
        return False
    for species_id, counts in data.items():
        if not species_id.isdigit():
            print(f"FAIL: bad species key {species_id!r}")
            return False
        if not isinstance(counts, dict) or set(counts) != {"head", "body"}:
            print(f"FAIL: {species_id} must map to head/body counts")
            return False
        if not all(isinstance(v, int) and v >= 0 for v in counts.values()):
            print(f"FAIL: {species_id} has non-integer counts")
            return False
    print(f"OK  fusion totals | {len(data)} species")
    return True


def main():
    results = [check_catalog(DB_PATH), validate_totals_schema(TOTALS_PATH)]
    passed = sum(1 for r in results if r is True)
    failed = sum(1 for r in results if r is False)
    print(f"\npassed={passed} failed={failed}")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())

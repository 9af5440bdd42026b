import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fusiondex import DATA_DIR, DB_PATH
from fusiondex.catalog import CatalogStore
from fusiondex.errors import StorageFault
from fusiondex.sprites import catalog_identifiers, output_path_for

SPRITES_DIR = DATA_DIR / "sprites"


def find_missing_sprites(store, sprites_dir):
    missing = []
    found = 0
    for identifier in catalog_identifiers(store.iter_sprite_ids()):
        if output_path_for(identifier, sprites_dir).exists():
            found += 1
        else:
            missing.append(identifier.sprite_id)
    return found, missing


def main():
    if not DB_PATH.exists():
        print(f"not found: {DB_PATH}")
        return 1
    try:
        found, missing = find_missing_sprites(CatalogStore(DB_PATH), SPRITES_DIR)
    except StorageFault as e:
        print(f"CORRUPT: catalog | {e}")
        return 1
    print(f"total={found + len(missing)} found={found} missing={len(missing)}")
    if missing:
        for i, sprite_id in enumerate(missing[:50], 1):
            print(f"  {i}. {sprite_id}")
        if len(missing) > 50:
            print(f"  ... +{len(missing) - 50} more")
        missing_file = Path("validation") / "missing_sprites.txt"
        missing_file.parent.mkdir(exist_ok=True)
        with missing_file.open("w") as f:
            for sprite_id in missing:
                f.write(f"{sprite_id}\n")
        print(f"saved to {missing_file}")
    return 0 if not missing else 1


if __name__ == "__main__":
    sys.exit(main())

import logging
import os
from pathlib import Path


def get_repo_root() -> Path:
    return Path(__file__).parent.parent


DATA_DIR = Path(os.environ.get("FUSIONDEX_DATA_DIR", str(get_repo_root() / "data")))
DB_PATH = Path(os.environ.get("FUSIONDEX_DB", str(DATA_DIR / "infinitefusion.sqlite")))
LOG_DIR = "logs"

MAX_WORKERS = int(os.environ.get("MAX_FUSION_WORKERS", "10"))
SPRITE_SIZE = int(os.environ.get("FUSIONDEX_SPRITE_SIZE", "288"))
MAX_SPECIES_ID = int(os.environ.get("FUSIONDEX_MAX_SPECIES", "501"))
BASE_URL = os.environ.get("FUSIONDEX_BASE_URL", "https://www.fusiondex.org")


def configure_logging(name, level=logging.INFO):
    """Log to ``logs/<name>.log`` and the console, replacing earlier handlers."""
    os.makedirs(LOG_DIR, exist_ok=True)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.path.join(LOG_DIR, f"{name}.log"), mode='w'),
            logging.StreamHandler()
        ],
        force=True,
    )

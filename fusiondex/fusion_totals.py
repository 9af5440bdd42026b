import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from pathlib import Path

from . import MAX_SPECIES_ID, MAX_WORKERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FusionCount:
    head: int = 0
    body: int = 0


def _count_species(store, species_id):
    return FusionCount(
        head=store.count_fusions(species_id, as_head=True),
        body=store.count_fusions(species_id, as_head=False),
    )


def compute_fusion_totals(store, first=1, last=MAX_SPECIES_ID, max_workers=MAX_WORKERS):
    """Count head and body fusions for every species in ``first..last``.

    Read-only; each query opens its own connection so species can be
    counted in parallel.
    """
    if first < 1 or last < first:
        raise ValueError(f"Invalid species range {first}..{last}")

    logger.info(f"Counting fusions for species {first}..{last} with {max_workers} workers")
    totals = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_species = {
            executor.submit(_count_species, store, species_id): species_id
            for species_id in range(first, last + 1)
        }
        for future, species_id in future_to_species.items():
            totals[species_id] = future.result()

    logger.info(f"Fusion totals computed for {len(totals)} species")
    return totals


def totals_to_document(totals):
    return {str(species_id): asdict(count) for species_id, count in sorted(totals.items())}


def write_fusion_totals(totals, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(totals_to_document(totals), f, indent=2)
    logger.info(f"Results written to {path}")
    return path

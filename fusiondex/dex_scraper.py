import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import requests
from bs4 import BeautifulSoup

from . import BASE_URL, MAX_WORKERS
from .errors import NotFound

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10

STATS_MAP = {
    'base_hp': 'hp',
    'base_atk': 'attack',
    'base_def': 'defense',
    'base_sp_atk': 'specialAttack',
    'base_sp_def': 'specialDefense',
    'base_spd': 'speed',
    'total': 'total',
}

DATA_MAP = {
    'height': 'height',
    'weight': 'weight',
    'category': 'category',
}


def _definition_list(dl, mapping):
    values = {}
    if dl is None:
        return values
    for dt in dl.find_all('dt'):
        dt_class = (dt.get('class') or [None])[0]
        if dt_class not in mapping:
            continue
        dd = dt.find_next_sibling('dd', class_=dt_class)
        if dd is not None:
            values[mapping[dt_class]] = dd.text.strip()
    return values


def parse_species_page(html, dex_id):
    soup = BeautifulSoup(html, 'html.parser')
    article = soup.select_one('article.dex-entry.sprite-variant-main')
    if article is None:
        raise NotFound(f"Could not find the dex entry block for Dex ID {dex_id}")

    species = {}
    header = article.select_one('header h2')
    dex_id_span = header.select_one('.dex-id') if header else None
    id_text = dex_id_span.text if dex_id_span else ''
    species['id'] = id_text.replace('#', '').strip() or str(dex_id)
    species['fullName'] = header.text.replace(id_text, '').strip() if header else ''

    species['types'] = [
        span.text.strip()
        for span in article.select('section.types .type span[class^="type-"]')
    ]

    for key, value in _definition_list(article.select_one('dl.stats'), STATS_MAP).items():
        try:
            species[key] = int(value)
        except ValueError:
            logger.warning(f"Non-numeric {key} {value!r} for Dex ID {dex_id}")

    species.update(_definition_list(article.select_one('dl.data'), DATA_MAP))
    return species


def fetch_species_page(dex_id, session=None, base_url=BASE_URL):
    url = f"{base_url}/{dex_id}/"
    logger.info(f"Scraping Dex ID {dex_id} from {url}")
    http = session or requests
    response = http.get(url, timeout=REQUEST_TIMEOUT)
    if response.status_code == 404:
        raise NotFound(f"Page not found for Dex ID {dex_id}")
    response.raise_for_status()
    return parse_species_page(response.content, dex_id)


def _scrape_one(dex_id, session, base_url):
    try:
        return fetch_species_page(dex_id, session=session, base_url=base_url)
    except NotFound as e:
        logger.warning(f"{e}. Skipping.")
    except requests.RequestException as e:
        logger.error(f"HTTP request failed for Dex ID {dex_id}: {e}")
    return None


def scrape_species(first, last, max_workers=MAX_WORKERS, session=None, base_url=BASE_URL):
    logger.info(f"Starting scraping process for Dex IDs {first} to {last}")
    session = session or requests.Session()
    all_species = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_id = {
            executor.submit(_scrape_one, dex_id, session, base_url): dex_id
            for dex_id in range(first, last + 1)
        }
        for future in future_to_id:
            species = future.result()
            if species and species.get('fullName'):
                all_species[species['fullName']] = species

    logger.info(f"Total species scraped: {len(all_species)}")
    return all_species


def save_species_data(data, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    logger.info(f"Scraped data saved to {path}")
    return path

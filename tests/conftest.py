"""
Shared fixtures: a freshly rebuilt catalog in a temporary directory and
small sample inputs.
"""

import pytest

from fusiondex.catalog import CatalogStore


@pytest.fixture
def store(tmp_path):
    """Empty catalog with the schema already created."""
    catalog = CatalogStore(tmp_path / "catalog.sqlite")
    catalog.rebuild_schema()
    return catalog


@pytest.fixture
def image_records():
    return [
        ("1", "Alice", "main", ""),
        ("1a", "Bob & Carol", "alt", "first alt"),
        ("1.2", "", "main", ""),
        ("1.3", "Dave", "main", ""),
        ("1.3a", "Eve", "alt", ""),
        ("2.1", "Alice & ", "main", ""),
        ("3", "Frank", "main", ""),
    ]


@pytest.fixture
def write_text(tmp_path):
    def _write(name, text):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write

"""Fixture-file catalog source."""

import json
from pathlib import Path

from backend.app.catalog.snapshot import CatalogSnapshot

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def load_fixture_catalog(path: Path | None = None) -> CatalogSnapshot:
    """Load a catalog snapshot from a JSON fixture.

    Args:
        path: Fixture file (defaults to the bundled demo catalog)

    Returns:
        Catalog snapshot
    """
    fixtures_path = path or FIXTURES_DIR / "catalog.json"
    with open(fixtures_path) as f:
        data = json.load(f)

    return CatalogSnapshot.model_validate(data)


class FixtureCatalogSource:
    """CatalogSource reading a JSON fixture on every fetch."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def fetch_snapshot(self) -> CatalogSnapshot:
        return load_fixture_catalog(self._path)

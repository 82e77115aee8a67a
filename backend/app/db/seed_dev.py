"""Dev seeding helper - loads the fixture catalog into the SQL database."""

from pathlib import Path

from sqlalchemy.orm import Session

from backend.app.catalog.fixtures import load_fixture_catalog
from backend.app.db.engine import get_session_factory
from backend.app.db.models import HotelRow
from backend.app.db.sql_repositories import replace_catalog


def seed_catalog(session: Session, path: Path | None = None, force: bool = False) -> bool:
    """Seed catalog tables from a JSON fixture.

    Idempotent: an already populated catalog is left alone unless `force`.

    Returns:
        True if the catalog was written
    """
    if not force and session.query(HotelRow).first() is not None:
        print("Catalog already seeded")
        return False

    snapshot = load_fixture_catalog(path)
    replace_catalog(session, snapshot)
    print(
        f"✅ Seeded catalog: {len(snapshot.hotels)} hotels, "
        f"{len(snapshot.sightseeing)} sightseeing, {len(snapshot.activities)} activities"
    )
    return True


if __name__ == "__main__":
    with get_session_factory()() as session:
        seed_catalog(session)

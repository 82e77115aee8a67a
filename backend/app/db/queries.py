"""Scoped query helpers."""

from sqlalchemy.orm import Query, Session

from backend.app.db.models import ClientRow, ItineraryVersionRow


def query_clients(session: Session, created_by: str | None = None) -> Query:
    """Query client table, optionally scoped to one creator.

    Args:
        session: SQLAlchemy session
        created_by: Creator to scope by, or None for all clients

    Returns:
        Query over client rows
    """
    query = session.query(ClientRow)
    if created_by is not None:
        query = query.filter(ClientRow.created_by == created_by)
    return query


def query_itinerary_versions(session: Session, client_id: str) -> Query:
    """Query itinerary_version rows for one client.

    Args:
        session: SQLAlchemy session
        client_id: Client ID

    Returns:
        Query filtered by client_id
    """
    return session.query(ItineraryVersionRow).filter(ItineraryVersionRow.client_id == client_id)

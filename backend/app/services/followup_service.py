"""Follow-up application service - sales pipeline updates over the client store."""

import logging
from datetime import date, time

from backend.app.db.repositories import ClientStore
from backend.app.errors import ClientNotFoundError
from backend.app.followup.state_machine import allowed_next_stages, apply_follow_up, is_confirmed
from backend.app.models.client import Client
from backend.app.models.common import FollowUpStage

logger = logging.getLogger(__name__)


class FollowUpService:
    """Records follow-ups and answers pipeline queries."""

    def __init__(self, client_store: ClientStore) -> None:
        self._clients = client_store

    def get_client(self, client_id: str, owner: str | None = None) -> Client:
        client = self._clients.get_client(client_id)
        if client is None or (owner is not None and client.created_by != owner):
            raise ClientNotFoundError(client_id)
        return client

    def record(
        self,
        client_id: str,
        stage: FollowUpStage,
        remarks: str,
        *,
        actor: str,
        next_follow_up_date: date | None = None,
        next_follow_up_time: time | None = None,
        owner: str | None = None,
    ) -> Client:
        """Move a client to `stage` and persist the new history record.

        Raises:
            ClientNotFoundError: If the client is missing or not visible
            FollowUpTransitionError: If the transition is illegal or incomplete
        """
        client = self.get_client(client_id, owner)
        updated = apply_follow_up(
            client,
            stage,
            remarks,
            actor=actor,
            next_follow_up_date=next_follow_up_date,
            next_follow_up_time=next_follow_up_time,
        )
        saved = self._clients.save_client(updated)
        logger.info(
            f"[follow-up] Client {client_id}: {client.current_stage.value} -> {stage.value}",
            extra={
                "structured": {
                    "client_id": client_id,
                    "from_stage": client.current_stage.value,
                    "to_stage": stage.value,
                    "updated_by": actor,
                }
            },
        )
        return saved

    def options(self, client_id: str, owner: str | None = None) -> list[FollowUpStage]:
        """Stages the client may move to next."""
        return allowed_next_stages(self.get_client(client_id, owner).current_stage)

    def due(self, day: date, owner: str | None = None) -> list[Client]:
        """Clients whose next follow-up is scheduled on `day`."""
        return self._clients.list_due_follow_ups(day, owner)

    def confirmed(self, owner: str | None = None) -> list[Client]:
        """Clients who paid the advance."""
        return [client for client in self._clients.list_clients(owner) if is_confirmed(client)]

"""Domain errors raised by the back-office core and its stores."""


class BackofficeError(Exception):
    """Base class for domain errors."""


class StoreError(BackofficeError):
    """Persistence failed for a reason other than a version conflict."""


class VersionConflictError(BackofficeError):
    """A save was based on a version that is no longer the latest.

    Raised when another writer persisted a newer version of the same
    client's itinerary between our read and our write.
    """

    def __init__(self, client_id: str, expected_version: int, actual_version: int) -> None:
        self.client_id = client_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Itinerary for client {client_id} is at version {actual_version}, "
            f"save expected version {expected_version}"
        )


class ClientNotFoundError(BackofficeError):
    """No client with the requested id."""

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")


class ItineraryNotFoundError(BackofficeError):
    """The client has no stored itinerary (or not the requested version)."""

    def __init__(self, client_id: str, version: int | None = None) -> None:
        self.client_id = client_id
        self.version = version
        suffix = f" version {version}" if version is not None else ""
        super().__init__(f"No itinerary{suffix} for client {client_id}")


class FollowUpTransitionError(BackofficeError, ValueError):
    """A follow-up update is illegal from the current stage or is incomplete."""

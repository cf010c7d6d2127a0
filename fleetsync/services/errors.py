"""Exception hierarchy for the sync engine.

Everything raised here is caught at the SyncHub boundary and turned into a
single ``error`` event for the originating connection.
"""


class FleetSyncError(Exception):
    """Base exception for all fleetsync errors."""


class VehicleNotFoundError(FleetSyncError):
    """Update targeted a vehicle id the store does not know."""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle {vehicle_id} not found")


class StorageError(FleetSyncError):
    """Storage collaborator read or write failed."""


class NotJoinedError(FleetSyncError):
    """Connection tried to edit before sending a join intent."""


class InvalidIntentError(FleetSyncError):
    """Inbound frame could not be parsed or validated."""

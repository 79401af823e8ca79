"""
Occupancy readers built from host-supplied vehicle state.
"""

from typing import Dict, Optional, Sequence

from .rules.models import MountRequest, Vehicle


class SnapshotOccupancyReader:
    """Answers occupancy queries from the snapshots it was given."""
    
    def __init__(self, *snapshots: MountRequest):
        self._snapshots: Dict[str, MountRequest] = {s.vehicle_id: s for s in snapshots}
    
    def _snapshot(self, vehicle: Vehicle) -> Optional[MountRequest]:
        return self._snapshots.get(vehicle.vehicle_id)
    
    def has_driver(self, vehicle: Vehicle) -> bool:
        snapshot = self._snapshot(vehicle)
        return bool(snapshot and snapshot.driver_id)
    
    def has_passenger(self, vehicle: Vehicle) -> bool:
        snapshot = self._snapshot(vehicle)
        return bool(snapshot and snapshot.passenger_ids)
    
    def occupants(self, vehicle: Vehicle) -> Sequence[str]:
        snapshot = self._snapshot(vehicle)
        if snapshot is None:
            return []
        return snapshot.occupant_ids


EMPTY_OCCUPANCY = SnapshotOccupancyReader()

"""
Rule data models for the Mount Policy service.
"""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


DENY_REASON_OCCUPIED = "occupied"


@dataclass(frozen=True)
class VehicleRule:
    """Mount restriction for every vehicle type containing ``vehicle_type_match``."""
    vehicle_type_match: str
    prevent_if_driver_present: bool = True
    prevent_if_passenger_present: bool = True
    allow_teammates: bool = True

    def matches(self, vehicle_type: str) -> bool:
        return self.vehicle_type_match in vehicle_type


RuleTable = Tuple[VehicleRule, ...]


@dataclass(frozen=True)
class Vehicle:
    """A vehicle that owns one or more mount points."""
    vehicle_id: str
    vehicle_type: str


@dataclass(frozen=True)
class Mountable:
    """A mount point; ``vehicle`` is None for seats that are not part of a vehicle."""
    mountable_id: str
    vehicle: Optional[Vehicle] = None


@dataclass(frozen=True)
class MountRequest:
    """Snapshot of a vehicle's occupancy at the moment an actor tries to mount it."""
    actor_id: str
    vehicle_id: str
    vehicle_type: str
    driver_id: Optional[str] = None
    passenger_ids: Tuple[str, ...] = ()

    @property
    def vehicle(self) -> Vehicle:
        return Vehicle(vehicle_id=self.vehicle_id, vehicle_type=self.vehicle_type)

    @property
    def occupant_ids(self) -> List[str]:
        occupants = [self.driver_id] if self.driver_id else []
        occupants.extend(self.passenger_ids)
        return occupants


@dataclass(frozen=True)
class Decision:
    """Outcome of a mount check. ``Allow`` means the gate has no objection."""
    allowed: bool
    reason: Optional[str] = None
    matched_rule: Optional[VehicleRule] = field(default=None, compare=False)

    @classmethod
    def allow(cls, matched_rule: Optional[VehicleRule] = None) -> "Decision":
        return cls(allowed=True, matched_rule=matched_rule)

    @classmethod
    def deny(cls, reason: str = DENY_REASON_OCCUPIED,
             matched_rule: Optional[VehicleRule] = None) -> "Decision":
        return cls(allowed=False, reason=reason, matched_rule=matched_rule)

    @property
    def denied(self) -> bool:
        return not self.allowed


# Stored configuration schema. Keys match the plugin's JSON config file.

class StoredVehicleRule(BaseModel):
    """One entry of the ``Vehicles`` list in the rule configuration file."""
    model_config = ConfigDict(populate_by_name=True)

    vehicle_type_match: str = Field(..., min_length=1, alias="Vehicle Short Prefab Name")
    prevent_if_driver_present: bool = Field(True, alias="Prevent Mounting If Driver Inside")
    prevent_if_passenger_present: bool = Field(True, alias="Prevent Mounting If Passenger Inside")
    allow_teammates: bool = Field(True, alias="Allow Teammates To Mount")

    @classmethod
    def from_rule(cls, rule: VehicleRule) -> "StoredVehicleRule":
        return cls(
            vehicle_type_match=rule.vehicle_type_match,
            prevent_if_driver_present=rule.prevent_if_driver_present,
            prevent_if_passenger_present=rule.prevent_if_passenger_present,
            allow_teammates=rule.allow_teammates,
        )

    def to_rule(self) -> VehicleRule:
        return VehicleRule(
            vehicle_type_match=self.vehicle_type_match,
            prevent_if_driver_present=self.prevent_if_driver_present,
            prevent_if_passenger_present=self.prevent_if_passenger_present,
            allow_teammates=self.allow_teammates,
        )


class StoredConfiguration(BaseModel):
    """The rule configuration document as persisted on disk."""
    model_config = ConfigDict(populate_by_name=True)

    version: int = Field(..., ge=0, alias="Version")
    vehicles: List[StoredVehicleRule] = Field(default_factory=list, alias="Vehicles")


# API models

class VehicleRuleModel(BaseModel):
    """A vehicle rule as exposed over HTTP."""
    vehicle_type_match: str = Field(..., min_length=1, description="Substring of the vehicle type")
    prevent_if_driver_present: bool = Field(True, description="Deny when a driver is seated")
    prevent_if_passenger_present: bool = Field(True, description="Deny when a passenger is seated")
    allow_teammates: bool = Field(True, description="Let teammates of any occupant mount")

    @classmethod
    def from_rule(cls, rule: VehicleRule) -> "VehicleRuleModel":
        return cls(
            vehicle_type_match=rule.vehicle_type_match,
            prevent_if_driver_present=rule.prevent_if_driver_present,
            prevent_if_passenger_present=rule.prevent_if_passenger_present,
            allow_teammates=rule.allow_teammates,
        )

    def to_rule(self) -> VehicleRule:
        return VehicleRule(**self.model_dump())


class VehicleSnapshot(BaseModel):
    """Vehicle state supplied by the host with a mount check."""
    vehicle_id: str = Field(..., description="Vehicle ID")
    vehicle_type: str = Field(..., description="Vehicle type identifier (short prefab name)")
    driver_id: Optional[str] = Field(None, description="Actor in the driver seat")
    passenger_ids: List[str] = Field(default_factory=list, description="Actors in passenger seats")


class MountCheckRequest(BaseModel):
    """Request model for a mount check."""
    actor_id: str = Field(..., description="Actor trying to mount")
    mountable_id: str = Field(..., description="Mount point being used")
    vehicle: Optional[VehicleSnapshot] = Field(None, description="Parent vehicle, if any")
    language: Optional[str] = Field(None, description="Language for the denial message")

    def to_mount_request(self) -> Optional[MountRequest]:
        if self.vehicle is None:
            return None
        return MountRequest(
            actor_id=self.actor_id,
            vehicle_id=self.vehicle.vehicle_id,
            vehicle_type=self.vehicle.vehicle_type,
            driver_id=self.vehicle.driver_id,
            passenger_ids=tuple(self.vehicle.passenger_ids),
        )


class MountCheckResponse(BaseModel):
    """Response model for a mount check."""
    allowed: bool = Field(..., description="Whether the mount may proceed")
    reason: Optional[str] = Field(None, description="Reason for a denial")
    message: Optional[str] = Field(None, description="Localized message for the actor")
    matched_rule: Optional[VehicleRuleModel] = Field(None, description="Rule that governed the vehicle")


class RuleTableResponse(BaseModel):
    """Response model for the active rule table."""
    rules: List[VehicleRuleModel]
    total: int


class RuleTableReplaceRequest(BaseModel):
    """Request model for replacing the rule table."""
    rules: List[VehicleRuleModel] = Field(..., description="Ordered rules, first match wins")


class TeamUpdateRequest(BaseModel):
    """Request model for setting team membership."""
    members: List[str] = Field(..., min_length=1, description="Actor IDs in the team")


class GrantRequest(BaseModel):
    """Request model for granting a permission."""
    actor_id: str = Field(..., description="Actor ID")
    permission: str = Field(..., description="Permission name")


class StatsResponse(BaseModel):
    """Response model for service statistics."""
    rule_table: Dict[str, Any]
    teams: Dict[str, Any]
    permissions: Dict[str, Any]

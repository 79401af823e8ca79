"""
Mount policy evaluation engine.
"""

from typing import Callable, Optional, Sequence

from shared.logging import get_logger
from .models import DENY_REASON_OCCUPIED, Decision, RuleTable, Vehicle, VehicleRule
from ..capabilities import ExemptionCheck, OccupancyReader, TeammateOracle


def find_rule(rule_table: Sequence[VehicleRule], vehicle_type: str) -> Optional[VehicleRule]:
    """Return the first rule whose match string occurs in ``vehicle_type``."""
    for rule in rule_table:
        if rule.matches(vehicle_type):
            return rule
    return None


def evaluate(
    actor: Optional[str],
    vehicle: Optional[Vehicle],
    rule_table: Sequence[VehicleRule],
    teammate_oracle: TeammateOracle,
    occupancy_reader: OccupancyReader,
    exemption_check: ExemptionCheck,
) -> Decision:
    """Decide whether ``actor`` may mount ``vehicle`` right now.

    The check only ever restricts mounting into an occupied vehicle of a
    regulated type; anything it cannot reason about is allowed. It performs
    no I/O and never raises on missing input.
    """
    if not actor or vehicle is None:
        return Decision.allow()

    if exemption_check(actor):
        return Decision.allow()

    rule = find_rule(rule_table, vehicle.vehicle_type)
    if rule is None:
        return Decision.allow()

    occupants = occupancy_reader.occupants(vehicle)
    if not occupants:
        return Decision.allow(rule)

    # Any occupant counts, so a teammate in a passenger seat also lifts a driver restriction.
    if rule.allow_teammates and any(teammate_oracle(occupant, actor) for occupant in occupants):
        return Decision.allow(rule)

    if occupancy_reader.has_driver(vehicle) and rule.prevent_if_driver_present:
        return Decision.deny(DENY_REASON_OCCUPIED, rule)

    if occupancy_reader.has_passenger(vehicle) and rule.prevent_if_passenger_present:
        return Decision.deny(DENY_REASON_OCCUPIED, rule)

    return Decision.allow(rule)


class MountPolicyEvaluator:
    """Evaluator bound to its capabilities and a rule table source."""
    
    def __init__(
        self,
        rule_source: Callable[[], RuleTable],
        teammate_oracle: TeammateOracle,
        occupancy_reader: OccupancyReader,
        exemption_check: ExemptionCheck,
    ):
        self.logger = get_logger("mount_policy.engine")
        self.rule_source = rule_source
        self.teammate_oracle = teammate_oracle
        self.occupancy_reader = occupancy_reader
        self.exemption_check = exemption_check
    
    def evaluate(self, actor: Optional[str], vehicle: Optional[Vehicle],
                 occupancy_reader: Optional[OccupancyReader] = None) -> Decision:
        """Evaluate against the current rule table.

        ``occupancy_reader`` overrides the bound reader for a single call, for
        hosts that hand over a fresh snapshot with every request.
        """
        decision = evaluate(
            actor,
            vehicle,
            self.rule_source(),
            self.teammate_oracle,
            occupancy_reader or self.occupancy_reader,
            self.exemption_check,
        )
        
        self.logger.debug(
            "Mount evaluation result",
            actor_id=actor,
            vehicle_type=vehicle.vehicle_type if vehicle else None,
            allowed=decision.allowed,
            reason=decision.reason
        )
        
        return decision

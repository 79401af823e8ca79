"""
Holder for the active rule table.
"""

import threading
from typing import Any, Dict, Iterable, Optional

from shared.errors import ValidationError
from shared.logging import get_logger
from .engine import find_rule
from .models import RuleTable, VehicleRule


class RuleTableHolder:
    """Owns the current rule table and replaces it wholesale.

    Readers grab ``table`` once and work on that tuple; ``replace`` builds the
    new tuple completely before rebinding the attribute, so no reader ever
    sees a half-updated table.
    """
    
    def __init__(self, rules: Iterable[VehicleRule] = ()):
        self.logger = get_logger("mount_policy.rule_table")
        self._lock = threading.Lock()
        self._table: RuleTable = self._build(rules)
        self._generation = 0
    
    @property
    def table(self) -> RuleTable:
        return self._table
    
    @property
    def generation(self) -> int:
        """Number of replacements since construction."""
        return self._generation
    
    def __call__(self) -> RuleTable:
        return self._table
    
    def replace(self, rules: Iterable[VehicleRule]) -> RuleTable:
        """Swap in a new rule table."""
        table = self._build(rules)
        with self._lock:
            self._table = table
            self._generation += 1
        self.logger.info("Rule table replaced", rules=len(table), generation=self._generation)
        return table
    
    def find_rule(self, vehicle_type: str) -> Optional[VehicleRule]:
        return find_rule(self._table, vehicle_type)
    
    def stats(self) -> Dict[str, Any]:
        table = self._table
        return {
            "total_rules": len(table),
            "generation": self._generation,
            "vehicle_types": [rule.vehicle_type_match for rule in table],
        }
    
    @staticmethod
    def _build(rules: Iterable[VehicleRule]) -> RuleTable:
        table = tuple(rules)
        for position, rule in enumerate(table):
            if not isinstance(rule, VehicleRule):
                raise ValidationError("Rule table entries must be VehicleRule", {"position": position})
            if not rule.vehicle_type_match:
                raise ValidationError("Empty vehicle type match", {"position": position})
        return table

"""
Host-facing mount hook.
"""

import time
from typing import Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .capabilities import OccupancyReader
from .lang.messages import ActorNotifier, Lang
from .rules.engine import MountPolicyEvaluator
from .rules.models import Decision, Mountable


class MountGate:
    """Called by the host before an actor is attached to a mount point."""
    
    def __init__(
        self,
        evaluator: MountPolicyEvaluator,
        notifier: Optional[ActorNotifier] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.logger = get_logger("mount_policy.gate")
        self.evaluator = evaluator
        self.notifier = notifier
        self.metrics = metrics
    
    def can_mount(self, actor_id: Optional[str], mountable: Optional[Mountable],
                  occupancy_reader: Optional[OccupancyReader] = None) -> Decision:
        """Return the decision for this mount attempt, notifying the actor on denial."""
        if not actor_id or mountable is None or mountable.vehicle is None:
            return Decision.allow()
        
        start_time = time.time()
        decision = self.evaluator.evaluate(actor_id, mountable.vehicle, occupancy_reader)
        duration = time.time() - start_time
        
        if self.metrics is not None:
            self.metrics.increment_counter(
                "mount_checks_total", decision="allow" if decision.allowed else "deny"
            )
            self.metrics.observe_histogram("mount_check_duration_seconds", duration)
        
        if decision.denied:
            self.logger.info(
                "Mount denied",
                actor_id=actor_id,
                mountable_id=mountable.mountable_id,
                vehicle_id=mountable.vehicle.vehicle_id,
                vehicle_type=mountable.vehicle.vehicle_type,
                reason=decision.reason
            )
            if self.notifier is not None:
                self.notifier.notify(actor_id, Lang.CANNOT_MOUNT_VEHICLE)
        
        return decision

"""
Mount Policy service.
"""

import os
from typing import Dict

from shared.base_service import BaseService, SERVICE_VERSION
from shared.logging import set_actor_context

from .hooks import MountGate
from .lang.messages import Lang, create_message_catalog
from .occupancy import EMPTY_OCCUPANCY, SnapshotOccupancyReader
from .permissions import create_permission_registry
from .persistence.json_store import JsonRuleStore
from .rules.engine import MountPolicyEvaluator
from .rules.models import (
    GrantRequest, MountCheckRequest, MountCheckResponse, Mountable,
    RuleTableReplaceRequest, RuleTableResponse, StatsResponse,
    TeamUpdateRequest, VehicleRuleModel,
)
from .rules.registry import RuleTableHolder
from .teams import TeamRegistry


class MountPolicyService(BaseService):
    """Mount policy service implementation."""
    
    def __init__(self):
        super().__init__("mount_policy", 8020)
        
        # Rule table
        self.store = JsonRuleStore(self.config.rules_file)
        self.rule_table = RuleTableHolder(self.store.load())
        self.metrics.set_gauge("rule_table_size", len(self.rule_table.table))
        
        # Host capabilities
        self.teams = TeamRegistry()
        self.permissions = create_permission_registry()
        self.catalog = create_message_catalog(self.config.default_language)
        
        self.evaluator = MountPolicyEvaluator(
            rule_source=self.rule_table,
            teammate_oracle=self.teams.are_teammates,
            occupancy_reader=EMPTY_OCCUPANCY,
            exemption_check=self.permissions.exemption_check(),
        )
        self.gate = MountGate(
            self.evaluator,
            metrics=self.metrics if self.config.enable_metrics else None
        )
        
        self._setup_mount_routes()
        
        self.logger.info("Mount policy service initialized", rules=len(self.rule_table.table))
    
    def _setup_mount_routes(self):
        """Set up mount-policy-specific routes."""
        
        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "mount_policy",
                "message": "Mount Policy Service - one occupant per vehicle unless teammates",
                "version": SERVICE_VERSION,
                "capabilities": ["mount_check", "rule_reload", "teams", "permissions"]
            }
        
        @self.app.post("/mount/check", response_model=MountCheckResponse)
        async def check_mount(request: MountCheckRequest):
            """Decide whether an actor may mount a mount point."""
            set_actor_context(request.actor_id)
            
            snapshot = request.to_mount_request()
            mountable = Mountable(
                mountable_id=request.mountable_id,
                vehicle=snapshot.vehicle if snapshot else None
            )
            reader = SnapshotOccupancyReader(snapshot) if snapshot else None
            
            decision = self.gate.can_mount(request.actor_id, mountable, reader)
            
            message = None
            if decision.denied and self.config.notify_on_deny:
                message = self.catalog.get_message(Lang.CANNOT_MOUNT_VEHICLE, request.language)
            
            return MountCheckResponse(
                allowed=decision.allowed,
                reason=decision.reason,
                message=message,
                matched_rule=VehicleRuleModel.from_rule(decision.matched_rule) if decision.matched_rule else None
            )
        
        @self.app.get("/mount/rules", response_model=RuleTableResponse)
        async def get_rules():
            """Get the active rule table in evaluation order."""
            table = self.rule_table.table
            return RuleTableResponse(
                rules=[VehicleRuleModel.from_rule(rule) for rule in table],
                total=len(table)
            )
        
        @self.app.put("/mount/rules", response_model=RuleTableResponse)
        async def replace_rules(request: RuleTableReplaceRequest):
            """Replace the whole rule table and persist it."""
            rules = [model.to_rule() for model in request.rules]
            self.store.save(rules)
            table = self.rule_table.replace(rules)
            self.metrics.increment_counter("rule_reloads_total", status="replaced")
            self.metrics.set_gauge("rule_table_size", len(table))
            return RuleTableResponse(
                rules=[VehicleRuleModel.from_rule(rule) for rule in table],
                total=len(table)
            )
        
        @self.app.post("/mount/rules/reload", response_model=RuleTableResponse)
        async def reload_rules():
            """Reload the rule table from storage."""
            table = self.rule_table.replace(self.store.load())
            self.metrics.increment_counter("rule_reloads_total", status="reloaded")
            self.metrics.set_gauge("rule_table_size", len(table))
            return RuleTableResponse(
                rules=[VehicleRuleModel.from_rule(rule) for rule in table],
                total=len(table)
            )
        
        @self.app.put("/mount/teams/{team_id}")
        async def set_team(team_id: str, request: TeamUpdateRequest):
            """Create or replace a team."""
            members = self.teams.set_team(team_id, request.members)
            return {"team_id": team_id, "members": sorted(members)}
        
        @self.app.delete("/mount/teams/{team_id}")
        async def delete_team(team_id: str):
            """Disband a team."""
            self.teams.remove_team(team_id)
            return {"message": "Team disbanded", "team_id": team_id}
        
        @self.app.post("/mount/permissions/grants")
        async def grant_permission(request: GrantRequest):
            """Grant a registered permission to an actor."""
            self.permissions.grant(request.actor_id, request.permission)
            return {"actor_id": request.actor_id, "permission": request.permission, "granted": True}
        
        @self.app.delete("/mount/permissions/grants/{actor_id}/{permission}")
        async def revoke_permission(actor_id: str, permission: str):
            """Revoke a permission from an actor."""
            self.permissions.revoke(actor_id, permission)
            return {"actor_id": actor_id, "permission": permission, "granted": False}
        
        @self.app.get("/mount/stats", response_model=StatsResponse)
        async def get_stats():
            """Get rule table and registry statistics."""
            return StatsResponse(
                rule_table=self.rule_table.stats(),
                teams=self.teams.stats(),
                permissions=self.permissions.stats()
            )
    
    async def _check_dependencies(self) -> Dict[str, str]:
        """Check that the rule file is present."""
        return {
            "rule_store": "ok" if os.path.exists(self.store.path) else "missing"
        }


def create_app():
    """Create mount policy service application."""
    service = MountPolicyService()
    return service.app


if __name__ == "__main__":
    service = MountPolicyService()
    service.run()

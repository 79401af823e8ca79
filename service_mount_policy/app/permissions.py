"""
In-process permission registry backing the exemption check.
"""

import threading
from typing import Any, Dict, Set

from shared.errors import NotFoundError, ValidationError
from shared.logging import get_logger
from .capabilities import ExemptionCheck


IGNORE_PERMISSION = "oneseatvehicle.ignore"


class PermissionRegistry:
    """Registered permission names and the actors holding them."""
    
    def __init__(self):
        self.logger = get_logger("mount_policy.permissions")
        self._lock = threading.Lock()
        self._permissions: Set[str] = set()
        self._grants: Dict[str, Set[str]] = {}
    
    def register_permission(self, permission: str) -> None:
        if not permission:
            raise ValidationError("Permission name must not be empty")
        with self._lock:
            self._permissions.add(permission.lower())
    
    def is_registered(self, permission: str) -> bool:
        return permission.lower() in self._permissions
    
    def grant(self, actor_id: str, permission: str) -> None:
        name = permission.lower()
        if name not in self._permissions:
            raise ValidationError("Unknown permission", {"permission": permission})
        with self._lock:
            self._grants.setdefault(actor_id, set()).add(name)
        self.logger.info("Permission granted", actor_id=actor_id, permission=name)
    
    def revoke(self, actor_id: str, permission: str) -> None:
        name = permission.lower()
        with self._lock:
            held = self._grants.get(actor_id)
            if not held or name not in held:
                raise NotFoundError("Permission not granted", {"actor_id": actor_id, "permission": permission})
            held.discard(name)
            if not held:
                del self._grants[actor_id]
        self.logger.info("Permission revoked", actor_id=actor_id, permission=name)
    
    def has_permission(self, actor_id: str, permission: str) -> bool:
        return permission.lower() in self._grants.get(actor_id, ())
    
    def exemption_check(self, permission: str = IGNORE_PERMISSION) -> ExemptionCheck:
        """Exemption check answering whether an actor holds ``permission``."""
        def check(actor_id: str) -> bool:
            return self.has_permission(actor_id, permission)
        return check
    
    def stats(self) -> Dict[str, Any]:
        return {
            "registered": sorted(self._permissions),
            "actors_with_grants": len(self._grants),
        }


def create_permission_registry() -> PermissionRegistry:
    """Registry with the mount-gate permissions registered."""
    registry = PermissionRegistry()
    registry.register_permission(IGNORE_PERMISSION)
    return registry

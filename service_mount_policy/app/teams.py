"""
In-process team registry used as the teammate oracle.
"""

import threading
from typing import Any, Dict, FrozenSet, Iterable, Optional

from shared.errors import NotFoundError, ValidationError
from shared.logging import get_logger


class TeamRegistry:
    """Team membership; an actor belongs to at most one team."""
    
    def __init__(self):
        self.logger = get_logger("mount_policy.teams")
        self._lock = threading.Lock()
        self._teams: Dict[str, FrozenSet[str]] = {}
        self._team_of: Dict[str, str] = {}
    
    def set_team(self, team_id: str, members: Iterable[str]) -> FrozenSet[str]:
        """Create or replace a team. Members leave whatever team they were in."""
        roster = frozenset(members)
        if not roster:
            raise ValidationError("Team must have at least one member", {"team_id": team_id})
        
        with self._lock:
            for member in self._teams.get(team_id, frozenset()):
                self._team_of.pop(member, None)
            
            for member in roster:
                previous = self._team_of.get(member)
                if previous is not None and previous != team_id:
                    remaining = self._teams[previous] - {member}
                    if remaining:
                        self._teams[previous] = remaining
                    else:
                        del self._teams[previous]
                self._team_of[member] = team_id
            
            self._teams[team_id] = roster
        
        self.logger.info("Team updated", team_id=team_id, members=len(roster))
        return roster
    
    def remove_team(self, team_id: str) -> None:
        with self._lock:
            roster = self._teams.pop(team_id, None)
            if roster is None:
                raise NotFoundError("Team not found", {"team_id": team_id})
            for member in roster:
                self._team_of.pop(member, None)
        self.logger.info("Team disbanded", team_id=team_id)
    
    def find_team(self, actor_id: str) -> Optional[str]:
        return self._team_of.get(actor_id)
    
    def members(self, team_id: str) -> FrozenSet[str]:
        return self._teams.get(team_id, frozenset())
    
    def are_teammates(self, first_actor: str, second_actor: str) -> bool:
        team_id = self._team_of.get(first_actor)
        return team_id is not None and second_actor in self._teams.get(team_id, frozenset())
    
    def stats(self) -> Dict[str, Any]:
        return {
            "teams": len(self._teams),
            "members": len(self._team_of),
        }

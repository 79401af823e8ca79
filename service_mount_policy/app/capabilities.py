"""
Interfaces the mount gate consumes from its host.

Each capability is a narrow query; the gate never reaches into the host's
object model beyond these.
"""

from typing import Callable, Protocol, Sequence

from .rules.models import Vehicle


ExemptionCheck = Callable[[str], bool]
"""``(actor_id) -> bool``: the actor bypasses every mount restriction."""

TeammateOracle = Callable[[str, str], bool]
"""``(actor_a, actor_b) -> bool``: both actors are on the same team."""


class OccupancyReader(Protocol):
    """Reports who is currently mounted on a vehicle."""

    def has_driver(self, vehicle: Vehicle) -> bool:
        ...

    def has_passenger(self, vehicle: Vehicle) -> bool:
        ...

    def occupants(self, vehicle: Vehicle) -> Sequence[str]:
        ...


class NotificationSink(Protocol):
    """Delivers an already localized message to an actor."""

    def send(self, actor_id: str, message: str) -> None:
        ...

"""
Unit tests for the mount gate.
"""

import pytest
from unittest.mock import MagicMock

from service_mount_policy.app.hooks import MountGate
from service_mount_policy.app.lang.messages import ActorNotifier, Lang, create_message_catalog
from service_mount_policy.app.occupancy import SnapshotOccupancyReader
from service_mount_policy.app.rules.engine import MountPolicyEvaluator
from service_mount_policy.app.rules.models import Mountable, MountRequest, VehicleRule
from service_mount_policy.app.rules.registry import RuleTableHolder
from shared.metrics import MetricsCollector


class TestMountGate:
    """Test cases for MountGate."""

    @pytest.fixture
    def snapshot(self):
        return MountRequest("actor-2", "veh-1", "minicopter.entity.deployed", driver_id="actor-1")

    @pytest.fixture
    def sink(self):
        return MagicMock()

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("mount_policy")

    @pytest.fixture
    def gate(self, snapshot, sink, metrics):
        evaluator = MountPolicyEvaluator(
            rule_source=RuleTableHolder([VehicleRule("minicopter.entity")]),
            teammate_oracle=lambda first, second: False,
            occupancy_reader=SnapshotOccupancyReader(snapshot),
            exemption_check=lambda actor: False
        )
        notifier = ActorNotifier(create_message_catalog(), sink)
        return MountGate(evaluator, notifier=notifier, metrics=metrics)

    def test_denial_notifies_actor(self, gate, snapshot, sink, metrics):
        """Test that a denied actor receives the occupied message."""
        decision = gate.can_mount("actor-2", Mountable("seat-1", snapshot.vehicle))

        assert decision.allowed is False
        sink.send.assert_called_once_with(
            "actor-2", "You cannot mount this vehicle as it already has an occupant."
        )
        assert metrics.registry.get_sample_value("mount_checks_total", {"decision": "deny"}) == 1.0

    def test_allowed_mount_sends_nothing(self, gate, sink, metrics):
        """Test that allowed mounts are silent."""
        empty = MountRequest("actor-2", "veh-5", "minicopter.entity")

        decision = gate.can_mount(
            "actor-2", Mountable("seat-5", empty.vehicle), SnapshotOccupancyReader(empty)
        )

        assert decision.allowed is True
        sink.send.assert_not_called()
        assert metrics.registry.get_sample_value("mount_checks_total", {"decision": "allow"}) == 1.0

    def test_mount_point_without_vehicle_is_not_evaluated(self, gate, sink, metrics):
        """Test that turrets and loose seats are ignored."""
        gate.evaluator = MagicMock()

        decision = gate.can_mount("actor-2", Mountable("turret-1"))

        assert decision.allowed is True
        gate.evaluator.evaluate.assert_not_called()
        sink.send.assert_not_called()

    @pytest.mark.parametrize("actor_id,mountable", [(None, Mountable("seat-1")), ("actor-2", None)])
    def test_missing_input_is_allowed(self, gate, actor_id, mountable):
        """Test that malformed hook input abstains."""
        assert gate.can_mount(actor_id, mountable).allowed is True

    def test_sink_failure_does_not_change_decision(self, gate, snapshot, sink):
        """Test that notification errors are non-fatal."""
        sink.send.side_effect = RuntimeError("gone")

        decision = gate.can_mount("actor-2", Mountable("seat-1", snapshot.vehicle))

        assert decision.allowed is False

    def test_gate_without_notifier_or_metrics(self, snapshot):
        """Test a bare gate."""
        evaluator = MountPolicyEvaluator(
            rule_source=lambda: (VehicleRule("minicopter.entity"),),
            teammate_oracle=lambda first, second: False,
            occupancy_reader=SnapshotOccupancyReader(snapshot),
            exemption_check=lambda actor: False
        )

        decision = MountGate(evaluator).can_mount("actor-2", Mountable("seat-1", snapshot.vehicle))

        assert decision.reason == "occupied"
        assert Lang.CANNOT_MOUNT_VEHICLE == "CannotMountVehicle"

"""
Unit tests for the Mount Policy service.
"""

import json
import pytest
from fastapi.testclient import TestClient

from service_mount_policy.app.main import MountPolicyService, create_app
from service_mount_policy.app.permissions import IGNORE_PERMISSION


class TestMountPolicyService:
    """Test cases for MountPolicyService."""

    @pytest.fixture
    def rules_file(self, tmp_path, monkeypatch):
        """Point the service at a temporary rule file."""
        path = tmp_path / "mount_policy.json"
        monkeypatch.setenv("MOUNT_RULES_FILE", str(path))
        return path

    @pytest.fixture
    def service(self, rules_file):
        return MountPolicyService()

    @pytest.fixture
    def client(self, service):
        return TestClient(service.app)

    @pytest.fixture
    def occupied_minicopter(self):
        """Mount check against a minicopter with a driver."""
        return {
            "actor_id": "actor-2",
            "mountable_id": "seat-1",
            "vehicle": {
                "vehicle_id": "veh-1",
                "vehicle_type": "minicopter.entity.deployed",
                "driver_id": "actor-1",
                "passenger_ids": []
            }
        }

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "mount_policy"

    def test_health_endpoint(self, client):
        """Test health endpoint reports the rule store."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["dependencies"] == {"rule_store": "ok"}

    def test_startup_writes_default_rules(self, service, rules_file):
        """Test that the service persists defaults on first start."""
        assert json.loads(rules_file.read_text())["Version"] == 1
        assert len(service.rule_table.table) == 3

    def test_check_denies_occupied_vehicle(self, client, occupied_minicopter):
        """Test denial with the localized message."""
        response = client.post("/mount/check", json=occupied_minicopter)

        assert response.status_code == 200
        data = response.json()
        assert data["allowed"] is False
        assert data["reason"] == "occupied"
        assert data["message"] == "You cannot mount this vehicle as it already has an occupant."
        assert data["matched_rule"]["vehicle_type_match"] == "minicopter.entity"
        assert response.headers["X-Request-ID"]

    def test_check_allows_teammate(self, client, occupied_minicopter):
        """Test that team membership pushed by the host is honored."""
        response = client.put("/mount/teams/team-1", json={"members": ["actor-1", "actor-2"]})
        assert response.status_code == 200

        response = client.post("/mount/check", json=occupied_minicopter)

        assert response.json()["allowed"] is True
        assert response.json()["message"] is None

    def test_check_allows_exempt_actor(self, client, occupied_minicopter):
        """Test the bypass permission."""
        response = client.post(
            "/mount/permissions/grants",
            json={"actor_id": "actor-2", "permission": IGNORE_PERMISSION}
        )
        assert response.status_code == 200

        assert client.post("/mount/check", json=occupied_minicopter).json()["allowed"] is True

        response = client.delete(f"/mount/permissions/grants/actor-2/{IGNORE_PERMISSION}")
        assert response.status_code == 200
        assert client.post("/mount/check", json=occupied_minicopter).json()["allowed"] is False

    def test_check_without_vehicle(self, client):
        """Test mount points that are not part of a vehicle."""
        response = client.post("/mount/check", json={"actor_id": "actor-2", "mountable_id": "turret-1"})

        assert response.status_code == 200
        assert response.json()["allowed"] is True
        assert response.json()["matched_rule"] is None

    def test_check_records_metrics(self, client, service, occupied_minicopter):
        """Test mount check counters."""
        client.post("/mount/check", json=occupied_minicopter)

        assert service.metrics.registry.get_sample_value(
            "mount_checks_total", {"decision": "deny"}
        ) == 1.0
        assert "mount_checks_total" in client.get("/metrics").text

    def test_get_rules(self, client):
        """Test listing the rule table in order."""
        response = client.get("/mount/rules")

        data = response.json()
        assert data["total"] == 3
        assert [rule["vehicle_type_match"] for rule in data["rules"]] == [
            "minicopter.entity", "attackhelicopter.entity", "rowboat"
        ]

    def test_replace_rules_persists(self, client, rules_file, occupied_minicopter):
        """Test wholesale replacement of the rule table."""
        response = client.put("/mount/rules", json={"rules": [{"vehicle_type_match": "rowboat"}]})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        saved = json.loads(rules_file.read_text())
        assert [v["Vehicle Short Prefab Name"] for v in saved["Vehicles"]] == ["rowboat"]
        assert client.post("/mount/check", json=occupied_minicopter).json()["allowed"] is True

    def test_replace_rules_rejects_empty_match(self, client):
        """Test validation of replacement tables."""
        response = client.put("/mount/rules", json={"rules": [{"vehicle_type_match": ""}]})

        assert response.status_code == 422
        assert client.get("/mount/rules").json()["total"] == 3

    def test_reload_picks_up_file_changes(self, client, rules_file):
        """Test reloading from storage."""
        rules_file.write_text(json.dumps({
            "Version": 1,
            "Vehicles": [{"Vehicle Short Prefab Name": "kayak", "Allow Teammates To Mount": False}]
        }))

        response = client.post("/mount/rules/reload")

        assert response.status_code == 200
        rules = response.json()["rules"]
        assert rules == [{
            "vehicle_type_match": "kayak",
            "prevent_if_driver_present": True,
            "prevent_if_passenger_present": True,
            "allow_teammates": False
        }]

    def test_delete_unknown_team(self, client):
        """Test disbanding a team that does not exist."""
        response = client.delete("/mount/teams/ghosts")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_grant_unknown_permission(self, client):
        """Test granting an unregistered permission."""
        response = client.post(
            "/mount/permissions/grants",
            json={"actor_id": "actor-2", "permission": "oneseatvehicle.fly"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_stats(self, client):
        """Test statistics endpoint."""
        client.put("/mount/teams/team-1", json={"members": ["actor-1"]})

        data = client.get("/mount/stats").json()

        assert data["rule_table"]["total_rules"] == 3
        assert data["teams"] == {"teams": 1, "members": 1}
        assert IGNORE_PERMISSION in data["permissions"]["registered"]

    def test_disabled_metrics_skip_mount_counters(self, rules_file, monkeypatch, occupied_minicopter):
        """Test that MOUNT_ENABLE_METRICS=false stops mount check metrics."""
        monkeypatch.setenv("MOUNT_ENABLE_METRICS", "false")
        service = MountPolicyService()
        client = TestClient(service.app)

        response = client.post("/mount/check", json=occupied_minicopter)

        assert response.json()["allowed"] is False
        assert service.gate.metrics is None
        assert service.metrics.registry.get_sample_value(
            "mount_checks_total", {"decision": "deny"}
        ) is None

    def test_create_app(self, rules_file):
        """Test app factory."""
        app = create_app()

        assert app.title == "Mount Policy Service"

"""
JSON file persistence for the mount rule table.
"""

import json
import os
import tempfile
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from shared.errors import ConfigurationError
from shared.logging import get_logger
from ..rules.models import StoredConfiguration, StoredVehicleRule, VehicleRule


CURRENT_SCHEMA_VERSION = 1

DEFAULT_RULES: Tuple[VehicleRule, ...] = (
    VehicleRule("minicopter.entity", True, True, True),
    VehicleRule("attackhelicopter.entity", True, True, True),
    VehicleRule("rowboat", True, True, True),
)


def default_document() -> Dict[str, Any]:
    """Configuration document holding the default rule table."""
    return _dump(DEFAULT_RULES)


def _dump(rules) -> Dict[str, Any]:
    config = StoredConfiguration(
        version=CURRENT_SCHEMA_VERSION,
        vehicles=[StoredVehicleRule.from_rule(rule) for rule in rules],
    )
    return config.model_dump(by_alias=True)


def schema_version(document: Dict[str, Any]) -> int:
    """Schema version of a raw document.

    Plugin releases stored their own semantic version in ``Version``; any
    release from 1.0.0 on wrote the schema now numbered 1.
    """
    version = document.get("Version")
    if isinstance(version, bool):
        return 0
    if isinstance(version, int):
        return max(version, 0)
    if isinstance(version, str):
        try:
            parts = [int(part) for part in version.strip().split(".")]
        except ValueError:
            return 0
        return 1 if parts >= [1, 0, 0] else 0
    return 0


def _reset_to_defaults(document: Dict[str, Any]) -> Dict[str, Any]:
    return default_document()


# from-version -> migration producing a document of from-version + 1
MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _reset_to_defaults,
}


def migrate(document: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Bring a raw document up to ``CURRENT_SCHEMA_VERSION``.

    Returns the migrated document and whether anything changed.
    """
    version = schema_version(document)
    if version >= CURRENT_SCHEMA_VERSION:
        return dict(document, Version=version), False
    
    migrated = dict(document)
    while version < CURRENT_SCHEMA_VERSION:
        migrated = MIGRATIONS[version](migrated)
        version += 1
        migrated["Version"] = version
    return migrated, True


class JsonRuleStore:
    """Reads and writes the rule configuration file."""
    
    def __init__(self, path: str):
        self.path = path
        self.logger = get_logger("mount_policy.persistence.json")
    
    def load(self) -> List[VehicleRule]:
        """Load the rule table, falling back to defaults on unusable content.

        The file is always rewritten in the current schema afterwards.
        """
        document = self._read()
        if document is None:
            return self._fallback()
        
        previous = document.get("Version")
        document, migrated = migrate(document)
        if migrated:
            self.logger.warning(
                "Config changes detected, updated rule configuration",
                path=self.path,
                from_version=previous,
                to_version=CURRENT_SCHEMA_VERSION
            )
        
        try:
            config = StoredConfiguration.model_validate(document)
        except SchemaError as e:
            self.logger.warning("Invalid rule configuration, using defaults", path=self.path, error=str(e))
            return self._fallback()
        
        rules = [stored.to_rule() for stored in config.vehicles]
        self._save_quietly(rules)
        self.logger.info("Rule configuration loaded", path=self.path, rules=len(rules))
        return rules
    
    def save(self, rules) -> None:
        """Persist ``rules`` in the current schema, replacing the file atomically."""
        document = _dump(rules)
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".rules-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise ConfigurationError("Failed to write rule configuration", {"path": self.path, "error": str(e)})
    
    def _read(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            self.logger.info("No rule configuration found, creating defaults", path=self.path)
            return None
        
        try:
            with open(self.path, encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, ValueError) as e:
            self.logger.warning("Unreadable rule configuration, using defaults", path=self.path, error=str(e))
            return None
        
        if not isinstance(document, dict):
            self.logger.warning("Rule configuration is not an object, using defaults", path=self.path)
            return None
        
        return document
    
    def _fallback(self) -> List[VehicleRule]:
        rules = list(DEFAULT_RULES)
        self._save_quietly(rules)
        return rules
    
    def _save_quietly(self, rules) -> None:
        try:
            self.save(rules)
        except ConfigurationError as e:
            self.logger.error("Could not persist rule configuration", **e.details)

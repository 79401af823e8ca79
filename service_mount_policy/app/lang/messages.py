"""
Localized actor-facing messages.
"""

import threading
from typing import Any, Callable, Dict, Optional

from shared.logging import get_logger
from ..capabilities import NotificationSink


class Lang:
    """Message keys."""
    CANNOT_MOUNT_VEHICLE = "CannotMountVehicle"


DEFAULT_LANGUAGE = "en"

DEFAULT_MESSAGES: Dict[str, str] = {
    Lang.CANNOT_MOUNT_VEHICLE: "You cannot mount this vehicle as it already has an occupant.",
}


class MessageCatalog:
    """Message templates per language with fallback to the default language."""
    
    def __init__(self, default_language: str = DEFAULT_LANGUAGE):
        self.default_language = default_language
        self._lock = threading.Lock()
        self._messages: Dict[str, Dict[str, str]] = {}
    
    def register_messages(self, messages: Dict[str, str], language: str = DEFAULT_LANGUAGE) -> None:
        """Add templates for ``language``. Existing keys are kept."""
        with self._lock:
            catalog = self._messages.setdefault(language, {})
            for key, template in messages.items():
                catalog.setdefault(key, template)
    
    def get_message(self, key: str, language: Optional[str] = None, *args: Any) -> str:
        """Look up ``key``; unknown keys come back as the key itself."""
        template = None
        for lang in (language, self.default_language):
            if lang and key in self._messages.get(lang, {}):
                template = self._messages[lang][key]
                break
        
        if template is None:
            return key
        
        if args:
            return template.format(*args)
        return template
    
    @property
    def languages(self):
        return sorted(self._messages)


def create_message_catalog(default_language: str = DEFAULT_LANGUAGE) -> MessageCatalog:
    catalog = MessageCatalog(default_language)
    catalog.register_messages(DEFAULT_MESSAGES, DEFAULT_LANGUAGE)
    return catalog


class ActorNotifier:
    """Formats a message in the actor's language and hands it to a sink."""
    
    def __init__(
        self,
        catalog: MessageCatalog,
        sink: NotificationSink,
        language_resolver: Optional[Callable[[str], Optional[str]]] = None,
    ):
        self.logger = get_logger("mount_policy.notifier")
        self.catalog = catalog
        self.sink = sink
        self.language_resolver = language_resolver
    
    def notify(self, actor_id: str, key: str, *args: Any) -> bool:
        """Send a message; returns False when delivery failed."""
        try:
            language = self.language_resolver(actor_id) if self.language_resolver else None
            message = self.catalog.get_message(key, language, *args)
            self.sink.send(actor_id, message)
        except Exception as e:
            self.logger.warning("Failed to deliver message", actor_id=actor_id, key=key, error=str(e))
            return False
        return True

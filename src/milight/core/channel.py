"""Per-group event channel between controllers and their listeners."""

import logging

from milight.protocol import GROUPS, validate_group
from milight.protocols import LightChange, LightListener
from milight.utils import ObserverManager

logger = logging.getLogger(__name__)


class EventChannel:
    """
    Routes light events to the listeners of the group that raised them.

    Each group has its own listener list, so a listener subscribed to group 1
    never sees events of group 2. Delivery is synchronous on the publishing
    thread; listener exceptions are logged and do not reach the publisher.
    """

    def __init__(self):
        self._listeners: dict[int, ObserverManager[LightListener]] = {
            group: ObserverManager[LightListener](observer_type_name=f"group {group} light")
            for group in GROUPS
        }

    def subscribe(self, group: int, listener: LightListener) -> None:
        """Register listener for the events of group (idempotent)."""
        self._listeners[validate_group(group)].register(listener)

    def unsubscribe(self, group: int, listener: LightListener) -> None:
        """Remove listener from group."""
        self._listeners[validate_group(group)].unregister(listener)

    def publish(self, change: LightChange) -> None:
        """Deliver change to every listener of the group that raised it."""
        logger.debug(f"Group {change.group}: {change.event.name}")
        self._listeners[change.group].notify("on_light_event", change)

    def listener_count(self, group: int) -> int:
        return len(self._listeners[validate_group(group)])

    def clear(self) -> None:
        """Remove every listener of every group."""
        for manager in self._listeners.values():
            manager.clear()

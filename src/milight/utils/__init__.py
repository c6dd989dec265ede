"""Generic utility modules for milight.

- observer: thread-safe listener lists
- persistence: JSON load/save for Pydantic models
"""

from .observer import ObserverManager
from .persistence import PydanticPersistence

__all__ = ["ObserverManager", "PydanticPersistence"]

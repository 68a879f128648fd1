"""Manager modules for PetBudget integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager, get_event_signal
from .economy_manager import EconomyManager
from .gamification_manager import GamificationManager

__all__ = [
    "BaseManager",
    "EconomyManager",
    "GamificationManager",
    "get_event_signal",
]

"""Engine modules for PetBudget integration.

Contains pure computation engines:
- decay_engine: Time-based stat decay
- economy_engine: Coin arithmetic and ledger record construction
- pet_engine: Pet creation, normalization and derived views
- action_engine: Care actions and store purchases
- progression_engine: XP, age stages and evolution events
- quest_engine: Daily quests and the claim protocol
- badge_engine: Badge rule evaluation
- rewards_engine: Allowance, check-in, tasks and mini-game rewards
- ledger_engine: Merge, retention, sanitizing, reports and CSV export
"""

# Use relative imports within package to avoid mypy module resolution issues
from .action_engine import ActionEngine
from .badge_engine import BadgeEngine
from .decay_engine import DecayEngine
from .economy_engine import ActionResult, EconomyEngine, InsufficientFundsError
from .ledger_engine import LedgerEngine
from .pet_engine import PetEngine
from .progression_engine import EvolutionCheck, EvolutionEvent, ProgressionEngine
from .quest_engine import QuestClaim, QuestEngine
from .rewards_engine import RewardsEngine

__all__ = [
    "ActionEngine",
    "ActionResult",
    "BadgeEngine",
    "DecayEngine",
    "EconomyEngine",
    "EvolutionCheck",
    "EvolutionEvent",
    "InsufficientFundsError",
    "LedgerEngine",
    "PetEngine",
    "ProgressionEngine",
    "QuestClaim",
    "QuestEngine",
    "RewardsEngine",
]

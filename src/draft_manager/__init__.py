from src.draft_manager.draft_controller import DraftController
from src.draft_manager.draft_rules import DraftRules, ValidationError
from src.draft_manager.draft_state import (
    AuctionPick,
    DraftState,
    LeagueConfig,
    TeamRoster,
)
from src.draft_manager.inflation_history import InflationHistoryTracker
from src.draft_manager.state_persistence import StatePersistence

__all__ = [
    "AuctionPick",
    "DraftController",
    "DraftRules",
    "DraftState",
    "InflationHistoryTracker",
    "LeagueConfig",
    "StatePersistence",
    "TeamRoster",
    "ValidationError",
]

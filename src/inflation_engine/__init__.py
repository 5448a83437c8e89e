from src.inflation_engine.adjusted_values import (
    AdjustedValueInputs,
    calculate_adjusted_values,
    calculate_single_adjusted_value,
)
from src.inflation_engine.budget_depletion import calculate_budget_depletion_factor
from src.inflation_engine.engine import InflationEngine
from src.inflation_engine.inflation_calculator import (
    calculate_overall_inflation,
    calculate_position_inflation,
    calculate_tier_inflation,
)
from src.inflation_engine.integration import DraftStateProvider, InflationIntegration
from src.inflation_engine.models import (
    BudgetContext,
    BudgetDepletionResult,
    DraftedPlayer,
    InflationSnapshot,
    PlayerTier,
    Projection,
    RateHistoryEntry,
    TrendResult,
    create_default_inflation_state,
)
from src.inflation_engine.performance_logger import PerformanceLogEntry, PerformanceLogger
from src.inflation_engine.scheduler import DeferredScheduler, ThreadingScheduler
from src.inflation_engine.tier_classifier import assign_player_tier, get_percentile
from src.inflation_engine.trend_analyzer import calculate_inflation_trend

__all__ = [
    "AdjustedValueInputs",
    "BudgetContext",
    "BudgetDepletionResult",
    "DeferredScheduler",
    "DraftStateProvider",
    "DraftedPlayer",
    "InflationEngine",
    "InflationIntegration",
    "InflationSnapshot",
    "PerformanceLogEntry",
    "PerformanceLogger",
    "PlayerTier",
    "Projection",
    "RateHistoryEntry",
    "ThreadingScheduler",
    "TrendResult",
    "assign_player_tier",
    "calculate_adjusted_values",
    "calculate_budget_depletion_factor",
    "calculate_inflation_trend",
    "calculate_overall_inflation",
    "calculate_position_inflation",
    "calculate_single_adjusted_value",
    "calculate_tier_inflation",
    "create_default_inflation_state",
    "get_percentile",
]

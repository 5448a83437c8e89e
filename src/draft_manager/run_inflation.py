"""Recompute and report inflation for a saved auction draft.

Usage:
    python -m src.draft_manager.run_inflation <draft_id> [storage_dir]

Examples:
    python -m src.draft_manager.run_inflation 3f2c...
    python -m src.draft_manager.run_inflation 3f2c... /path/to/drafts
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

from src.draft_manager.config import PERFORMANCE_LOG_FILE
from src.draft_manager.inflation_history import InflationHistoryTracker
from src.draft_manager.state_persistence import StatePersistence
from src.inflation_engine.engine import InflationEngine
from src.inflation_engine.performance_logger import PerformanceLogger
from src.inflation_engine.performance_metrics import JsonLinesSink, summarize_performance
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_inflation(
    draft_id: str,
    storage_dir: Optional[Path] = None,
    performance_log: Optional[Path] = None,
) -> Dict:
    """Recalculate inflation for a saved draft and persist the result.

    Args:
        draft_id: UUID of the saved draft.
        storage_dir: Directory holding draft files.
            Defaults to ``data/drafts/``.
        performance_log: JSON-lines file for calculation timings.
            Defaults to ``data/performance/inflation_performance.jsonl``.

    Returns:
        Report dict with the overall rate, position and tier rates, the
        depletion multiplier, trend and performance summary.

    Raises:
        FileNotFoundError: If no readable draft exists for *draft_id*.
        RuntimeError: If the inflation calculation fails.
    """
    persistence = StatePersistence(storage_dir)
    draft = persistence.load_draft(draft_id)
    if draft is None:
        raise FileNotFoundError(f"No saved draft found for {draft_id}")

    sink = JsonLinesSink(performance_log or PERFORMANCE_LOG_FILE)
    perf_logger = PerformanceLogger(sink=sink)
    engine = InflationEngine(
        total_players=len(draft.player_pool),
        performance_logger=perf_logger,
        draft_id=draft_id,
    )

    _, history = persistence.load_inflation(draft_id, total_players=len(draft.player_pool))
    tracker = InflationHistoryTracker(pick_counter=lambda: draft.picks_made)
    tracker.load(history)
    engine.subscribe(tracker.on_snapshot)

    logger.info(
        "Recalculating inflation for draft %s (%d picks, %d players in pool)",
        draft_id, draft.picks_made, len(draft.player_pool),
    )
    snapshot = engine.update(draft.drafted_players(), draft.projections(), draft.budget_context())
    perf_logger.flush()

    if snapshot.error:
        raise RuntimeError(f"Inflation calculation failed: {snapshot.error}")

    persistence.save_inflation(draft_id, snapshot, tracker.entries)

    trend = tracker.trend(draft.picks_made)
    perf = summarize_performance(sink.read_entries())

    logger.info(
        "Overall inflation %.1f%%, depletion multiplier %.2f, trend %s (%+.1f pts over %d picks)",
        snapshot.overall_rate * 100,
        snapshot.budget_depletion_multiplier,
        trend.direction,
        trend.change,
        trend.pick_window,
    )

    return {
        "draft_id": draft_id,
        "picks_made": draft.picks_made,
        "overall_rate": snapshot.overall_rate,
        "position_rates": dict(snapshot.position_rates),
        "tier_rates": {tier.value: rate for tier, rate in snapshot.tier_rates.items()},
        "budget_depletion_multiplier": snapshot.budget_depletion_multiplier,
        "players_remaining": snapshot.players_remaining,
        "trend": {
            "direction": trend.direction,
            "change": trend.change,
            "pick_window": trend.pick_window,
        },
        "performance": {
            "median_latency": perf.median_latency,
            "p95_latency": perf.p95_latency,
            "p99_latency": perf.p99_latency,
            "total_calculations": perf.total_calculations,
        },
    }


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    draft_id = sys.argv[1]
    storage_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None

    try:
        report = run_inflation(draft_id, storage_dir)
    except Exception:
        logger.exception("Inflation report failed")
        sys.exit(1)

    print(f"Draft {report['draft_id']} after {report['picks_made']} picks")
    print(f"  Overall inflation: {report['overall_rate'] * 100:+.1f}%")
    print(
        "  By position: "
        + ", ".join(f"{pos}={rate * 100:+.1f}%" for pos, rate in report["position_rates"].items())
    )
    print(
        "  By tier: "
        + ", ".join(f"{tier}={rate * 100:+.1f}%" for tier, rate in report["tier_rates"].items())
    )
    print(f"  Budget depletion multiplier: {report['budget_depletion_multiplier']:.2f}")
    print(f"  Trend: {report['trend']['direction']} ({report['trend']['change']:+.1f} pts)")

"""Inflation engine - holds and recomputes the live inflation snapshot.

One :class:`InflationEngine` is created per draft session and handed to
whatever needs inflation data. Every :meth:`InflationEngine.update`
re-derives the whole snapshot from the full inputs it is given (never a
delta) and publishes it as a single replacement, so equal inputs always
produce equal rate maps and adjusted values.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from src.inflation_engine.adjusted_values import (
    AdjustedValueInputs,
    calculate_adjusted_values,
)
from src.inflation_engine.budget_depletion import (
    budget_depleted_fraction,
    calculate_from_context,
)
from src.inflation_engine.inflation_calculator import (
    calculate_overall_inflation,
    calculate_position_inflation,
    calculate_tier_inflation,
)
from src.inflation_engine.models import (
    BudgetContext,
    InflationSnapshot,
    PlayerTier,
    create_default_inflation_state,
    to_drafted_players,
    to_projections,
)
from src.inflation_engine.performance_logger import PerformanceLogger

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[InflationSnapshot], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InflationEngine:
    """Live inflation state for one auction draft.

    State machine: ``idle -> calculating -> idle`` on success, or
    ``idle -> calculating -> idle (error)`` when a calculation raises. A
    failed update keeps the previous snapshot and only fills ``error``.

    Args:
        total_players: Size of the player pool; used for the default state
            and by :meth:`reset_inflation`.
        performance_logger: Optional timing reporter. Its failures never
            reach the snapshot.
        draft_id: Attached to performance log entries for correlation.
    """

    def __init__(
        self,
        total_players: int = 0,
        performance_logger: Optional[PerformanceLogger] = None,
        draft_id: Optional[str] = None,
    ):
        self.total_players = total_players
        self.draft_id = draft_id
        self.performance_logger = performance_logger or PerformanceLogger()
        self._state = create_default_inflation_state(total_players)
        self._listeners: List[SnapshotListener] = []
        self._bind_calculations()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> InflationSnapshot:
        """The current snapshot. Never mutated; replaced on every change."""
        return self._state

    @property
    def is_calculating(self) -> bool:
        return self._state.is_calculating

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._state.last_updated

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def get_adjusted_value(self, player_id: str) -> int:
        """Adjusted value for *player_id*; 0 for unknown or drafted players."""
        return self._state.adjusted_values.get(player_id, 0)

    def get_position_rate(self, position: str) -> float:
        return self._state.position_rates.get(position, 0.0)

    def get_tier_rate(self, tier: PlayerTier) -> float:
        return self._state.tier_rates.get(tier, 0.0)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(
        self,
        drafted_players: Iterable,
        projections: Iterable,
        budget_context: Optional[BudgetContext] = None,
    ) -> InflationSnapshot:
        """Recompute every inflation figure from the full draft inputs.

        Args:
            drafted_players: Every player bought so far (``DraftedPlayer``
                or dict records).
            projections: The entire projection pool, drafted and undrafted
                (``Projection`` or dict records).
            budget_context: League budget snapshot. Without it the
                depletion multiplier is a neutral 1.0.

        Returns:
            The snapshot published by this call. Never raises; failures are
            reported through ``error``.
        """
        calculating = replace(self._state, is_calculating=True, error=None)
        self._publish(calculating)

        try:
            snapshot = self._derive(drafted_players, projections, budget_context)
        except Exception as exc:
            logger.exception("Inflation calculation failed")
            self._publish(
                replace(
                    calculating,
                    is_calculating=False,
                    error=str(exc) or "Inflation calculation failed",
                )
            )
        else:
            logger.debug(
                "Inflation updated: overall=%.4f, %d players remaining",
                snapshot.overall_rate,
                snapshot.players_remaining,
            )
            self._publish(snapshot)

        return self._state

    def update_budget_depletion(self, budget_context: BudgetContext) -> InflationSnapshot:
        """Recompute only the budget fields; rate maps stay untouched."""
        try:
            depletion = self._budget_depletion(budget_context)
            depleted = budget_depleted_fraction(budget_context)
        except Exception as exc:
            logger.exception("Budget depletion calculation failed")
            self._publish(
                replace(
                    self._state,
                    error=str(exc) or "Budget depletion calculation failed",
                )
            )
        else:
            self._publish(
                replace(
                    self._state,
                    budget_depleted=depleted,
                    budget_depletion=depletion,
                    last_updated=_utcnow(),
                )
            )
        return self._state

    def reset_inflation(self) -> InflationSnapshot:
        """Replace the snapshot with the zeroed default for this pool size."""
        self._publish(create_default_inflation_state(self.total_players))
        logger.info("Inflation state reset (%d players)", self.total_players)
        return self._state

    reset = reset_inflation

    def restore(self, snapshot: InflationSnapshot) -> InflationSnapshot:
        """Publish a previously saved snapshot, e.g. after a restart."""
        self._publish(replace(snapshot, is_calculating=False))
        return self._state

    def clear_error(self) -> None:
        if self._state.error is not None:
            self._publish(replace(self._state, error=None))

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with every published snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _bind_calculations(self):
        """Wrap each calculation with the performance logger."""
        perf = self.performance_logger

        def drafted_count(drafted, projections):
            return len(drafted)

        def draft_id(*args, **kwargs):
            return self.draft_id

        self._overall = perf.wrap(
            calculate_overall_inflation, "basic",
            get_player_count=drafted_count, get_draft_id=draft_id,
        )
        self._position = perf.wrap(
            calculate_position_inflation, "position",
            get_player_count=drafted_count, get_draft_id=draft_id,
        )
        self._tier = perf.wrap(
            calculate_tier_inflation, "tier",
            get_player_count=drafted_count, get_draft_id=draft_id,
        )
        self._budget_depletion = perf.wrap(
            calculate_from_context, "budget_depletion", get_draft_id=draft_id,
        )

    def _derive(
        self,
        drafted_players: Iterable,
        projections: Iterable,
        budget_context: Optional[BudgetContext],
    ) -> InflationSnapshot:
        drafted = to_drafted_players(drafted_players)
        pool = to_projections(projections)

        overall_rate = self._overall(drafted, pool)
        position_rates = self._position(drafted, pool)
        tier_rates = self._tier(drafted, pool)

        budget_depletion = None
        budget_depleted = 0.0
        if budget_context is not None:
            budget_depletion = self._budget_depletion(budget_context)
            budget_depleted = budget_depleted_fraction(budget_context)

        drafted_ids = {p.player_id for p in drafted}
        undrafted = [p for p in pool if p.player_id not in drafted_ids]

        adjusted_values: Dict[str, int] = calculate_adjusted_values(
            undrafted,
            AdjustedValueInputs(
                position_rates=position_rates,
                tier_rates=tier_rates,
                budget_depletion_multiplier=(
                    budget_depletion.multiplier if budget_depletion else 1.0
                ),
            ),
        )

        return InflationSnapshot(
            overall_rate=overall_rate,
            position_rates=position_rates,
            tier_rates=tier_rates,
            budget_depleted=budget_depleted,
            budget_depletion=budget_depletion,
            players_remaining=len(undrafted),
            adjusted_values=adjusted_values,
            is_calculating=False,
            last_updated=_utcnow(),
            error=None,
        )

    def _publish(self, snapshot: InflationSnapshot) -> None:
        self._state = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Inflation snapshot listener failed")

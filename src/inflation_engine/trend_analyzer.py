"""Inflation trend indicators.

Compares the latest overall rate with the rate from ``window_size`` picks
earlier to say whether inflation is heating up, cooling down or stable.

History rates are in percentage points (12.5 means 12.5%), unlike the
engine's decimal rates; callers convert before recording history.
"""

from typing import Sequence

from src.inflation_engine.config import DEFAULT_TREND_WINDOW, TREND_THRESHOLD
from src.inflation_engine.models import RateHistoryEntry, TrendResult

HEATING = "heating"
COOLING = "cooling"
STABLE = "stable"

_ICONS = {HEATING: "trending-up", COOLING: "trending-down", STABLE: "minus"}
_COLORS = {HEATING: "text-orange-500", COOLING: "text-blue-500", STABLE: "text-slate-400"}
_LABELS = {HEATING: "Heating", COOLING: "Cooling", STABLE: "Stable"}


def calculate_inflation_trend(
    history: Sequence[RateHistoryEntry],
    current_pick: int,
    window_size: int = DEFAULT_TREND_WINDOW,
) -> TrendResult:
    """Trend of the overall rate over the last *window_size* picks.

    The baseline is the entry recorded exactly ``window_size`` picks ago,
    else the closest earlier entry, else the first entry. ``pick_window``
    reports the distance actually used.

    Example::

        history = [(5, 5.0), (10, 6.0), (15, 7.5)]
        calculate_inflation_trend(history, 15)
        # TrendResult(direction="heating", change=2.5, pick_window=10)
    """
    if len(history) < 2 or current_pick < window_size:
        return TrendResult(direction=STABLE, change=0, pick_window=current_pick)

    current_rate = history[-1].rate
    target_pick = current_pick - window_size

    previous = next((e for e in history if e.pick_number == target_pick), None)
    if previous is None:
        earlier = [e for e in history if e.pick_number <= target_pick]
        if earlier:
            previous = earlier[-1]
    if previous is None:
        previous = history[0]

    change = current_rate - previous.rate

    direction = STABLE
    if change >= TREND_THRESHOLD:
        direction = HEATING
    elif change <= -TREND_THRESHOLD:
        direction = COOLING

    return TrendResult(
        direction=direction,
        change=change,
        pick_window=current_pick - previous.pick_number,
    )


def get_trend_icon(direction: str) -> str:
    return _ICONS[direction]


def get_trend_color(direction: str) -> str:
    return _COLORS[direction]


def get_trend_label(direction: str) -> str:
    return _LABELS[direction]


def format_trend_tooltip(trend: TrendResult) -> str:
    """Sentence describing the change, e.g.
    ``"Inflation has increased 3.5% in the last 10 picks"``."""
    if trend.pick_window < DEFAULT_TREND_WINDOW:
        return "Not enough draft history to calculate trend"

    change_text = f"{abs(trend.change):.1f}"

    if trend.direction == HEATING:
        return f"Inflation has increased {change_text}% in the last {trend.pick_window} picks"
    if trend.direction == COOLING:
        return f"Inflation has decreased {change_text}% in the last {trend.pick_window} picks"
    return (
        f"Inflation has changed by {change_text}% "
        f"in the last {trend.pick_window} picks (stable)"
    )

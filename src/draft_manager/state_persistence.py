"""State persistence - save and load auction drafts and inflation state as JSON."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from src.draft_manager.config import DRAFTS_DIR
from src.draft_manager.draft_state import AuctionPick, DraftState, LeagueConfig, TeamRoster
from src.inflation_engine.models import (
    InflationSnapshot,
    PlayerTier,
    Projection,
    RateHistoryEntry,
    create_default_inflation_state,
    create_default_position_rates,
    create_default_tier_rates,
    parse_tier,
)

logger = logging.getLogger(__name__)


class StatePersistence:
    """Handles saving and loading draft and inflation state to/from JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or DRAFTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def save_draft(self, draft_state: DraftState) -> Path:
        """Save draft state to JSON file.

        Args:
            draft_state: The complete draft state to persist.

        Returns:
            Path to the saved file.
        """
        filepath = self._draft_path(draft_state.draft_id)
        self._write_json(filepath, self._draft_state_to_dict(draft_state))

        logger.info(
            "Saved draft %s (%d picks, $%d spent) to %s",
            draft_state.draft_id,
            draft_state.picks_made,
            draft_state.total_spent(),
            filepath,
        )
        return filepath

    def load_draft(self, draft_id: str) -> Optional[DraftState]:
        """Load draft state from JSON file.

        Args:
            draft_id: UUID of the draft to load.

        Returns:
            DraftState if found and readable, None otherwise.
        """
        data = self._read_json(self._draft_path(draft_id))
        if data is None:
            return None

        try:
            state = self._dict_to_draft_state(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed draft file for %s: %s", draft_id, e)
            return None

        logger.info("Loaded draft %s (%d picks)", draft_id, state.picks_made)
        return state

    def list_saved_drafts(self) -> List[Dict]:
        """List all saved drafts with metadata.

        Returns:
            List of dicts with draft_id, start_time, is_complete,
            picks_made and league_size. Sorted by start_time descending
            (most recent first).
        """
        drafts = []

        for filepath in self.storage_dir.glob("draft_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                drafts.append(
                    {
                        "draft_id": data["draft_id"],
                        "start_time": data["draft_start_time"],
                        "is_complete": data.get("is_complete", False),
                        "picks_made": len(data.get("picks", [])),
                        "league_size": data.get("league_config", {}).get("league_size", 0),
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError, AttributeError, TypeError) as e:
                logger.warning("Skipping corrupt draft file %s: %s", filepath, e)
                continue

        return sorted(drafts, key=lambda x: x["start_time"], reverse=True)

    def delete_draft(self, draft_id: str) -> bool:
        """Delete a saved draft and its inflation state.

        Returns:
            True if the draft file was deleted, False if not found.
        """
        filepath = self._draft_path(draft_id)
        if not filepath.exists():
            return False

        filepath.unlink()
        inflation_path = self._inflation_path(draft_id)
        if inflation_path.exists():
            inflation_path.unlink()

        logger.info("Deleted draft %s", draft_id)
        return True

    # ------------------------------------------------------------------
    # Inflation state
    # ------------------------------------------------------------------

    def save_inflation(
        self,
        draft_id: str,
        snapshot: InflationSnapshot,
        history: Optional[List[RateHistoryEntry]] = None,
    ) -> Path:
        """Persist the inflation snapshot and rate history for a draft.

        Adjusted values are written as an ordered list of
        ``[player_id, value]`` pairs and ``last_updated`` as ISO-8601 or
        null.
        """
        filepath = self._inflation_path(draft_id)
        self._write_json(filepath, self._snapshot_to_dict(snapshot, history or []))
        logger.debug("Saved inflation state for draft %s to %s", draft_id, filepath)
        return filepath

    def load_inflation(
        self, draft_id: str, total_players: int = 0
    ) -> Tuple[InflationSnapshot, List[RateHistoryEntry]]:
        """Load the inflation snapshot and rate history for a draft.

        Missing files, and any absent or malformed field, fall back to the
        default state for *total_players*.
        """
        default = create_default_inflation_state(total_players)
        data = self._read_json(self._inflation_path(draft_id))
        if not isinstance(data, dict):
            return default, []

        return self._dict_to_snapshot(data, default), self._parse_history(data.get("rate_history"))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _draft_path(self, draft_id: str) -> Path:
        return self.storage_dir / f"draft_{draft_id}.json"

    def _inflation_path(self, draft_id: str) -> Path:
        return self.storage_dir / f"inflation_{draft_id}.json"

    @staticmethod
    def _write_json(filepath: Path, data: Dict):
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _read_json(filepath: Path):
        if not filepath.exists():
            logger.warning("State file not found: %s", filepath)
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Corrupt state file %s: %s", filepath, e)
            return None

    def _draft_state_to_dict(self, state: DraftState) -> Dict:
        """Convert DraftState to JSON-serializable dict."""
        return {
            "draft_id": state.draft_id,
            "league_config": {
                "league_id": state.league_config.league_id,
                "league_size": state.league_config.league_size,
                "team_budget": state.league_config.team_budget,
                "roster_spots_per_team": state.league_config.roster_spots_per_team,
            },
            "draft_start_time": state.draft_start_time,
            "teams": [
                {
                    "team_id": team.team_id,
                    "team_name": team.team_name,
                    "budget": team.budget,
                    "spent": team.spent,
                    "player_ids": team.player_ids,
                }
                for team in state.teams
            ],
            "picks": [
                {
                    "pick_number": pick.pick_number,
                    "team_id": pick.team_id,
                    "player_id": pick.player_id,
                    "price": pick.price,
                    "timestamp": pick.timestamp,
                    "positions": pick.positions,
                    "tier": pick.tier,
                    "is_manual_entry": pick.is_manual_entry,
                }
                for pick in state.picks
            ],
            "player_pool": [
                {
                    "player_id": p.player_id,
                    "projected_value": p.projected_value,
                    "positions": list(p.positions),
                    "position": p.position,
                    "tier": p.tier.value if p.tier else None,
                }
                for p in state.player_pool.values()
            ],
            "is_complete": state.is_complete,
            "completed_at": state.completed_at,
        }

    def _dict_to_draft_state(self, data: Dict) -> DraftState:
        """Reconstruct DraftState from dict."""
        lc = data["league_config"]
        league_config = LeagueConfig(
            league_id=lc["league_id"],
            league_size=lc["league_size"],
            team_budget=lc["team_budget"],
            roster_spots_per_team=lc["roster_spots_per_team"],
        )

        teams = [
            TeamRoster(
                team_id=td["team_id"],
                team_name=td["team_name"],
                budget=td["budget"],
                spent=td.get("spent", 0),
                player_ids=list(td.get("player_ids", [])),
            )
            for td in data["teams"]
        ]

        picks = [
            AuctionPick(
                pick_number=pd["pick_number"],
                team_id=pd["team_id"],
                player_id=pd["player_id"],
                price=pd["price"],
                timestamp=pd["timestamp"],
                positions=list(pd.get("positions", [])),
                tier=pd.get("tier"),
                is_manual_entry=pd.get("is_manual_entry", False),
            )
            for pd in data["picks"]
        ]

        pool = [Projection.from_dict(pd) for pd in data["player_pool"]]

        return DraftState(
            draft_id=data["draft_id"],
            league_config=league_config,
            draft_start_time=data["draft_start_time"],
            teams=teams,
            picks=picks,
            player_pool={p.player_id: p for p in pool},
            is_complete=data.get("is_complete", False),
            completed_at=data.get("completed_at"),
        )

    @staticmethod
    def _snapshot_to_dict(snapshot: InflationSnapshot, history: List[RateHistoryEntry]) -> Dict:
        return {
            "overall_rate": snapshot.overall_rate,
            "position_rates": dict(snapshot.position_rates),
            "tier_rates": {tier.value: rate for tier, rate in snapshot.tier_rates.items()},
            "budget_depleted": snapshot.budget_depleted,
            "players_remaining": snapshot.players_remaining,
            "adjusted_values": [[pid, value] for pid, value in snapshot.adjusted_values.items()],
            "last_updated": snapshot.last_updated.isoformat() if snapshot.last_updated else None,
            "rate_history": [
                {"pick_number": e.pick_number, "rate": e.rate, "timestamp": e.timestamp}
                for e in history
            ],
        }

    def _dict_to_snapshot(self, data: Dict, default: InflationSnapshot) -> InflationSnapshot:
        return InflationSnapshot(
            overall_rate=_number(data.get("overall_rate"), default.overall_rate),
            position_rates=_position_rates(data.get("position_rates")),
            tier_rates=_tier_rates(data.get("tier_rates")),
            budget_depleted=_number(data.get("budget_depleted"), default.budget_depleted),
            players_remaining=_int(data.get("players_remaining"), default.players_remaining),
            adjusted_values=_adjusted_values(data.get("adjusted_values")),
            last_updated=_timestamp(data.get("last_updated")),
        )

    @staticmethod
    def _parse_history(raw) -> List[RateHistoryEntry]:
        if not isinstance(raw, list):
            return []

        entries = []
        for item in raw:
            try:
                entries.append(
                    RateHistoryEntry(
                        pick_number=int(item["pick_number"]),
                        rate=float(item["rate"]),
                        timestamp=float(item.get("timestamp", 0)),
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed rate history entry: %r", item)
        return entries


def _number(value, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def _int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _position_rates(raw) -> Dict[str, float]:
    rates = create_default_position_rates()
    if isinstance(raw, dict):
        for position, rate in raw.items():
            if position in rates:
                rates[position] = _number(rate, 0.0)
    return rates


def _tier_rates(raw) -> Dict[PlayerTier, float]:
    rates = create_default_tier_rates()
    if isinstance(raw, dict):
        for key, rate in raw.items():
            tier = parse_tier(key)
            if tier is not None:
                rates[tier] = _number(rate, 0.0)
    return rates


def _adjusted_values(raw) -> Dict[str, int]:
    if not isinstance(raw, list):
        return {}

    values = {}
    for pair in raw:
        if isinstance(pair, (list, tuple)) and len(pair) == 2 and isinstance(pair[0], str):
            values[pair[0]] = int(_number(pair[1], 0))
        else:
            logger.warning("Skipping malformed adjusted value entry: %r", pair)
    return values


def _timestamp(raw) -> Optional[datetime]:
    if not isinstance(raw, str):
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Ignoring malformed last_updated timestamp: %r", raw)
        return None

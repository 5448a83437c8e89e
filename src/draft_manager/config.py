from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DRAFTS_DIR = PROJECT_ROOT / "data" / "drafts"
PERFORMANCE_LOG_FILE = PROJECT_ROOT / "data" / "performance" / "inflation_performance.jsonl"

# Default auction league settings (10 teams x $260 x 23 spots = $2600 / 230 slots)
DEFAULT_LEAGUE_SIZE = 10
DEFAULT_TEAM_BUDGET = 260
DEFAULT_ROSTER_SPOTS_PER_TEAM = 23

# Every open roster slot must keep at least this much budget in reserve
MIN_BID = 1

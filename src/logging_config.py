import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "inflation_engine.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> Path:
    """Configure root logging for the auction inflation engine.

    Writes everything at DEBUG and above to a rotating file and *log_level*
    and above to the console. Calling it again is a no-op.

    Returns:
        Path of the log file.
    """
    log_dir = Path(log_dir) if log_dir else Path(__file__).parent.parent / "logs"
    log_file = log_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return log_file  # Already configured

    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(logging.DEBUG)

    # Recalculations run on timer and worker threads, so include the thread name
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # 5MB per file, keep 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s, file=%s)", log_level, log_file)
    return log_file

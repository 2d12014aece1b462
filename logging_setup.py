import logging
from datetime import datetime
from pathlib import Path

from config import LOG_DIR


def setup_logging(level: int = logging.INFO) -> str:
    """Log to the console and to ``<log dir>/log.txt``; returns the file path."""
    log_dir = LOG_DIR or f"logs_{datetime.now():%Y_%m_%d_%H_%M_%S}"
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = f"{log_dir}/log.txt"

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )
    for lib in ("httpx", "uvicorn.access", "asyncio"):
        logging.getLogger(lib).setLevel(logging.WARNING)

    logging.info(f"[SERVER] logging to {log_file}")
    return log_file

import logging
import sys
from pathlib import Path

from .config import RepairConfig

FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def cap_log_file(path: Path, max_size_mb: int) -> str:
    """
    Wipe the log file when it has grown past max_size_mb.
    Returns a one-line description of what was found, for the run header.
    """
    if not path.exists():
        return f"Logfile {path} does not exist - started a fresh one"
    size_mb = path.stat().st_size // (1024 * 1024)
    if size_mb < max_size_mb:
        return f"Logfile {path} (now: {size_mb} MiB) size below {max_size_mb} MiB threshold"
    path.unlink()
    return f"Logfile {path} (now: {size_mb} MiB) exceeded {max_size_mb} MiB threshold - logfile was cleared"


def setup_logging(config: RepairConfig, to_file: bool = True) -> str:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    status = ""
    if to_file:
        status = cap_log_file(config.log_file, config.max_log_size_mb)
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level,
        format=FORMAT,
        handlers=handlers,
        force=True,
    )
    return status

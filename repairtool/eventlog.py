import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

_lock = threading.Lock()


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class EventLog:
    """Append-only JSONL audit trail of run decisions and outcomes."""

    def __init__(self, path: Optional[Path]):
        self.path = path

    def log_event(self, event: dict) -> None:
        """
        Append a single JSON event (one line) to the events file.
        Ensures parent directory exists and write is thread-safe.
        """
        if self.path is None:
            return
        try:
            data = dict(event)
            data.setdefault("ts", _now_iso())
            self.path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(data, separators=(",", ":"), sort_keys=False, default=str)
            with _lock:
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            # Audit failures never change the outcome of a run
            log.warning("Could not write event to %s: %s", self.path, e)

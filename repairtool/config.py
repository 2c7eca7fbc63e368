import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError
from .models import ModeAlgorithm

log = logging.getLogger(__name__)


def _load_env_files() -> None:
    """
    Load environment variables from .env (and .env.local if present).
    Values already present in the process environment are not overridden.
    Supported format: KEY=VALUE with optional quotes; lines starting with '#' are ignored.
    """
    for fname in (".env", ".env.local"):
        p = Path(fname)
        if not p.exists():
            continue
        for raw in p.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[7:].strip()
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = val


def _int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def _bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RepairConfig:
    cassandra_config_dir: Path = Path("/etc/cassandra")
    nodetool_dir:         Path = Path("/usr/bin")
    jmx_port:             int = 8090
    mode_algorithm:       ModeAlgorithm = ModeAlgorithm.WEIGHTED_RANDOM
    # REPAIR_ALGORITHM as configured, before resolution
    requested_algorithm:  Optional[str] = None
    # Repair status (percent) below which Full mode is forced
    force_full_threshold: int = 94
    local_override_as_commander: bool = False

    # None = wait as long as nodetool takes
    nodetool_timeout_sec: Optional[int] = None
    repair_timeout_sec:   Optional[int] = None

    log_level:       str = "INFO"
    log_dir:         Path = Path("/var/log/cassandra/MaintenanceLog")
    log_file_name:   str = "repairlog.log"
    max_log_size_mb: int = 100
    events_log_file: Optional[Path] = None

    def __post_init__(self):
        if not 0 <= self.force_full_threshold <= 100:
            raise ConfigurationError(
                f"FORCE_FULL_REPAIR_THRESHOLD must be within 0-100, got {self.force_full_threshold}")
        if not 0 < self.jmx_port < 65536:
            raise ConfigurationError(f"JMX_REMOTE_PORT out of range: {self.jmx_port}")

    @property
    def algorithm_fallback(self) -> bool:
        """True when the configured algorithm name was not recognised and the default is used instead."""
        if self.requested_algorithm is None:
            return False
        return self.requested_algorithm.strip().lower() != self.mode_algorithm.value

    @property
    def cassandra_yaml(self) -> Path:
        return self.cassandra_config_dir / "cassandra.yaml"

    @property
    def nodetool(self) -> Path:
        return self.nodetool_dir / "nodetool"

    @property
    def log_file(self) -> Path:
        return self.log_dir / self.log_file_name

    @property
    def events_file(self) -> Path:
        return self.events_log_file or self.log_dir / "events.jsonl"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RepairConfig":
        """Build the run configuration once from the process environment (and .env files)."""
        if env is None:
            _load_env_files()
            env = os.environ
        algorithm = env.get("REPAIR_ALGORITHM", "weightedrandom")
        events = env.get("EVENTS_LOG_FILE")
        return cls(
            cassandra_config_dir=Path(env.get("CASSANDRA_CONFIG_DIR", "/etc/cassandra")),
            nodetool_dir=Path(env.get("CASSANDRA_NODETOOL_DIR", "/usr/bin")),
            jmx_port=_int(env, "JMX_REMOTE_PORT", 8090),
            mode_algorithm=ModeAlgorithm.parse(algorithm),
            requested_algorithm=algorithm,
            force_full_threshold=_int(env, "FORCE_FULL_REPAIR_THRESHOLD", 94),
            local_override_as_commander=_bool(env, "LOCAL_OVERRIDE_AS_COMMANDER"),
            nodetool_timeout_sec=_int(env, "NODETOOL_TIMEOUT_SEC", None),
            repair_timeout_sec=_int(env, "REPAIR_TIMEOUT_SEC", None),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(env.get("LOG_DIR", "/var/log/cassandra/MaintenanceLog")),
            log_file_name=env.get("LOG_FILE", "repairlog.log"),
            max_log_size_mb=_int(env, "MAX_LOG_SIZE_MB", 100),
            events_log_file=Path(events) if events else None,
        )

    @classmethod
    def logging_only(cls, env: Optional[Mapping[str, str]] = None) -> "RepairConfig":
        """
        Defaults plus the log and event file locations from the environment.
        Used to record the exit of a run whose configuration could not be parsed.
        """
        env = os.environ if env is None else env
        events = env.get("EVENTS_LOG_FILE")
        return cls(
            log_dir=Path(env.get("LOG_DIR", "/var/log/cassandra/MaintenanceLog")),
            log_file_name=env.get("LOG_FILE", "repairlog.log"),
            events_log_file=Path(events) if events else None,
        )

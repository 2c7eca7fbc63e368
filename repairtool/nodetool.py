import logging
import re
from typing import List, Optional

import yaml

from .cluster import HealthReport, parse_status_output
from .config import RepairConfig
from .errors import (
    ConfigurationError,
    HealthQueryUnavailable,
    IdentityUnresolvable,
    InvalidStatusFormat,
    InvokeFailure,
    StatusUnavailable,
)
from .mode import parse_status
from .models import MaintenanceMode, MemberId
from .utils import run_cmd, stream_cmd

log = logging.getLogger(__name__)

_PERCENT_REPAIRED = re.compile(r"^\s*Percent Repaired\s*:\s*(.*?)\s*$", re.MULTILINE)


def parse_percent_repaired(info_output: str) -> int:
    """Pull the "Percent Repaired" figure out of `nodetool info` output, truncated to an int."""
    m = _PERCENT_REPAIRED.search(info_output or "")
    if not m:
        raise InvalidStatusFormat("no 'Percent Repaired' line in nodetool info output")
    return parse_status(m.group(1))


class Nodetool:
    """Cassandra management operations, driven through the nodetool CLI over JMX."""

    def __init__(self, config: RepairConfig, local: Optional[MemberId] = None):
        self.config = config
        self.local = local

    def _base(self, host: MemberId) -> List[str]:
        return [str(self.config.nodetool), "-h", str(host), "-p", str(self.config.jmx_port)]

    def check_installation(self) -> None:
        if not self.config.cassandra_yaml.is_file() or not self.config.nodetool.is_file():
            raise ConfigurationError(
                f"Unable to find cassandra.yaml ({self.config.cassandra_config_dir}) "
                f"or nodetool ({self.config.nodetool_dir})")
        log.info("Reading Cassandra configuration from: %s", self.config.cassandra_yaml)
        log.info("Using nodetool location: %s", self.config.nodetool)

    def resolve_local_identity(self) -> MemberId:
        """listen_address from cassandra.yaml, or `hostname -i` when it is not set."""
        address = None
        try:
            with self.config.cassandra_yaml.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            address = data.get("listen_address") if isinstance(data, dict) else None
        except (OSError, yaml.YAMLError) as e:
            log.warning("Could not read listen_address from %s: %s", self.config.cassandra_yaml, e)

        if address:
            log.info("Using listen address (from %s): %s", self.config.cassandra_yaml, address)
        else:
            try:
                out = run_cmd(["hostname", "-i"], timeout=self.config.nodetool_timeout_sec)
            except RuntimeError as e:
                raise IdentityUnresolvable(f"hostname -i failed: {e}") from e
            address = out.split()[0] if out.split() else None
            if not address:
                raise IdentityUnresolvable("no listen_address configured and hostname -i returned nothing")
            log.info("Using listen address (from hostname -i): %s", address)

        self.local = MemberId.parse(str(address))
        return self.local

    def query_cluster_health(self) -> List[HealthReport]:
        host = self.local or self.resolve_local_identity()
        log.info("Querying node status via %s", host)
        try:
            out = run_cmd(self._base(host) + ["status"], timeout=self.config.nodetool_timeout_sec)
        except RuntimeError as e:
            raise HealthQueryUnavailable(
                f"Cassandra service seems down/unreachable on node {host}: {e}") from e
        log.info("Node %s successfully contacted", host)
        return parse_status_output(out)

    def query_repair_status(self, member: MemberId) -> int:
        try:
            out = run_cmd(self._base(member) + ["info"], timeout=self.config.nodetool_timeout_sec)
        except RuntimeError as e:
            raise StatusUnavailable(f"nodetool info failed for {member}: {e}") from e
        return parse_percent_repaired(out)

    def invoke_repair(self, member: MemberId, mode: MaintenanceMode) -> bool:
        cmd = self._base(member) + ["repair", mode.flag]
        log.info("==> Executing repair action (%s) against %s: %s", mode.flag, member, " ".join(cmd))
        try:
            rc = stream_cmd(cmd, lambda line: log.info("[nodetool %s] %s", member, line),
                            timeout=self.config.repair_timeout_sec)
        except RuntimeError as e:
            raise InvokeFailure(f"repair on {member} did not complete: {e}") from e
        if rc:
            log.error("nodetool repair on %s exited with status %d", member, rc)
        return rc == 0

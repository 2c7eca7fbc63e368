import logging
import time
from datetime import date
from typing import Callable, List, Optional

from .config import RepairConfig
from .election import elect_coordinator, local_role
from .errors import RepairError
from .eventlog import EventLog
from .mode import ModeSelector
from .models import RepairJob, Role, RunOutcome, RunResult
from .nodetool import Nodetool
from .phases import discovery, repair, status
from .schedule import day_name

log = logging.getLogger(__name__)


class MaintenanceDriver:
    """
    Repairs due nodes one at a time: status -> mode -> repair -> status.

    The first failure stops the driver; nodes after it are left for the next cycle.
    """

    def __init__(self, config: RepairConfig, ops, selector: ModeSelector,
                 events: EventLog, dry_run: bool = False):
        self.config = config
        self.ops = ops
        self.selector = selector
        self.events = events
        self.dry_run = dry_run

    def process(self, job: RepairJob) -> None:
        status.fetch_before(job, self.ops, self.events)
        repair.decide(job, self.selector, self.events)
        if self.dry_run:
            log.info("[DRY RUN] Would run nodetool repair %s against %s", job.mode.flag, job.member)
            return
        repair.execute(job, self.ops, self.events)
        status.fetch_after(job, self.ops, self.events)

    def drive(self, jobs: List[RepairJob]) -> List[RepairJob]:
        for n, job in enumerate(jobs, 1):
            log.info("Repairing node %s (%d of %d)", job.member, n, len(jobs))
            self.process(job)
        return [j for j in jobs if j.done]


class RunController:
    """One repair cycle on this node, from membership snapshot to RunResult."""

    def __init__(self, config: RepairConfig, ops, events: Optional[EventLog] = None,
                 selector: Optional[ModeSelector] = None, dry_run: bool = False,
                 clock: Callable[[], float] = time.monotonic):
        self.config = config
        self.ops = ops
        self.events = events or EventLog(None)
        self.selector = selector
        self.dry_run = dry_run
        self.clock = clock
        self.jobs: List[RepairJob] = []

    def run(self, today: Optional[date] = None) -> RunResult:
        today = today or date.today()
        start = self.clock()
        self.jobs = []
        result = RunResult(RunOutcome.FAILURE, reason="unexpected error")
        try:
            result = self._run(today)
        except RepairError as e:
            log.error("%s => %s - Aborting!", type(e).__name__, e)
            result = RunResult(RunOutcome.FAILURE, reason=f"{type(e).__name__}: {e}")
        finally:
            result.duration = self.clock() - start
            # nodes repaired before a failure still count
            result.repaired = [j.member for j in self.jobs if j.done]
            record_exit(result, self.events)
        return result

    def _run(self, today: date) -> RunResult:
        self._log_algorithm()
        self.ops.check_installation()
        local = self.ops.resolve_local_identity()

        view, jobs = discovery.discover(self.ops, today)
        self.jobs = jobs
        if not jobs:
            log.info("No nodes due for repair today (%s)", day_name(today))
            return RunResult(RunOutcome.SUCCESS, reason="nothing due")
        log.info("%d nodes due for repair today: %s", len(jobs), ", ".join(str(j.member) for j in jobs))

        coordinator = elect_coordinator(view)
        role = local_role(view, local, self.config.local_override_as_commander)
        self.events.log_event({"phase": "election", "action": role.value,
                               "host": str(local), "commander": str(coordinator)})
        if role is Role.FOLLOWER:
            return RunResult(RunOutcome.SUCCESS, reason=f"follower of {coordinator}")

        selector = self.selector or ModeSelector(self.config, today=today)
        driver = MaintenanceDriver(self.config, self.ops, selector, self.events, self.dry_run)
        driver.drive(jobs)
        return RunResult(RunOutcome.SUCCESS, reason="repaired")

    def _log_algorithm(self) -> None:
        algorithm = self.config.mode_algorithm.value
        if self.config.algorithm_fallback:
            log.warning("Unknown repair algorithm %r; using %s",
                        self.config.requested_algorithm, algorithm)
        log.info("Using algorithm (%s) to select repair mode", algorithm)
        self.events.log_event({"phase": "config", "action": "algorithm", "algorithm": algorithm,
                               "requested": self.config.requested_algorithm,
                               "fallback": self.config.algorithm_fallback})


def record_exit(result: RunResult, events: EventLog) -> None:
    """Terminal log line and run/exit event, written once per run whatever the outcome."""
    state = "normally" if result.ok else "abnormally"
    log.info("Exiting %s... Duration: %d seconds / exit code: %d",
             state, int(result.duration), result.exit_code)
    events.log_event({
        "phase": "run",
        "action": "exit",
        "outcome": result.outcome.name.lower(),
        "exit_code": result.exit_code,
        "duration_sec": round(result.duration, 3),
        "reason": result.reason,
        "repaired": [str(m) for m in result.repaired],
    })


def run_once(config: RepairConfig, dry_run: bool = False, today: Optional[date] = None) -> RunResult:
    ops = Nodetool(config)
    events = EventLog(config.events_file)
    return RunController(config, ops, events, dry_run=dry_run).run(today)

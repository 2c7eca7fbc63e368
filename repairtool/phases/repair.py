import logging

from ..errors import InvokeFailure
from ..eventlog import EventLog
from ..mode import ModeSelector
from ..models import RepairJob

log = logging.getLogger(__name__)


def decide(job: RepairJob, selector: ModeSelector, events: EventLog) -> None:
    job.mode = selector.select(job.status_before)
    log.info("Repair method selected for %s: %s (%s)", job.member, job.mode.label, job.mode.flag)
    events.log_event({
        "phase": "repair",
        "action": "mode_selected",
        "host": str(job.member),
        "mode": job.mode.value,
        "percent_repaired": job.status_before,
        "threshold": selector.threshold,
        "algorithm": selector.algorithm.value,
    })


def execute(job: RepairJob, ops, events: EventLog) -> None:
    if job.mode is None:
        raise ValueError(f"no repair mode decided for {job.member}")

    events.log_event({"phase": "repair", "action": "requested", "host": str(job.member),
                      "mode": job.mode.value})
    try:
        ok = ops.invoke_repair(job.member, job.mode)
    except InvokeFailure as e:
        events.log_event({"phase": "repair", "action": "error", "host": str(job.member),
                          "mode": job.mode.value, "error": str(e)})
        raise

    if not ok:
        log.error("Error while running the repair job on node %s", job.member)
        events.log_event({"phase": "repair", "action": "failed", "host": str(job.member),
                          "mode": job.mode.value})
        raise InvokeFailure(f"nodetool repair {job.mode.flag} failed on {job.member}")

    log.info("Finished repair %s on %s", job.mode.flag, job.member)
    events.log_event({"phase": "repair", "action": "completed", "host": str(job.member),
                      "mode": job.mode.value})
    job.done = True

import logging

from ..errors import InvalidStatusFormat, StatusUnavailable
from ..eventlog import EventLog
from ..models import RepairJob

log = logging.getLogger(__name__)


def fetch_before(job: RepairJob, ops, events: EventLog) -> None:
    # Failures propagate: a node we cannot read is not repaired, and the run stops
    job.status_before = ops.query_repair_status(job.member)
    log.info("Node %s reports: %d Percent Repaired", job.member, job.status_before)
    events.log_event({"phase": "status", "action": "before", "host": str(job.member),
                      "percent_repaired": job.status_before})


def fetch_after(job: RepairJob, ops, events: EventLog) -> None:
    """Re-read the repair status for the record only; never affects the run outcome."""
    try:
        job.status_after = ops.query_repair_status(job.member)
    except (StatusUnavailable, InvalidStatusFormat) as e:
        log.warning("Could not read repair status of %s after repair: %s", job.member, e)
        return
    log.info("After repair node %s reports: %d Percent Repaired", job.member, job.status_after)
    events.log_event({"phase": "status", "action": "after", "host": str(job.member),
                      "percent_repaired": job.status_after})

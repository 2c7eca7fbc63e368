import logging
from datetime import date
from typing import List, Tuple

from ..cluster import ClusterView
from ..models import RepairJob
from ..schedule import day_name, due_today

log = logging.getLogger(__name__)


def discover(ops, today: date) -> Tuple[ClusterView, List[RepairJob]]:
    """Build the healthy view and one RepairJob per member due on today's weekday, in view order."""
    view = ClusterView.from_health_query(ops.query_cluster_health)
    day = day_name(today)
    jobs = [RepairJob(member, day) for member in due_today(view, today)]
    log.debug("Discovered %d due nodes out of %d", len(jobs), len(view))
    return view, jobs

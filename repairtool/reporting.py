import logging
from datetime import date
from typing import List, Optional

from .cluster import ClusterView
from .config import RepairConfig
from .election import elect_coordinator
from .formatting import print_json_data, print_table, run_with_status
from .models import MemberId
from .nodetool import Nodetool
from .schedule import assign_slots, day_name

log = logging.getLogger(__name__)


def schedule_rows(view: ClusterView, day: str) -> List[dict]:
    """One row per healthy member: its weekday, whether it is due on `day`, and the Commander mark."""
    coordinator = elect_coordinator(view)
    return [
        {
            "member": str(s.member),
            "slot": s.slot,
            "day": s.day,
            "due": "yes" if s.day == day else "",
            "role": "commander" if s.member == coordinator else "",
        }
        for s in assign_slots(view)
    ]


def print_schedule(config: RepairConfig, day: Optional[str] = None, output_json: Optional[str] = None) -> None:
    """Read-only: show the weekly repair rotation of the current healthy view."""
    ops = Nodetool(config)
    view = run_with_status("Querying node status…", ClusterView.from_health_query, ops.query_cluster_health)
    day = day or day_name(date.today())
    rows = schedule_rows(view, day)

    if output_json is not None:
        print_json_data(rows, output_json)
        return

    columns = [
        {"header": "Node", "key": "member", "no_wrap": True},
        {"header": "Slot", "key": "slot", "no_wrap": True},
        {"header": "Repair Day", "key": "day", "no_wrap": True},
        {"header": f"Due {day}", "key": "due", "no_wrap": True},
        {"header": "Role", "key": "role", "no_wrap": True},
    ]
    style_map = {"commander": "bold cyan"}
    print_table(f"Repair schedule ({len(view)} UN nodes)", columns, rows,
                style_map=style_map, state_key="role")


def print_status(config: RepairConfig, host: str) -> int:
    member = MemberId.parse(host)
    percent = Nodetool(config).query_repair_status(member)
    print(f"{member}: {percent}% repaired")
    return percent

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from .cluster import ClusterView
from .models import MemberId

log = logging.getLogger(__name__)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class ScheduleSlot:
    member: MemberId
    slot:   int

    @property
    def day(self) -> str:
        return DAY_NAMES[self.slot]


def assign_slots(view: ClusterView) -> List[ScheduleSlot]:
    """Slot of each member is its position in the view modulo 7 (0 = Monday)."""
    return [ScheduleSlot(member, i % 7) for i, member in enumerate(view)]


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def due_on(view: ClusterView, day: str) -> List[MemberId]:
    if day not in DAY_NAMES:
        raise ValueError(f"unknown weekday {day!r}")
    due: List[MemberId] = []
    for s in assign_slots(view):
        if s.day == day:
            log.info("Node %s repair due on %s ==> due today, adding it to the list", s.member, s.day)
            due.append(s.member)
        else:
            log.debug("Node %s repair due on %s ==> not due today", s.member, s.day)
    return due


def due_today(view: ClusterView, today: date) -> List[MemberId]:
    return due_on(view, day_name(today))

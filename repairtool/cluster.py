import logging
import re
from typing import Callable, Iterable, Iterator, List, Sequence, Tuple

from .errors import EmptyClusterView
from .models import MemberId

log = logging.getLogger(__name__)

HEALTHY_TAG = "UN"  # Up + Normal

# Node rows in `nodetool status` start with a two-letter Up/Down + state code
_STATUS_ROW = re.compile(r"^([UD][NLJM])\s+(\S+)")

HealthReport = Tuple[MemberId, str]


def parse_status_output(text: str) -> List[HealthReport]:
    """
    Extract (member, tag) pairs from `nodetool status` output.
    Datacenter banners, legend lines and column headers are skipped.
    """
    reports: List[HealthReport] = []
    for line in (text or "").splitlines():
        m = _STATUS_ROW.match(line.strip())
        if m:
            reports.append((MemberId.parse(m.group(2)), m.group(1)))
    return reports


class ClusterView(Sequence[MemberId]):
    """Deduplicated, ascending snapshot of the healthy cluster members for one run."""

    def __init__(self, members: Iterable[MemberId]):
        self._members: Tuple[MemberId, ...] = tuple(sorted(set(members)))

    @classmethod
    def from_health_query(cls, query: Callable[[], Iterable[HealthReport]]) -> "ClusterView":
        return build_cluster_view(query())

    def __getitem__(self, i):
        return self._members[i]

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[MemberId]:
        return iter(self._members)

    def __eq__(self, other) -> bool:
        if isinstance(other, ClusterView):
            return self._members == other._members
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._members)

    def __repr__(self) -> str:
        return f"ClusterView([{', '.join(str(m) for m in self._members)}])"


def build_cluster_view(reports: Iterable[HealthReport]) -> ClusterView:
    healthy = [member for member, tag in reports if tag == HEALTHY_TAG]
    view = ClusterView(healthy)
    if not view:
        raise EmptyClusterView("no members reported Up/Normal")
    log.info("Detected %d nodes with UN (Up + Normal) status", len(view))
    return view

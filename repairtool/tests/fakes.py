"""
Shared test doubles for the nodetool-facing collaborator.

FakeOps mirrors the public surface of repairtool.nodetool.Nodetool without
spawning any process; it records every status read and repair invocation.
"""
from repairtool.errors import HealthQueryUnavailable
from repairtool.models import MemberId


class FakeOps:
    def __init__(self, members, local, statuses=None, failing=(), tags=None, health_error=None):
        self.members = list(members)
        self.local = local
        self.statuses = dict(statuses or {})
        self.failing = set(failing)
        self.tags = dict(tags or {})
        self.health_error = health_error
        self.status_reads = []
        self.invocations = []

    def check_installation(self):
        pass

    def resolve_local_identity(self):
        return MemberId.parse(self.local)

    def query_cluster_health(self):
        if self.health_error:
            raise HealthQueryUnavailable(self.health_error)
        return [(MemberId.parse(m), self.tags.get(m, "UN")) for m in self.members]

    def query_repair_status(self, member):
        self.status_reads.append(str(member))
        value = self.statuses.get(str(member), 100)
        if isinstance(value, Exception):
            raise value
        return value

    def invoke_repair(self, member, mode):
        self.invocations.append((str(member), mode))
        return str(member) not in self.failing


class Draws:
    """Stand-in for random.Random that replays fixed randrange() results."""

    def __init__(self, *values):
        self._values = iter(values)

    def randrange(self, n):
        return next(self._values)

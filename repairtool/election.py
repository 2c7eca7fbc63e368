import logging

from .cluster import ClusterView
from .models import MemberId, Role

log = logging.getLogger(__name__)

# A local address of "localhost" always takes the Commander role
LOCALHOST_SENTINEL = "localhost"


def elect_coordinator(view: ClusterView) -> MemberId:
    """
    The Commander is the lowest member of the whole healthy view, whether or not it is due today.

    Every node runs the same computation against its own `nodetool status` snapshot, so agreement
    only holds while membership is stable. A node flapping during the query window can leave the
    cycle with no Commander or with two; repairs are idempotent, so both outcomes are tolerated.
    """
    return view[0]


def local_role(view: ClusterView, local: MemberId, always_commander: bool = False) -> Role:
    coordinator = elect_coordinator(view)
    if always_commander:
        log.info("Local override enabled: %s takes the Commander role", local)
        return Role.COMMANDER
    if local == coordinator or local.address == LOCALHOST_SENTINEL:
        log.info("Current node (%s) has the Commander role", local)
        return Role.COMMANDER
    log.info("Current node (%s) is NOT the Commander; leaving repairs to %s", local, coordinator)
    return Role.FOLLOWER

import pytest

from repairtool.cluster import ClusterView, build_cluster_view, parse_status_output
from repairtool.errors import EmptyClusterView, HealthQueryUnavailable
from repairtool.models import MemberId

STATUS_OUTPUT = """\
Datacenter: dc1
===============
Status=Up/Down
|/ State=Normal/Leaving/Joining/Moving
--  Address     Load       Tokens  Owns (effective)  Host ID                               Rack
UN  10.0.0.10   1.21 GiB   256     34.1%             2d2f3c52-51b5-4d0a-9d5e-3f1f0c8e5d01  rack1
UN  10.0.0.2    1.19 GiB   256     33.0%             7a6c1e0b-12a3-4b5c-8d9e-0f1a2b3c4d5e  rack1
DN  10.0.0.3    1.02 GiB   256     32.9%             0b1c2d3e-4f5a-6b7c-8d9e-0a1b2c3d4e5f  rack1
UJ  10.0.0.4    210 KiB    256     ?                 1c2d3e4f-5a6b-7c8d-9e0a-1b2c3d4e5f6a  rack1
"""


def _m(*addrs):
    return [MemberId.parse(a) for a in addrs]


# ---------------------------------------------------------------------------
# MemberId ordering
# ---------------------------------------------------------------------------
def test_member_id_orders_numerically_not_lexically():
    assert MemberId.parse("10.0.0.2") < MemberId.parse("10.0.0.10")
    assert MemberId.parse("9.255.255.255") < MemberId.parse("10.0.0.0")
    assert sorted(_m("10.0.0.10", "10.0.0.9", "10.0.1.1")) == _m("10.0.0.9", "10.0.0.10", "10.0.1.1")


def test_member_id_componentwise_le_sorts_first():
    a, b = MemberId.parse("10.1.2.3"), MemberId.parse("10.1.20.3")
    assert a <= b
    assert sorted([b, a]) == [a, b]


def test_member_id_non_numeric_sorts_after_addresses():
    members = sorted(_m("node-b", "10.0.0.1", "node-a"))
    assert [str(m) for m in members] == ["10.0.0.1", "node-a", "node-b"]


# ---------------------------------------------------------------------------
# nodetool status parsing
# ---------------------------------------------------------------------------
def test_parse_status_output_skips_headers():
    reports = parse_status_output(STATUS_OUTPUT)
    assert [(str(m), tag) for m, tag in reports] == [
        ("10.0.0.10", "UN"),
        ("10.0.0.2", "UN"),
        ("10.0.0.3", "DN"),
        ("10.0.0.4", "UJ"),
    ]


def test_parse_status_output_empty():
    assert parse_status_output("") == []
    assert parse_status_output(None) == []


# ---------------------------------------------------------------------------
# build_cluster_view
# ---------------------------------------------------------------------------
def test_build_cluster_view_filters_and_sorts():
    view = build_cluster_view(parse_status_output(STATUS_OUTPUT))
    assert list(view) == _m("10.0.0.2", "10.0.0.10")


def test_build_cluster_view_deduplicates():
    reports = [(m, "UN") for m in _m("10.0.0.5", "10.0.0.1", "10.0.0.5", "10.0.0.1", "10.0.0.3")]
    view = build_cluster_view(reports)
    assert list(view) == _m("10.0.0.1", "10.0.0.3", "10.0.0.5")
    assert len(view) == len(set(view))


def test_build_cluster_view_empty_raises():
    with pytest.raises(EmptyClusterView):
        build_cluster_view([])
    with pytest.raises(EmptyClusterView):
        build_cluster_view([(MemberId.parse("10.0.0.1"), "DN")])


def test_from_health_query_propagates_unavailable():
    def query():
        raise HealthQueryUnavailable("connection refused")

    with pytest.raises(HealthQueryUnavailable):
        ClusterView.from_health_query(query)


def test_views_from_same_snapshot_are_equal():
    reports = [(m, "UN") for m in _m("10.0.0.9", "10.0.0.1", "10.0.0.5")]
    assert ClusterView.from_health_query(lambda: reports) == ClusterView.from_health_query(lambda: list(reversed(reports)))

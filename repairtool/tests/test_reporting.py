from repairtool.cluster import ClusterView
from repairtool.logging_util import cap_log_file
from repairtool.models import MemberId
from repairtool.reporting import schedule_rows


def test_schedule_rows():
    view = ClusterView(MemberId.parse(a) for a in ("10.0.0.9", "10.0.0.10", "10.0.0.1"))
    rows = schedule_rows(view, "Tuesday")
    assert [(r["member"], r["day"], r["due"], r["role"]) for r in rows] == [
        ("10.0.0.1", "Monday", "", "commander"),
        ("10.0.0.9", "Tuesday", "yes", ""),
        ("10.0.0.10", "Wednesday", "", ""),
    ]


def test_cap_log_file(tmp_path):
    log = tmp_path / "repairlog.log"
    assert "does not exist" in cap_log_file(log, 1)

    log.write_text("small\n")
    assert "below" in cap_log_file(log, 1)
    assert log.exists()

    log.write_bytes(b"x" * (2 * 1024 * 1024))
    assert "cleared" in cap_log_file(log, 1)
    assert not log.exists()

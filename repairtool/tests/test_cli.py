import json
import logging
from unittest.mock import patch

import pytest

from repairtool.cli import main
from repairtool.models import RunOutcome, RunResult


@pytest.fixture
def log_dir(monkeypatch, tmp_path):
    """Point LOG_DIR at tmp_path and put the root logger back after setup_logging replaced its handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    for key in ("FORCE_FULL_REPAIR_THRESHOLD", "JMX_REMOTE_PORT", "REPAIR_ALGORITHM",
                "EVENTS_LOG_FILE", "LOG_FILE", "MAX_LOG_SIZE_MB", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    yield tmp_path
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _events(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_run_exit_codes(log_dir):
    with patch("repairtool.cli.setup_logging", return_value=""), \
            patch("repairtool.cli.run_once") as fake_run:
        fake_run.return_value = RunResult(RunOutcome.SUCCESS)
        assert main(["run"]) == 0
        fake_run.return_value = RunResult(RunOutcome.FAILURE, reason="InvokeFailure: boom")
        assert main(["run", "--dry-run"]) == 1
        assert fake_run.call_args.kwargs["dry_run"] is True


def test_run_config_error(log_dir, monkeypatch, capsys):
    monkeypatch.setenv("FORCE_FULL_REPAIR_THRESHOLD", "500")
    with patch("repairtool.cli.run_once") as fake_run:
        assert main(["run"]) == 1
        fake_run.assert_not_called()
    assert "FORCE_FULL_REPAIR_THRESHOLD" in capsys.readouterr().out


def test_run_config_error_records_exit(log_dir, monkeypatch):
    monkeypatch.setenv("JMX_REMOTE_PORT", "jmx")
    assert main(["run"]) == 1

    text = (log_dir / "repairlog.log").read_text()
    assert "JMX_REMOTE_PORT must be an integer" in text
    assert "Exiting abnormally... Duration: 0 seconds / exit code: 1" in text
    last = _events(log_dir / "events.jsonl")[-1]
    assert last["phase"] == "run"
    assert last["action"] == "exit"
    assert last["exit_code"] == 1
    assert last["reason"].startswith("ConfigurationError")


def test_unknown_algorithm_reaches_logfile(log_dir, monkeypatch):
    # no cassandra.yaml under the config dir, so the run stops at the installation check
    monkeypatch.setenv("CASSANDRA_CONFIG_DIR", str(log_dir))
    monkeypatch.setenv("REPAIR_ALGORITHM", "weaknumber")
    assert main(["run"]) == 1

    text = (log_dir / "repairlog.log").read_text()
    assert "Unknown repair algorithm 'weaknumber'; using weightedrandom" in text
    config_events = [e for e in _events(log_dir / "events.jsonl") if e["phase"] == "config"]
    assert config_events[0]["requested"] == "weaknumber"
    assert config_events[0]["fallback"] is True


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out

import subprocess
import logging
import threading
from typing import Callable, Optional, Tuple

log = logging.getLogger(__name__)


def run_cmd(cmd: list[str], *, check: bool = True, timeout: Optional[float] = None) -> str:
    rc, out, err = _run(cmd, timeout)
    if check and rc:
        log.error("Command failed (%s): %s", rc, err)
        raise RuntimeError(err or f"exit status {rc}")
    return out


def stream_cmd(cmd: list[str], on_line: Callable[[str], None], *,
               timeout: Optional[float] = None) -> int:
    """
    Run a long command, handing each line of its combined stdout/stderr to on_line as it arrives.
    Returns the exit status; raises RuntimeError when it cannot start or runs past the timeout.
    """
    log.debug("Streaming command: %s", " ".join(cmd))
    try:
        proc = subprocess.Popen(
            cmd, text=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, bufsize=1
        )
    except OSError as e:
        log.error("Command could not be started: %s (%s)", " ".join(cmd), e)
        raise RuntimeError(str(e)) from e

    expired = threading.Event()

    def _kill():
        expired.set()
        proc.kill()

    timer = threading.Timer(timeout, _kill) if timeout else None
    if timer:
        timer.start()
    try:
        with proc.stdout:
            for line in proc.stdout:
                line = line.rstrip()
                if line:
                    on_line(line)
        rc = proc.wait()
    finally:
        if timer:
            timer.cancel()
    if expired.is_set():
        log.error("Command timed out after %ss: %s", timeout, " ".join(cmd))
        raise RuntimeError(f"timed out after {timeout}s: {cmd[0]}")
    return rc


def _run(cmd: list[str], timeout: Optional[float]) -> Tuple[int, str, str]:
    log.debug("Running command: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd, text=True, capture_output=True, timeout=timeout
        )
    except subprocess.TimeoutExpired:
        log.error("Command timed out after %ss: %s", timeout, " ".join(cmd))
        raise RuntimeError(f"timed out after {timeout}s: {cmd[0]}") from None
    except OSError as e:
        log.error("Command could not be started: %s (%s)", " ".join(cmd), e)
        raise RuntimeError(str(e)) from e
    return proc.returncode, proc.stdout.strip(), proc.stderr.strip()

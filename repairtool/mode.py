import logging
import math
import random
import re
from datetime import date
from typing import Optional, Union

from .config import RepairConfig
from .errors import InvalidStatusFormat
from .models import MaintenanceMode, ModeAlgorithm

log = logging.getLogger(__name__)

# WeightedRandom: two of ten draws select Full (~20%)
RANDOM_MODULUS = 10
RANDOM_FULL_DRAWS = (2, 3)

# WeekNumberParity: ISO week mod 3; residue 2 selects Full (every third week)
WEEK_MODULUS = 3
WEEK_FULL_RESIDUES = (2,)

_PERCENT = re.compile(r"^\s*(\d+)(?:\.\d*)?\s*%?\s*$")


def parse_status(raw: Union[str, int, float, None]) -> int:
    """
    Convert a reported "Percent Repaired" value to an int, dropping the fractional part.
    Raises InvalidStatusFormat for anything that is not a number within 0-100.
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidStatusFormat(f"repair status is not numeric: {raw!r}")
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            raise InvalidStatusFormat(f"repair status is not numeric: {raw!r}")
        if raw < 0:
            raise InvalidStatusFormat(f"repair status is negative: {raw!r}")
        value = int(raw)
    else:
        m = _PERCENT.match(raw)
        if not m:
            raise InvalidStatusFormat(f"repair status is not numeric: {raw!r}")
        value = int(m.group(1))
    if value > 100:
        raise InvalidStatusFormat(f"repair status above 100%: {raw!r}")
    return value


def weighted_random(rng: random.Random) -> MaintenanceMode:
    draw = rng.randrange(RANDOM_MODULUS)
    return MaintenanceMode.FULL if draw in RANDOM_FULL_DRAWS else MaintenanceMode.INCREMENTAL


def week_number_parity(day: date) -> MaintenanceMode:
    week = day.isocalendar()[1]
    return MaintenanceMode.FULL if week % WEEK_MODULUS in WEEK_FULL_RESIDUES else MaintenanceMode.INCREMENTAL


class ModeSelector:
    """Chooses Full or Incremental repair for one node from its current repair status."""

    def __init__(self, config: RepairConfig, rng: Optional[random.Random] = None,
                 today: Optional[date] = None):
        self.algorithm = config.mode_algorithm
        self.threshold = config.force_full_threshold
        self.rng = rng or random.SystemRandom()
        self.today = today

    def select(self, status: int) -> MaintenanceMode:
        if status < self.threshold:
            log.info("Repair status below threshold (<%d%%), forcing Full Repair mode", self.threshold)
            return MaintenanceMode.FULL

        log.info("Repair status within threshold (>=%d%%), selecting mode via %s",
                 self.threshold, self.algorithm.value)
        if self.algorithm is ModeAlgorithm.WEEK_NUMBER:
            return week_number_parity(self.today or date.today())
        return weighted_random(self.rng)

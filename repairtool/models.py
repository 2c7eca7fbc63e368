from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True, order=True)
class MemberId:
    """
    Identifier of a cluster member, ordered numerically component by component.

    Dotted numeric addresses sort by their integer parts ("10.0.0.2" < "10.0.0.10").
    Anything else (hostnames, "localhost") sorts after all numeric addresses, by text.
    """
    sort_key: Tuple = field(repr=False)
    address: str = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> "MemberId":
        address = (text or "").strip()
        parts = address.split(".")
        if address and all(p.isdigit() for p in parts):
            return cls((0, tuple(int(p) for p in parts)), address)
        return cls((1, (address,)), address)

    def __str__(self) -> str:
        return self.address


class MaintenanceMode(Enum):
    FULL = "full"
    INCREMENTAL = "pr"

    @property
    def flag(self) -> str:
        # nodetool repair option
        return f"-{self.value}"

    @property
    def label(self) -> str:
        return "Full Repair" if self is MaintenanceMode.FULL else "Primary Range Repair"


class ModeAlgorithm(Enum):
    WEIGHTED_RANDOM = "weightedrandom"
    WEEK_NUMBER = "weeknumber"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ModeAlgorithm":
        """
        Resolve a configured algorithm name; unknown names fall back to WEIGHTED_RANDOM.
        The fallback is reported by the run itself (RepairConfig.algorithm_fallback), once logging is up.
        """
        name = (value or "").strip().lower()
        for algo in cls:
            if algo.value == name:
                return algo
        return cls.WEIGHTED_RANDOM


class Role(Enum):
    COMMANDER = "commander"
    FOLLOWER = "follower"


class RunOutcome(Enum):
    SUCCESS = 0
    FAILURE = 1


@dataclass
class RepairJob:
    member:        MemberId
    day:           str
    # Percent Repaired before and after the repair action
    status_before: Optional[int] = None
    status_after:  Optional[int] = None
    mode:          Optional[MaintenanceMode] = None
    done:          bool = False


@dataclass
class RunResult:
    outcome:  RunOutcome
    duration: float = 0.0
    reason:   str = ""
    repaired: List[MemberId] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is RunOutcome.SUCCESS

    @property
    def exit_code(self) -> int:
        return self.outcome.value

"""
Target domain objects for shipline.

A Target is a named unit of pipeline work with dependency edges,
an optional gate, required parameters and an action. TargetResult
records what happened to one target during a run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Any, List, Optional, Tuple

Predicate = Callable[[Any], bool]


class TargetStatus(Enum):
    """Outcome of a single target in a run."""
    EXECUTED = "executed"
    SKIPPED = "skipped"
    FAILED = "failed"
    NOT_RUN = "not_run"


@dataclass(frozen=True)
class Target:
    """
    A named, dependency-ordered unit of pipeline work.

    Attributes:
        name: Target name used on the command line
        action: Callable receiving the BuildContext
        depends_on: Names of targets that must run first
        gate: Predicate on the BuildContext; False skips the target silently
        requires: (description, predicate) pairs; any False fails the run
        description: Short help text
    """
    name: str
    action: Callable[[Any], None]
    depends_on: Tuple[str, ...] = ()
    gate: Optional[Predicate] = None
    requires: Tuple[Tuple[str, Predicate], ...] = ()
    description: str = ""


@dataclass
class TargetResult:
    """Result of one target in a run."""
    name: str
    status: TargetStatus
    duration: float = 0.0
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Per-target results of a pipeline run, in execution order."""
    results: List[TargetResult] = field(default_factory=list)

    def add(self, result: TargetResult) -> None:
        self.results.append(result)

    def names(self, status: TargetStatus) -> List[str]:
        return [r.name for r in self.results if r.status == status]

    @property
    def success(self) -> bool:
        return not self.names(TargetStatus.FAILED)

    @property
    def total_duration(self) -> float:
        return sum(r.duration for r in self.results)

"""
Target runner for shipline.

Resolves a requested target's dependency closure, orders it
topologically and executes each target at most once, stopping the
whole run at the first failure. There is no retry and no rollback:
re-running the pipeline is the recovery mechanism.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, NoReturn, Optional, Sequence

from ..domain.target import Target, TargetResult, TargetStatus, RunSummary
from ..exit_codes import (
    CyclicDependencyError,
    ParameterMissingError,
    TargetFailedError,
    UnknownTargetError,
)

logger = logging.getLogger(__name__)


class TargetRunner:
    """
    Executes targets in dependency order.

    Example:
        runner = TargetRunner(create_targets(), on_target_failed=notify)
        summary = runner.run(context, ["Push"])
    """

    def __init__(
        self,
        targets: Sequence[Target],
        on_target_failed: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initialize TargetRunner.

        Args:
            targets: All defined targets, in declaration order
            on_target_failed: Called with the failing target's name
            clock: Monotonic time source for durations
        """
        self.targets: Dict[str, Target] = {}
        for target in targets:
            if target.name in self.targets:
                raise ValueError(f"Duplicate target name '{target.name}'")
            self.targets[target.name] = target
        self.on_target_failed = on_target_failed
        self.clock = clock
        self.last_summary: Optional[RunSummary] = None

    def _get(self, name: str) -> Target:
        target = self.targets.get(name)
        if target is None:
            raise UnknownTargetError(name, list(self.targets))
        return target

    def plan(self, requested: Iterable[str]) -> List[str]:
        """
        Compute the execution order for the requested targets.

        Returns:
            Names of every requested target and its transitive
            dependencies, each once, dependencies first

        Raises:
            UnknownTargetError: If a name (or dependency) is not defined
            CyclicDependencyError: If dependencies form a cycle
        """
        order: List[str] = []
        visiting: List[str] = []

        def visit(name: str) -> None:
            if name in order:
                return
            if name in visiting:
                raise CyclicDependencyError(visiting[visiting.index(name):] + [name])
            target = self._get(name)
            visiting.append(name)
            for dependency in target.depends_on:
                visit(dependency)
            visiting.pop()
            order.append(name)

        for name in requested:
            visit(name)
        return order

    def _check_requirements(self, target: Target, context: Any) -> None:
        for description, predicate in target.requires:
            if not predicate(context):
                raise ParameterMissingError(target.name, description)

    def run(self, context: Any, requested: Iterable[str], skip: Iterable[str] = ()) -> RunSummary:
        """
        Run the requested targets and their dependencies.

        Args:
            context: BuildContext passed to gates, requirements and actions
            requested: Target names to run
            skip: Target names to mark skipped without executing

        Returns:
            RunSummary of every planned target

        Raises:
            TargetFailedError: When a target fails; later targets are not run
        """
        order = self.plan(requested)
        skipped = set(skip)
        for name in skipped:
            self._get(name)

        summary = RunSummary()
        self.last_summary = summary

        # Requirements of every scheduled target are checked before anything runs
        for name in order:
            if name in skipped:
                continue
            try:
                self._check_requirements(self.targets[name], context)
            except ParameterMissingError as e:
                logger.error(str(e))
                self._fail(summary, order, name, 0.0, e)

        for name in order:
            target = self.targets[name]

            if name in skipped:
                logger.info(f"Skipping {name} (requested)")
                summary.add(TargetResult(name, TargetStatus.SKIPPED))
                continue

            start = self.clock()
            try:
                if target.gate is not None and not target.gate(context):
                    logger.info(f"Skipping {name} (condition not met)")
                    summary.add(TargetResult(name, TargetStatus.SKIPPED))
                    continue

                logger.info(f"=== {name} ===")
                target.action(context)
            except Exception as e:
                duration = self.clock() - start
                logger.error(f"Target {name} failed after {duration:.1f}s: {e}")
                self._fail(summary, order, name, duration, e)

            duration = self.clock() - start
            logger.info(f"{name} succeeded in {duration:.1f}s")
            summary.add(TargetResult(name, TargetStatus.EXECUTED, duration))

        return summary

    def _fail(self, summary: RunSummary, order: List[str], failed: str, duration: float, error: Exception) -> NoReturn:
        """Record the failure, mark unfinished targets NOT_RUN, notify and raise."""
        recorded = {r.name for r in summary.results}
        for name in order:
            if name in recorded:
                continue
            if name == failed:
                summary.add(TargetResult(name, TargetStatus.FAILED, duration, str(error)))
            else:
                summary.add(TargetResult(name, TargetStatus.NOT_RUN))
        self._notify_failure(failed)
        raise TargetFailedError(failed, error) from error

    def _notify_failure(self, name: str) -> None:
        if self.on_target_failed is None:
            return
        try:
            self.on_target_failed(name)
        except Exception as e:
            # The run is already failing; report the hook error alongside it
            logger.error(f"Failure notification for {name} could not be sent: {e}")

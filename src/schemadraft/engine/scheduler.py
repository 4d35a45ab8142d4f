"""Recompute rules and their scheduling.

A rule names the state paths it reads. Whenever one of those values differs
from what the rule last saw, the rule fires: synchronous rules run during the
next ``flush()``, debounced rules get a trailing deadline and run once it has
passed (``poll()``) or when the session is settled (``settle()``).

Everything runs on the caller's thread. Time only enters through the clock
callable, which makes debouncing deterministic under test.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from schemadraft.engine.paths import get_path
from schemadraft.exceptions import RecomputeLoopError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class Rule:
    """A recompute rule registered with a scheduler."""

    name: str
    dependencies: tuple[str, ...]
    callback: Callable[..., None]
    debounce: float | None = None
    last_values: tuple[Any, ...] = field(default=(), repr=False)
    deadline: float | None = None
    active: bool = True

    @property
    def pending(self) -> bool:
        """True while a debounced run is waiting for its deadline."""
        return self.deadline is not None


class RecomputeScheduler:
    """Runs the recompute rules of one session.

    Rules run in registration order, which strategies use as the topological
    order of their rule graph. A flush repeats passes until no dependency
    changed, so a rule that writes another rule's input is picked up within
    the same flush.
    """

    def __init__(self, root: Any, clock: Clock | None = None, max_passes: int = 32) -> None:
        """Initialize the scheduler.

        Args:
            root: Object the dependency paths resolve against
            clock: Monotonic time source in seconds
            max_passes: Flush passes allowed before giving up
        """
        self._root = root
        self._clock = clock or time.monotonic
        self._max_passes = max_passes
        self._rules: list[Rule] = []
        self._flushing = False

    @property
    def rules(self) -> list[Rule]:
        """Active rules in run order."""
        return list(self._rules)

    @property
    def pending(self) -> bool:
        """True if any debounced rule is waiting to run."""
        return any(rule.pending for rule in self._rules)

    def now(self) -> float:
        """Current clock reading."""
        return self._clock()

    def watch(
        self,
        name: str,
        dependencies: Iterable[str],
        callback: Callable[..., None],
        *,
        debounce: float | None = None,
        immediate: bool = False,
    ) -> Rule:
        """Register a rule.

        Args:
            name: Rule name (used by ``run`` and in logs)
            dependencies: State paths the rule reads
            callback: Called with the current dependency values as positional args
            debounce: Trailing debounce window in seconds (None runs synchronously)
            immediate: Run once right away with the current values

        Returns:
            The registered rule
        """
        rule = Rule(
            name=name, dependencies=tuple(dependencies), callback=callback, debounce=debounce
        )
        rule.last_values = self._read(rule)
        self._rules.append(rule)
        if immediate:
            self._run(rule, rule.last_values)
        return rule

    def unwatch(self, rule: Rule) -> None:
        """Remove a rule; a pending debounced run is dropped."""
        rule.active = False
        rule.deadline = None
        if rule in self._rules:
            self._rules.remove(rule)

    def flush(self) -> None:
        """Run every synchronous rule whose inputs changed, until nothing changes.

        Debounced rules whose inputs changed get their deadline (re)armed.

        Raises:
            RecomputeLoopError: If rules are still firing after ``max_passes`` passes
        """
        # Writes made by a rule are picked up by the flush already running
        if self._flushing:
            return
        self._flushing = True
        try:
            for _ in range(self._max_passes):
                fired = self._pass()
                if not fired:
                    return
            raise RecomputeLoopError(self._max_passes, fired)
        finally:
            self._flushing = False

    def poll(self, now: float | None = None) -> int:
        """Run debounced rules whose deadline has passed.

        Returns:
            Number of debounced rules that ran
        """
        now = self._clock() if now is None else now
        ran = 0
        for rule in list(self._rules):
            if rule.active and rule.deadline is not None and rule.deadline <= now:
                rule.deadline = None
                self._run(rule, self._read(rule))
                ran += 1
        self.flush()
        return ran

    def settle(self) -> int:
        """Run all pending debounced rules now, regardless of their deadline.

        Returns:
            Number of debounced rules that ran
        """
        self.flush()
        ran = 0
        for _ in range(self._max_passes):
            due = [rule for rule in self._rules if rule.pending]
            if not due:
                return ran
            for rule in due:
                if rule.active and rule.deadline is not None:
                    rule.deadline = None
                    self._run(rule, self._read(rule))
                    ran += 1
            self.flush()
        still_pending = [rule.name for rule in self._rules if rule.pending]
        raise RecomputeLoopError(self._max_passes, still_pending)

    def run(self, name: str) -> None:
        """Force the named rule(s) to run now with current values."""
        for rule in [rule for rule in self._rules if rule.name == name]:
            rule.deadline = None
            rule.last_values = self._read(rule)
            self._run(rule, rule.last_values)
        self.flush()

    def cancel(self) -> None:
        """Drop every pending debounced run."""
        for rule in self._rules:
            if rule.pending:
                logger.debug("Cancelled pending rule %s", rule.name)
            rule.deadline = None

    def close(self) -> None:
        """Cancel pending work and forget all rules."""
        self.cancel()
        for rule in self._rules:
            rule.active = False
        self._rules.clear()

    def _pass(self) -> list[str]:
        fired: list[str] = []
        for rule in list(self._rules):
            if not rule.active:
                continue
            values = self._read(rule)
            if values == rule.last_values:
                continue
            rule.last_values = values
            fired.append(rule.name)
            if rule.debounce is not None:
                rule.deadline = self._clock() + rule.debounce
                logger.debug("Scheduled %s at %.3f", rule.name, rule.deadline)
            else:
                self._run(rule, values)
        return fired

    def _read(self, rule: Rule) -> tuple[Any, ...]:
        return tuple(copy.deepcopy(get_path(self._root, path)) for path in rule.dependencies)

    def _run(self, rule: Rule, values: tuple[Any, ...]) -> None:
        logger.debug("Running rule %s", rule.name)
        rule.callback(*values)

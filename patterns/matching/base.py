"""
First-match rule scan shared by Patterns and ConsumingPatterns.

Rules are evaluated in declaration order and the first rule whose
guard accepts the key wins. Guards after the winner are never called.

Aliasing: an evaluator built from a single list keeps a reference to
that list, so edits the caller makes to it later are visible to the
evaluator. Pass copy_rules=True (or set patterns.copy_rules) to
snapshot the rules at construction instead. Rules are validated only at
construction, so anything added to an aliased list later must also be a
Rule. Editing an aliased list while another thread is evaluating is the
caller's responsibility.
"""

from typing import Generic, List, Optional, Sequence, Tuple, TypeVar, TYPE_CHECKING
import logging
import time

from patterns.logger import logger
from patterns.matching.rule import Rule
from patterns.matching.trace import EvaluationTrace, Resolution
from patterns.settings import settings

if TYPE_CHECKING:
    from patterns.matching.trace import TraceCollector


K = TypeVar("K")
H = TypeVar("H")


def as_rule_list(rules: Tuple) -> Sequence[Rule]:
    """
    Normalize factory arguments.

    A single list or tuple of rules is returned as is, so a list stays
    aliased; varargs rules are collected into a new list.
    """
    if len(rules) == 1 and isinstance(rules[0], (list, tuple)):
        return rules[0]
    return list(rules)


class RuleScan(Generic[K, H]):
    """Ordered rule list plus the first-match lookup."""

    def __init__(self, rules: Sequence[Rule], copy_rules: Optional[bool] = None):
        if rules is None:
            raise TypeError("rules must not be None")
        for index, rule in enumerate(rules):
            if not isinstance(rule, Rule):
                raise TypeError(
                    f"rule #{index} must be a Rule, got {type(rule).__name__}"
                )

        if copy_rules is None:
            copy_rules = settings.get_nested("patterns.copy_rules", False)

        self._rules: Sequence[Rule] = tuple(rules) if copy_rules else rules

        logger.event(
            "patterns_created",
            level=logging.DEBUG,
            evaluator=type(self).__name__,
            rules=len(self._rules),
            aliased=not copy_rules,
        )

    @property
    def rules(self) -> Tuple[Rule, ...]:
        """Snapshot of the current rules in evaluation order."""
        return tuple(self._rules)

    def _find(self, key: K) -> Optional[Rule]:
        for rule in self._rules:
            if rule.matches(key):
                return rule
        return None

    def explain(
        self,
        key: K,
        collector: Optional["TraceCollector"] = None
    ) -> EvaluationTrace:
        """
        Trace which rule `key` resolves to, without running any handler.

        Args:
            key: Key to resolve
            collector: Optional collector the trace is added to

        Returns:
            EvaluationTrace with every guard consulted, in order
        """
        trace = EvaluationTrace(
            evaluator=type(self).__name__,
            key=repr(key),
            max_entries=settings.get_nested("patterns.tracing.max_entries", 1000),
        )

        for index, rule in enumerate(self._rules):
            start_time = time.perf_counter()
            result = rule.matches(key)
            elapsed_ms = (time.perf_counter() - start_time) * 1000

            trace.record(index, rule.description, result, elapsed_ms)
            if result:
                trace.set_result(Resolution.MATCHED, index, rule.description)
                break
        else:
            trace.set_result(Resolution.NO_MATCH)

        if collector is not None:
            collector.add_trace(trace)

        if (settings.get_nested("patterns.tracing.log_traces", False)
                and logger.is_enabled_for(logging.DEBUG)):
            logger.debug(trace.to_compact_string())

        return trace

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        rules: List[str] = [rule.description for rule in self._rules]
        return f"{type(self).__name__}(rules={rules!r})"

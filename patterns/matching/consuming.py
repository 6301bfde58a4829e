"""
Effect-producing pattern evaluator.

ConsumingPatterns hands a key to the first rule whose guard accepts it.
Handlers are run for their side effects; their return values are ignored.
"""

from typing import Any, Callable, Optional, TypeVar

from patterns.matching.base import RuleScan, as_rule_list
from patterns.matching.errors import DEFAULT_CONSUMER_HINT, NoSuchPatternError


K = TypeVar("K")


class ConsumingPatterns(RuleScan[K, None]):
    """
    Pseudo pattern match with side effects.

    Example:
        seen = []
        target = ConsumingPatterns.of(
            when(equals_to(3), then_accept_with(seen.append)),
            or_else(then_run(lambda: seen.append("other"))),
        )
        for i in (3, 4):
            target(i)   # seen == [3, "other"]
    """

    @classmethod
    def of(cls, *rules: Any, copy_rules: Optional[bool] = None) -> "ConsumingPatterns":
        """
        Declare patterns.

        Args:
            *rules: Rules in evaluation order, or a single list or tuple of rules
            copy_rules: Snapshot the rules instead of keeping the list

        Returns:
            ConsumingPatterns over the rules
        """
        return cls(as_rule_list(rules), copy_rules=copy_rules)

    def handle(self, key: K) -> None:
        """
        Run the first rule matching `key`.

        Raises:
            NoSuchPatternError: If no rule matches
        """
        rule = self._find(key)
        if rule is None:
            raise NoSuchPatternError(key, hint=DEFAULT_CONSUMER_HINT)
        rule.apply(key)

    def or_else_do(self, default_consumer: Callable[[K], Any]) -> Callable[[K], None]:
        """Function running the matching rule, or `default_consumer(key)` when none matches."""
        if not callable(default_consumer):
            raise TypeError("default_consumer must be callable")

        def consume(key: K) -> None:
            rule = self._find(key)
            if rule is None:
                default_consumer(key)
            else:
                rule.apply(key)
        return consume

    def or_else_throw(
        self,
        exception_supplier: Callable[[], BaseException]
    ) -> Callable[[K], None]:
        """Function running the matching rule, or raising `exception_supplier()` when none matches."""
        if not callable(exception_supplier):
            raise TypeError("exception_supplier must be callable")

        def consume(key: K) -> None:
            rule = self._find(key)
            if rule is None:
                raise exception_supplier()
            rule.apply(key)
        return consume

    def __call__(self, key: K) -> None:
        self.handle(key)


def consuming_patterns(*rules: Any, copy_rules: Optional[bool] = None) -> ConsumingPatterns:
    """Declare consuming patterns. Same as ConsumingPatterns.of()."""
    return ConsumingPatterns.of(*rules, copy_rules=copy_rules)

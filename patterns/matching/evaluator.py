"""
Value-producing pattern evaluator.

Patterns maps a key to the value computed by the first rule whose guard
accepts it. Rules are evaluated in declaration order.
"""

from typing import Any, Callable, Optional, TypeVar

from patterns.matching.base import RuleScan, as_rule_list
from patterns.matching.errors import NoSuchPatternError, NullResultError


K = TypeVar("K")
V = TypeVar("V")


class Patterns(RuleScan[K, V]):
    """
    Pseudo pattern match returning a value.

    Example:
        target = Patterns.of(
            when(equals_to(3), then("b")),
            when(lambda i: i > 0, then_apply(str)),
            or_else(then("a")),
        )
        [target(i) for i in (0, 1, 3)]   # ["a", "1", "b"]

    The instance is callable; target(key) is target.get(key).
    """

    @classmethod
    def of(cls, *rules: Any, copy_rules: Optional[bool] = None) -> "Patterns":
        """
        Declare patterns.

        Args:
            *rules: Rules in evaluation order, or a single list or tuple of rules
            copy_rules: Snapshot the rules instead of keeping the list

        Returns:
            Patterns over the rules
        """
        return cls(as_rule_list(rules), copy_rules=copy_rules)

    def get(self, key: K) -> V:
        """
        Value of the first rule matching `key`.

        Raises:
            NoSuchPatternError: If no rule matches
            NullResultError: If the matching rule returns None
        """
        rule = self._find(key)
        if rule is None:
            raise NoSuchPatternError(key)

        result = rule.apply(key)
        if result is None:
            raise NullResultError(key)
        return result

    def get_optionally(self, key: K) -> Optional[V]:
        """
        Value of the first rule matching `key`, or None.

        None is returned both when no rule matches and when the
        matching rule returns None.
        """
        rule = self._find(key)
        if rule is None:
            return None
        return rule.apply(key)

    def optional(self) -> Callable[[K], Optional[V]]:
        """Function mapping a key to its value or None."""
        return self.get_optionally

    def or_else(self, default_value: V) -> Callable[[K], V]:
        """Function mapping a key to its value, or `default_value` when empty."""
        def resolve(key: K) -> V:
            value = self.get_optionally(key)
            return default_value if value is None else value
        return resolve

    def or_else_get(self, default_value_supplier: Callable[[], V]) -> Callable[[K], V]:
        """Function mapping a key to its value, or `default_value_supplier()` when empty."""
        if not callable(default_value_supplier):
            raise TypeError("default_value_supplier must be callable")

        def resolve(key: K) -> V:
            value = self.get_optionally(key)
            return default_value_supplier() if value is None else value
        return resolve

    def or_else_throw(
        self,
        exception_supplier: Callable[[], BaseException]
    ) -> Callable[[K], V]:
        """
        Function mapping a key to its value.

        The returned function raises `exception_supplier()` when no rule
        matches or the matching rule returns None. The exception is only
        built on that path.
        """
        if not callable(exception_supplier):
            raise TypeError("exception_supplier must be callable")

        def resolve(key: K) -> V:
            value = self.get_optionally(key)
            if value is None:
                raise exception_supplier()
            return value
        return resolve

    def __call__(self, key: K) -> V:
        return self.get(key)


def patterns(*rules: Any, copy_rules: Optional[bool] = None) -> Patterns:
    """Declare patterns. Same as Patterns.of()."""
    return Patterns.of(*rules, copy_rules=copy_rules)

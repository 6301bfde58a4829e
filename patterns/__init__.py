"""
patterns - declarative first-match dispatch.

Replaces if/elif chains with an ordered list of (guard, handler) rules:

    from patterns import Patterns, when, equals_to, then, then_apply, or_else

    label = Patterns.of(
        when(equals_to(0), then("zero")),
        when(lambda i: i < 0, then_apply(lambda i: f"minus {-i}")),
        or_else(then_apply(str)),
    )
    label(-2)   # "minus 2"
"""

from patterns.matching import *  # noqa: F401,F403
from patterns.matching import __all__

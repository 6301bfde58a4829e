"""
Ordered predicate-based dispatch.

Main components:
- Rule: immutable (guard, handler) pair
- Patterns: first-match evaluator returning a value
- ConsumingPatterns: first-match evaluator running a side effect
- Rule constructors: when, equals_to, anything, instance_of, when_match,
  or_else, or_else_throw, then, then_supply, then_apply,
  then_accept_with, then_run
- EvaluationTrace / TraceCollector: which guards a key went through
"""

from patterns.matching.errors import (
    PatternError,
    NoSuchPatternError,
    NullResultError,
)
from patterns.matching.rule import (
    Rule,
    NOTHING,
    narrow,
    describe,
    anything,
    equals_to,
    instance_of,
    then,
    then_supply,
    then_apply,
    then_accept_with,
    then_run,
    when,
    or_else,
    or_else_throw,
    when_match,
)
from patterns.matching.base import RuleScan
from patterns.matching.evaluator import Patterns, patterns
from patterns.matching.consuming import ConsumingPatterns, consuming_patterns
from patterns.matching.trace import (
    EvaluationTrace,
    GuardEntry,
    Resolution,
    TraceCollector,
    TraceSummary,
)


__all__ = [
    # Errors
    "PatternError",
    "NoSuchPatternError",
    "NullResultError",
    # Rules
    "Rule",
    "NOTHING",
    "narrow",
    "describe",
    "anything",
    "equals_to",
    "instance_of",
    "then",
    "then_supply",
    "then_apply",
    "then_accept_with",
    "then_run",
    "when",
    "or_else",
    "or_else_throw",
    "when_match",
    # Evaluators
    "RuleScan",
    "Patterns",
    "patterns",
    "ConsumingPatterns",
    "consuming_patterns",
    # Trace
    "EvaluationTrace",
    "GuardEntry",
    "Resolution",
    "TraceCollector",
    "TraceSummary",
]

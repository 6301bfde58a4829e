"""
Evaluation Trace and Trace Collector for pattern evaluation.

Answers "which rule did this key land on, and which guards were
consulted before it" without running any handler. Produced by
Patterns.explain() and ConsumingPatterns.explain().
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Resolution(str, Enum):
    """
    How a key was resolved.

    - MATCHED: a rule guard accepted the key
    - NO_MATCH: every guard rejected the key
    - NONE: not resolved yet
    """
    MATCHED = "matched"
    NO_MATCH = "no_match"
    NONE = "none"


@dataclass
class GuardEntry:
    """
    Record of a single guard evaluation.

    Attributes:
        index: Position of the rule in declaration order
        rule: Description of the rule the guard belongs to
        result: Whether the guard accepted the key
        elapsed_ms: Time taken by the guard in milliseconds
        timestamp: When the guard was evaluated
    """
    index: int
    rule: str
    result: bool
    elapsed_ms: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "index": self.index,
            "rule": self.rule,
            "result": self.result,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "timestamp": self.timestamp.isoformat()
        }

    def to_compact_string(self) -> str:
        result_str = "PASS" if self.result else "FAIL"
        return f"  #{self.index} {self.rule}: {result_str}"


@dataclass
class EvaluationTrace:
    """
    Trace of guard evaluations for a single key.

    Attributes:
        evaluator: Name of the evaluator class that produced the trace
        key: repr() of the evaluated key
        entries: Guard evaluations in order, up to and including the winner
        resolution: How the key was resolved
        matched_index: Position of the winning rule (if any)
        matched_rule: Description of the winning rule (if any)
        max_entries: Upper bound of entries kept; the rest are only counted
        dropped_entries: Number of guard evaluations not kept
        start_time: When evaluation started
        end_time: When evaluation completed
    """
    evaluator: str
    key: str
    entries: List[GuardEntry] = field(default_factory=list)
    resolution: Resolution = Resolution.NONE
    matched_index: Optional[int] = None
    matched_rule: Optional[str] = None
    max_entries: int = 1000
    dropped_entries: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    def record(
        self,
        index: int,
        rule: str,
        result: bool,
        elapsed_ms: float = 0.0
    ) -> None:
        """
        Record a guard evaluation.

        Args:
            index: Position of the rule
            rule: Rule description
            result: Whether the guard accepted the key
            elapsed_ms: Time taken by the guard
        """
        if len(self.entries) >= self.max_entries:
            self.dropped_entries += 1
            return

        self.entries.append(GuardEntry(
            index=index,
            rule=rule,
            result=result,
            elapsed_ms=elapsed_ms
        ))

    def set_result(
        self,
        resolution: Resolution,
        matched_index: Optional[int] = None,
        matched_rule: Optional[str] = None
    ) -> None:
        """
        Set the final result of resolution.

        Args:
            resolution: How the key was resolved
            matched_index: Position of the winning rule (if any)
            matched_rule: Description of the winning rule (if any)
        """
        self.resolution = resolution
        self.matched_index = matched_index
        self.matched_rule = matched_rule
        self.end_time = datetime.now()

    @property
    def matched(self) -> bool:
        return self.resolution == Resolution.MATCHED

    @property
    def guards_checked(self) -> int:
        """Number of guards that were evaluated."""
        return len(self.entries) + self.dropped_entries

    @property
    def total_elapsed_ms(self) -> float:
        """Total time spent in recorded guards."""
        return sum(e.elapsed_ms for e in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert trace to dictionary representation.

        Suitable for JSON serialization and storage.
        """
        return {
            "evaluator": self.evaluator,
            "key": self.key,
            "resolution": self.resolution.value,
            "matched_index": self.matched_index,
            "matched_rule": self.matched_rule,
            "guards_checked": self.guards_checked,
            "dropped_entries": self.dropped_entries,
            "total_elapsed_ms": round(self.total_elapsed_ms, 3),
            "entries": [e.to_dict() for e in self.entries],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None
        }

    def to_compact_string(self) -> str:
        """
        Convert to a compact multi-line string.

        Format:
        [Patterns] 3 -> #0 equals_to(3) (matched)
          #0 equals_to(3): PASS
        """
        if self.matched:
            target = f"#{self.matched_index} {self.matched_rule}"
        else:
            target = "N/A"

        lines = [f"[{self.evaluator}] {self.key} -> {target} ({self.resolution.value})"]
        for entry in self.entries:
            lines.append(entry.to_compact_string())
        if self.dropped_entries:
            lines.append(f"  ... {self.dropped_entries} more")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"EvaluationTrace(evaluator={self.evaluator!r}, "
            f"key={self.key}, "
            f"resolution={self.resolution.value}, "
            f"checked={self.guards_checked})"
        )


@dataclass
class TraceSummary:
    """
    Summary statistics for a collection of traces.

    Attributes:
        total_traces: Total number of traces
        by_resolution: Count by resolution type
        by_evaluator: Count by evaluator class
        total_guards_checked: Total guards evaluated
        total_elapsed_ms: Total time spent in guards
        matched_rules: Count by winning rule description
    """
    total_traces: int = 0
    by_resolution: Dict[str, int] = field(default_factory=dict)
    by_evaluator: Dict[str, int] = field(default_factory=dict)
    total_guards_checked: int = 0
    total_elapsed_ms: float = 0.0
    matched_rules: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_traces": self.total_traces,
            "by_resolution": self.by_resolution,
            "by_evaluator": self.by_evaluator,
            "total_guards_checked": self.total_guards_checked,
            "total_elapsed_ms": round(self.total_elapsed_ms, 3),
            "avg_guards_per_trace": (
                round(self.total_guards_checked / self.total_traces, 2)
                if self.total_traces > 0 else 0
            ),
            "matched_rules": self.matched_rules
        }


class TraceCollector:
    """
    Collector for traces across many keys.

    Example:
        collector = TraceCollector()
        for key in keys:
            target.explain(key, collector=collector)
        summary = collector.get_summary()
    """

    def __init__(self):
        self._traces: List[EvaluationTrace] = []

    def add_trace(self, trace: EvaluationTrace) -> None:
        self._traces.append(trace)

    def get_traces(self) -> List[EvaluationTrace]:
        """Get all collected traces."""
        return list(self._traces)

    def get_traces_by_resolution(
        self,
        resolution: Resolution
    ) -> List[EvaluationTrace]:
        return [t for t in self._traces if t.resolution == resolution]

    def get_summary(self) -> TraceSummary:
        """
        Get summary statistics for all traces.

        Returns:
            TraceSummary with aggregated statistics
        """
        summary = TraceSummary(total_traces=len(self._traces))

        for trace in self._traces:
            res_key = trace.resolution.value
            summary.by_resolution[res_key] = (
                summary.by_resolution.get(res_key, 0) + 1
            )

            summary.by_evaluator[trace.evaluator] = (
                summary.by_evaluator.get(trace.evaluator, 0) + 1
            )

            summary.total_guards_checked += trace.guards_checked
            summary.total_elapsed_ms += trace.total_elapsed_ms

            if trace.matched_rule:
                summary.matched_rules[trace.matched_rule] = (
                    summary.matched_rules.get(trace.matched_rule, 0) + 1
                )

        return summary

    def clear(self) -> None:
        self._traces.clear()

    def __len__(self) -> int:
        return len(self._traces)

    def __iter__(self):
        return iter(self._traces)

    def __repr__(self) -> str:
        return f"TraceCollector(traces={len(self._traces)})"

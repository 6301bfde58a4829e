"""
Tests for the value-producing evaluator (patterns/matching/evaluator.py).

Covers:
- get(): first match, no match, None result, callable form
- get_optionally() / optional()
- or_else(), or_else_get(), or_else_throw()
- type matching with when_match()
- aliasing of the rule list passed at construction

Run with: pytest tests/test_patterns.py -v
"""

import pytest

from patterns.matching.errors import NoSuchPatternError, NullResultError, PatternError
from patterns.matching.evaluator import Patterns, patterns
from patterns.matching.rule import (
    equals_to,
    or_else,
    or_else_throw,
    then,
    then_apply,
    then_supply,
    when,
    when_match,
)


class ExpectedError(Exception):
    pass


# =============================================================================
# get()
# =============================================================================

class TestGet:
    """Required-value resolution."""

    def test_value_or_applied_result_for_each_key(self, integer_rules):
        target = patterns(*integer_rules, or_else(then("a")))

        actual = [target(i) for i in (-1, 0, 1, 2, 3, 4)]

        assert actual == ["0", "a", "1", "2", "b", "c"]

    def test_no_matching_rule_raises(self):
        target = patterns(
            when(equals_to(3), then("b")),
            when(lambda i: i > 0, then_apply(str)),
            when(lambda i: i < 0, then_apply(lambda i: str(i + 1))),
        )

        with pytest.raises(NoSuchPatternError) as exc_info:
            [target(i) for i in (-1, 0, 1, 2, 3)]

        assert str(exc_info.value) == (
            "for key: 0. To allow this pattern to return nullable value, "
            "consider using Patterns.get_optionally or so."
        )
        assert exc_info.value.key == 0

    def test_no_matching_rule_is_lookup_error(self):
        target = patterns(when(equals_to(3), then("b")))

        with pytest.raises(LookupError):
            target.get(1)

    def test_or_else_throw_rule_raises_custom_error(self):
        target = patterns(
            when(equals_to(3), then("b")),
            or_else_throw(lambda key: ExpectedError(key)),
        )

        with pytest.raises(ExpectedError):
            [target(i) for i in (-1, 0, 1, 2, 3)]

    def test_none_result_raises_null_result_error(self):
        target = patterns(
            when(lambda i: i is None, then("b")),
            when(equals_to(3), then("b")),
            when(lambda i: i > 0, then_apply(str)),
            or_else(lambda anything: None),
        )

        with pytest.raises(NullResultError) as exc_info:
            target.get(0)

        assert str(exc_info.value) == (
            "Pattern computed null result. To allow this pattern to return "
            "nullable value, consider using Patterns.get_optionally or so."
        )

    def test_null_result_and_no_match_are_distinct(self):
        assert not issubclass(NullResultError, NoSuchPatternError)
        assert not issubclass(NoSuchPatternError, NullResultError)
        assert issubclass(NullResultError, PatternError)
        assert issubclass(NoSuchPatternError, PatternError)

    def test_falsy_values_are_present(self):
        target = patterns(
            when(equals_to(0), then(0)),
            when(equals_to(1), then("")),
            or_else(then(False)),
        )

        assert target.get(0) == 0
        assert target.get(1) == ""
        assert target.get(2) is False

    def test_none_key_is_matched_by_equality(self):
        target = patterns(
            when(equals_to(None), then("none")),
            or_else(then("some")),
        )

        assert target(None) == "none"
        assert target(1) == "some"

    def test_type_matching(self, hierarchy):
        A, B, C = hierarchy
        target = patterns(
            when_match(B, then_apply(lambda b: f"it's a B. value: {b.value}.")),
            when_match(C, then_apply(C.say)),
            when_match(C, lambda c: c is None, then_apply(C.say)),
            or_else(then("it's a plain A.")),
        )

        actual = [target(x) for x in (A("aaa"), B("bbb"), C("ccc"))]

        assert actual == ["it's a plain A.", "it's a B. value: bbb.", "C here. I've got ccc."]


# =============================================================================
# First-match semantics
# =============================================================================

class TestFirstMatch:
    """Declaration order decides; later rules are never consulted."""

    def test_later_matching_handler_is_never_called(self):
        calls = []
        target = patterns(
            when(lambda i: i > 0, lambda i: calls.append("first") or "first"),
            when(lambda i: i > 1, lambda i: calls.append("second") or "second"),
        )

        assert target(5) == "first"
        assert calls == ["first"]

    def test_later_guards_are_never_evaluated(self):
        checked = []

        def guard(name, result):
            def check(key):
                checked.append(name)
                return result
            return check

        target = patterns(
            when(guard("g1", False), then(1)),
            when(guard("g2", True), then(2)),
            when(guard("g3", True), then(3)),
        )

        assert target(0) == 2
        assert checked == ["g1", "g2"]

    def test_catch_all_never_raises_no_match(self):
        target = patterns(when(equals_to(1), then("one")), or_else(then("other")))

        for key in (1, 2, "x", None, object()):
            target.get(key)

    def test_secondary_predicate_only_sees_matching_type(self):
        seen = []

        def where(key):
            seen.append(key)
            return key.startswith("a")

        target = patterns(
            when_match(str, where, then("a-string")),
            or_else(then("other")),
        )

        assert [target(k) for k in (1, "abc", 2.0, "xyz")] == [
            "other", "a-string", "other", "other"
        ]
        assert seen == ["abc", "xyz"]

    def test_guard_errors_propagate(self):
        target = patterns(when(lambda i: 1 / i > 0, then("positive")))

        with pytest.raises(ZeroDivisionError):
            target.get_optionally(0)


# =============================================================================
# get_optionally() / optional()
# =============================================================================

class TestGetOptionally:
    """Optional resolution."""

    def test_value_or_applied_result_for_each_key(self, integer_rules):
        target = patterns(*integer_rules, or_else(then("a")))

        actual = [target.optional()(i) for i in (-1, 0, 1, 2, 3, 4)]

        assert actual == ["0", "a", "1", "2", "b", "c"]

    def test_no_matching_rule_returns_none(self):
        target = patterns(
            when(equals_to(3), then("b")),
            when(lambda i: i > 0, then_apply(str)),
            when(lambda i: i < 0, then_apply(lambda i: str(i + 1))),
        )

        assert target.get_optionally(0) is None

    def test_none_result_returns_none(self):
        target = patterns(or_else(lambda anything: None))

        assert target.get_optionally(0) is None
        with pytest.raises(NullResultError):
            target.get(0)

    def test_or_else_throw_rule_still_raises(self):
        target = patterns(
            when(equals_to(3), then("b")),
            or_else_throw(lambda key: ExpectedError()),
        )

        with pytest.raises(ExpectedError):
            [target.optional()(i) for i in (-1, 0, 1, 2, 3)]

    def test_type_matching(self, hierarchy):
        A, B, C = hierarchy
        target = patterns(
            when_match(B, then_apply(lambda b: f"it's a B. value: {b.value}.")),
            when_match(C, then_apply(C.say)),
            or_else(then("it's a plain A.")),
        )

        actual = [target.optional()(x) for x in (A("aaa"), B("bbb"), C("ccc"))]

        assert actual == ["it's a plain A.", "it's a B. value: bbb.", "C here. I've got ccc."]


# =============================================================================
# Fallback strategies
# =============================================================================

class TestFallbacks:
    """or_else(), or_else_get(), or_else_throw()."""

    def test_or_else_default_value(self, integer_rules):
        target = patterns(*integer_rules)

        actual = [target.or_else("x")(i) for i in (-1, 0, 1, 2, 3, 4)]

        assert actual == ["0", "x", "1", "2", "b", "c"]

    def test_or_else_get_default_supplier(self, integer_rules):
        target = patterns(*integer_rules)

        actual = [target.or_else_get(lambda: "x")(i) for i in (-1, 0, 1, 2, 3, 4)]

        assert actual == ["0", "x", "1", "2", "b", "c"]

    def test_or_else_get_supplier_is_lazy(self, integer_rules):
        calls = []
        target = patterns(*integer_rules)
        resolve = target.or_else_get(lambda: calls.append(1) or "x")

        assert [resolve(i) for i in (1, 2, 3)] == ["1", "2", "b"]
        assert calls == []

        assert resolve(0) == "x"
        assert calls == [1]

    def test_or_else_throw_passes_values_through(self, integer_rules):
        target = patterns(*integer_rules)
        resolve = target.or_else_throw(lambda: RuntimeError("unexpected"))

        assert [resolve(i) for i in (-1, 1, 2, 3, 4)] == ["0", "1", "2", "b", "c"]

    def test_or_else_throw_supplier_is_lazy(self, integer_rules):
        calls = []

        def supplier():
            calls.append(1)
            return ExpectedError()

        target = patterns(*integer_rules)
        resolve = target.or_else_throw(supplier)

        assert [resolve(i) for i in (-1, 1, 2, 3, 4)] == ["0", "1", "2", "b", "c"]
        assert calls == []

        with pytest.raises(ExpectedError):
            resolve(0)
        assert calls == [1]

    def test_or_else_throw_raises_supplied_error(self, integer_rules):
        target = patterns(*integer_rules)
        resolve = target.or_else_throw(lambda: RuntimeError("as planned"))

        with pytest.raises(RuntimeError, match="as planned"):
            [resolve(i) for i in (-1, 0, 1, 2, 3, 4)]

    def test_or_else_on_none_result(self):
        target = patterns(or_else(lambda anything: None))

        assert target.or_else("d")(1) == "d"

    def test_or_else_get_on_none_result(self):
        calls = []
        target = patterns(or_else(lambda anything: None))

        assert target.or_else_get(lambda: calls.append(1) or "s")(1) == "s"
        assert calls == [1]

    def test_or_else_throw_on_none_result(self):
        target = patterns(or_else(lambda anything: None))

        with pytest.raises(ExpectedError):
            target.or_else_throw(ExpectedError)(1)

    def test_fallback_arguments_must_be_callable(self, integer_rules):
        target = patterns(*integer_rules)

        with pytest.raises(TypeError):
            target.or_else_get("x")
        with pytest.raises(TypeError):
            target.or_else_throw(RuntimeError("not a supplier"))


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Factories, validation and aliasing."""

    def test_of_with_varargs(self, integer_rules):
        target = Patterns.of(*integer_rules)

        assert [target.or_else_get(lambda: "x")(i) for i in (-1, 0, 1, 2, 3, 4)] == [
            "0", "x", "1", "2", "b", "c"
        ]

    def test_of_with_list(self, integer_rules):
        target = Patterns.of(integer_rules)

        assert len(target) == 4
        assert target(3) == "b"

    def test_of_with_tuple(self, integer_rules):
        target = Patterns.of(tuple(integer_rules))

        assert len(target) == 4
        assert target(3) == "b"
        assert target.get_optionally(0) is None

    def test_list_argument_is_aliased(self, integer_rules):
        target = Patterns.of(integer_rules, copy_rules=False)
        # dropping equals_to(3) lets "x > 0" handle 3
        integer_rules.pop(0)

        actual = [target.or_else_get(lambda: "x")(i) for i in (-1, 0, 1, 2, 3, 4)]

        assert actual == ["0", "x", "1", "2", "3", "c"]

    def test_rules_added_to_aliased_list_are_used(self, integer_rules):
        target = Patterns.of(integer_rules, copy_rules=False)
        integer_rules.insert(0, when(equals_to(2), then("z")))

        assert len(target) == 5
        assert target(2) == "z"
        assert target(1) == "1"

    def test_copy_rules_snapshots_list(self, integer_rules):
        target = Patterns.of(integer_rules, copy_rules=True)
        integer_rules.pop(0)

        assert target(3) == "b"
        assert len(target) == 4

    def test_varargs_are_not_aliased(self, integer_rules):
        target = Patterns.of(*integer_rules, copy_rules=False)
        integer_rules.pop(0)

        assert target(3) == "b"

    def test_copy_rules_default_comes_from_settings(self, monkeypatch, integer_rules):
        from patterns.settings import settings

        monkeypatch.setitem(settings["patterns"], "copy_rules", True)
        target = Patterns.of(integer_rules)
        integer_rules.pop(0)

        assert target(3) == "b"

    def test_rules_property_is_snapshot(self, integer_rules):
        target = Patterns.of(integer_rules)

        rules = target.rules

        assert isinstance(rules, tuple)
        assert list(rules) == integer_rules

    def test_non_rule_item_raises(self):
        with pytest.raises(TypeError, match="rule #1 must be a Rule"):
            Patterns.of(when(equals_to(1), then("a")), lambda i: True)

    def test_none_rules_raises(self):
        with pytest.raises(TypeError):
            Patterns(None)

    def test_empty_rules_never_match(self):
        target = Patterns.of()

        assert len(target) == 0
        assert target.get_optionally(1) is None
        with pytest.raises(NoSuchPatternError):
            target(1)

    def test_repr_lists_rule_descriptions(self):
        target = patterns(when(equals_to(3), then("b")), or_else(then("a")))

        assert repr(target) == "Patterns(rules=['when(equals_to(3))', 'or_else'])"

"""
Unit tests for the filter algebra.
"""

import pytest

from epreuve.core.description import Description
from epreuve.core.filters import (
    CollectAll,
    Intersect,
    MatchName,
    Union,
    build_filter,
    evaluate,
    split_matchers,
)

ADD = Description("pkg.Calculator", "test_add")
SUBTRACT = Description("pkg.Calculator", "test_subtract")
PARSE = Description("pkg.Parser", "test_parse")


class TestMatchName:
    """Name predicate."""

    def test_substring_match(self):
        assert evaluate(MatchName("Calculator"), ADD)
        assert not evaluate(MatchName("Calculator"), PARSE)

    def test_matches_method_part_of_qualified_name(self):
        assert evaluate(MatchName("Calculator.test_add"), ADD)
        assert not evaluate(MatchName("Calculator.test_add"), SUBTRACT)

    def test_glob_match_is_anchored(self):
        assert evaluate(MatchName("pkg.*.test_add"), ADD)
        assert not evaluate(MatchName("*.test_a"), ADD)

    def test_glob_detection(self):
        assert MatchName("*Parser*").is_glob
        assert MatchName("test_[ab]").is_glob
        assert not MatchName("Parser").is_glob

    def test_container_matches_through_children(self):
        container = Description("pkg.Calculator", None, (ADD, SUBTRACT))
        assert evaluate(MatchName("test_subtract"), container)
        assert not evaluate(MatchName("test_parse"), container)


class TestUnion:
    """Logical OR."""

    @pytest.mark.parametrize("description", [ADD, SUBTRACT, PARSE])
    def test_equals_or_of_operands(self, description):
        left, right = MatchName("test_add"), MatchName("Parser")
        expected = evaluate(left, description) or evaluate(right, description)
        assert evaluate(Union((left, right)), description) == expected

    def test_empty_union_rejects(self):
        assert not evaluate(Union(()), ADD)


class TestIntersect:
    """Logical AND with unconditional left evaluation."""

    def test_requires_both_sides(self):
        expression = Intersect(MatchName("Calculator"), MatchName("subtract"))
        assert evaluate(expression, SUBTRACT)
        assert not evaluate(expression, ADD)

    def test_left_collector_runs_when_right_rejects(self):
        collector = CollectAll()
        expression = Intersect(collector, MatchName("nothing-matches"))

        assert not evaluate(expression, ADD)
        assert collector.collected == {ADD}

    def test_left_runs_first(self):
        order = []

        class LoggingSet(set):
            def __init__(self, label):
                super().__init__()
                self.label = label

            def add(self, item):
                order.append(self.label)
                super().add(item)

        expression = Intersect(
            CollectAll(LoggingSet("left")), CollectAll(LoggingSet("right"))
        )
        assert evaluate(expression, ADD)
        assert order == ["left", "right"]

    def test_str_shows_right_side(self):
        assert str(Intersect(CollectAll(), MatchName("Parser"))) == "Parser"


class TestCollectAll:
    """Identity filter."""

    def test_accepts_and_collects_everything(self):
        collector = CollectAll()
        for description in (ADD, SUBTRACT, PARSE):
            assert evaluate(collector, description)
        assert collector.collected == {ADD, SUBTRACT, PARSE}

    def test_instances_are_independent(self):
        first, second = CollectAll(), CollectAll()
        evaluate(first, ADD)
        assert second.collected == set()


class TestEvaluate:
    def test_unknown_expression_raises(self):
        with pytest.raises(TypeError):
            evaluate("Calculator", ADD)


class TestBuildFilter:
    """Filter construction from user matchers."""

    def test_no_patterns_is_identity(self):
        expression, collector = build_filter([])
        assert expression is collector
        assert all(evaluate(expression, d) for d in (ADD, SUBTRACT, PARSE))
        assert collector.collected == {ADD, SUBTRACT, PARSE}

    def test_patterns_are_intersected_with_collector(self):
        expression, collector = build_filter(["test_add", "Parser"])

        assert isinstance(expression, Intersect)
        assert expression.left is collector
        assert evaluate(expression, ADD)
        assert evaluate(expression, PARSE)
        assert not evaluate(expression, SUBTRACT)
        assert collector.collected == {ADD, PARSE, SUBTRACT}

    def test_str_lists_patterns(self):
        expression, _ = build_filter(["a", "b"])
        assert str(expression) == "a OR b"


class TestSplitMatchers:
    def test_none_is_empty(self):
        assert split_matchers(None) == []

    def test_splits_and_strips(self):
        assert split_matchers(" Calculator , *Parser* ") == ["Calculator", "*Parser*"]

    def test_blank_entries_dropped(self):
        assert split_matchers(",, ,") == []

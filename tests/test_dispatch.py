"""
Tests for the rule tables of binary set operations.
"""

import pytest

from lazyconvex.dispatch import PairDispatcher


class Base:
    pass


class Child(Base):
    pass


class GrandChild(Child):
    pass


class Other:
    pass


def _pair(X, Y, **kwargs):
    return type(X), type(Y), kwargs


@pytest.fixture
def table():
    table = PairDispatcher("combine")

    @table.register(Base, Base)
    def generic(X, Y):
        return "generic"

    @table.register(Child, Other, priority=5)
    def child_other(X, Y, **kwargs):
        return _pair(X, Y, **kwargs)

    @table.register(Base, Other, priority=5)
    def base_other(X, Y):
        return "base_other"

    return table


class TestResolution:
    def test_priority_wins(self):
        table = PairDispatcher("combine")
        table.register(GrandChild, GrandChild)(lambda X, Y: "specific")
        table.register(Base, Base, priority=1)(lambda X, Y: "preferred")
        assert table(GrandChild(), GrandChild()) == "preferred"

    def test_more_specific_rule_wins_a_tie(self, table):
        assert table(Child(), Other()) == (Child, Other, {})
        assert table(Base(), Other()) == "base_other"

    def test_specificity_counts_both_operands(self):
        table = PairDispatcher("combine")
        table.register(Child, Base)(lambda X, Y: "left")
        table.register(Base, GrandChild)(lambda X, Y: "right")
        assert table(GrandChild(), GrandChild()) == "right"

    def test_registration_order_breaks_ties(self):
        table = PairDispatcher("combine")
        table.register(Base, Base)(lambda X, Y: "first")
        table.register(Base, Base)(lambda X, Y: "second")
        assert table(Child(), Child()) == "first"

    def test_swapped_operands_are_reordered(self, table):
        assert table(Other(), Child()) == (Child, Other, {})

    def test_unswapped_orientation_preferred(self):
        table = PairDispatcher("combine")
        table.register(Base, Base)(_pair)
        assert table(Child(), Base()) == (Child, Base, {})
        assert table(Base(), Child()) == (Base, Child, {})

    def test_keyword_arguments_are_forwarded(self, table):
        assert table(Child(), Other(), witness=True) == (Child, Other, {"witness": True})

    def test_tuple_type_specs(self):
        table = PairDispatcher("combine")
        table.register((Child, Other), Base)(lambda X, Y: "matched")
        assert table(Other(), Base()) == "matched"
        assert table(GrandChild(), Base()) == "matched"
        assert table.rules() == [("Child | Other", "Base", 0, "<lambda>")]


class TestNoMatch:
    def test_unmatched_pair(self, table):
        assert table.resolve(Other(), Other()) is None
        with pytest.raises(NotImplementedError, match="combine"):
            table(Other(), Other())

    def test_non_commutative_table(self):
        table = PairDispatcher("combine", commutative=False)
        table.register(Child, Other)(_pair)
        assert table(Child(), Other()) == (Child, Other, {})
        with pytest.raises(NotImplementedError):
            table(Other(), Child())


class TestIntrospection:
    def test_rules_are_listed_by_priority(self, table):
        assert table.rules() == [
            ("Child", "Other", 5, "child_other"),
            ("Base", "Other", 5, "base_other"),
            ("Base", "Base", 0, "generic"),
        ]

    def test_resolve_reports_orientation(self, table):
        rule, swapped = table.resolve(Other(), Child())
        assert rule.func.__name__ == "child_other"
        assert swapped

    def test_repr(self, table):
        assert repr(table) == "PairDispatcher('combine', 3 rules)"

"""Unit tests for filter tag to predicate translation."""

from datetime import date

import pytest

from search.src.query.builder import (
    SELECT_TEMPLATE,
    TAG_RULES,
    build_expression,
    build_predicate,
    years_before,
)


class TestBuildPredicate:
    """Test predicate generation from tag lists."""

    @pytest.fixture
    def today(self) -> date:
        return date(2026, 10, 19)

    def test_height_and_cup(self, today: date) -> None:
        """Test direct clause followed by the cup clause."""
        predicate = build_predicate(["低身長", "貧乳"], today=today)
        assert predicate == "CAST(s.height AS INT) < 150 AND s.cup IN ('A','B')"

    def test_empty_tags(self, today: date) -> None:
        """Test no tags produce an empty predicate."""
        assert build_predicate([], today=today) == ""

    def test_cup_brackets_concatenate_without_dedup(self, today: date) -> None:
        """Test overlapping cup brackets keep order and repeated letters."""
        predicate = build_predicate(["巨乳", "爆乳"], today=today)
        assert predicate == "s.cup IN ('E','F','G','G','H','I','J','K')"

    def test_cup_brackets_follow_tag_order(self, today: date) -> None:
        """Test letters follow the order tags were given, not sorted."""
        predicate = build_predicate(["爆乳", "貧乳"], today=today)
        assert predicate == "s.cup IN ('G','H','I','J','K','A','B')"

    def test_cup_clause_comes_last(self, today: date) -> None:
        """Test the cup clause is appended after every other clause."""
        predicate = build_predicate(["美乳", "高身長", "安産型"], today=today)
        assert predicate == (
            "CAST(s.height AS INT) >= 165 AND CAST(s.hip AS INT) >= 90 "
            "AND s.cup IN ('C','D')"
        )

    def test_older_age_bracket(self, today: date) -> None:
        """Test the 30+ bracket compares against today minus 30 years."""
        predicate = build_predicate(["熟女"], today=today)
        assert predicate == "s.birthday <> '' AND s.birthday <= '1996-10-19'"

    def test_younger_age_bracket(self, today: date) -> None:
        """Test the under-30 bracket."""
        predicate = build_predicate(["若手"], today=today)
        assert predicate == "s.birthday > '1996-10-19'"

    def test_unknown_tags_ignored(self, today: date) -> None:
        """Test unknown tags contribute nothing and do not raise."""
        assert build_predicate(["unknown", "", "ロリ"], today=today) == ""
        assert build_predicate(["小尻", "nope"], today=today) == "CAST(s.hip AS INT) < 85"

    def test_repeated_direct_tag_repeats_clause(self, today: date) -> None:
        """Test a repeated tag is not collapsed."""
        predicate = build_predicate(["低身長", "低身長"], today=today)
        assert predicate == "CAST(s.height AS INT) < 150 AND CAST(s.height AS INT) < 150"

    def test_every_tag_produces_output(self, today: date) -> None:
        """Test each vocabulary entry yields a non-empty predicate."""
        for tag in TAG_RULES:
            assert build_predicate([tag], today=today) != ""


class TestBuildExpression:
    """Test embedding predicates into the select template."""

    def test_without_predicate(self) -> None:
        """Test no WHERE clause when the predicate is empty."""
        assert build_expression("") == "SELECT * FROM S3Object s"
        assert build_expression("") == SELECT_TEMPLATE

    def test_with_predicate(self) -> None:
        """Test WHERE clause wraps the predicate."""
        expression = build_expression("CAST(s.height AS INT) < 150")
        assert expression == "SELECT * FROM S3Object s WHERE CAST(s.height AS INT) < 150"


class TestYearsBefore:
    """Test the relative date boundary."""

    def test_regular_day(self) -> None:
        assert years_before(date(2026, 10, 19), 30) == date(1996, 10, 19)

    def test_leap_day_falls_back(self) -> None:
        """Test Feb 29 maps to Feb 28 when the target year is not leap."""
        assert years_before(date(2024, 2, 29), 30) == date(1994, 2, 28)

    def test_leap_day_kept_in_leap_year(self) -> None:
        assert years_before(date(2024, 2, 29), 28) == date(1996, 2, 29)

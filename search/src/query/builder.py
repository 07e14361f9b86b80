"""Filter tag to S3 Select predicate translation.

Each known tag maps to one rule in TAG_RULES. Rules either contribute a
clause directly or add letters to the pending cup list, which becomes a
single IN clause at the end.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog

logger = structlog.get_logger(__name__)

SELECT_TEMPLATE = "SELECT * FROM S3Object s"

AGE_BOUNDARY_YEARS = 30


@dataclass(frozen=True)
class ComparisonRule:
    """Literal comparison on a cast column."""
    clause: str


@dataclass(frozen=True)
class RelativeDateRule:
    """Compares the birthday column against today minus AGE_BOUNDARY_YEARS.

    Birthdays are ISO text, so string comparison orders them by date.
    Blank birthdays sort below every date and are excluded for `<=`.
    """
    operator: str

    def clause(self, today: date) -> str:
        boundary = years_before(today, AGE_BOUNDARY_YEARS).isoformat()
        comparison = f"s.birthday {self.operator} '{boundary}'"
        if self.operator in ("<", "<="):
            return f"s.birthday <> '' AND {comparison}"
        return comparison


@dataclass(frozen=True)
class CupRule:
    """Letters added to the pending cup membership clause."""
    letters: Tuple[str, ...]


Rule = Union[ComparisonRule, RelativeDateRule, CupRule]

TAG_RULES: Dict[str, Rule] = {
    # height
    "低身長": ComparisonRule("CAST(s.height AS INT) < 150"),
    "高身長": ComparisonRule("CAST(s.height AS INT) >= 165"),
    # hip
    "安産型": ComparisonRule("CAST(s.hip AS INT) >= 90"),
    "小尻": ComparisonRule("CAST(s.hip AS INT) < 85"),
    # age bracket
    "熟女": RelativeDateRule("<="),
    "若手": RelativeDateRule(">"),
    # cup
    "貧乳": CupRule(("A", "B")),
    "美乳": CupRule(("C", "D")),
    "巨乳": CupRule(("E", "F", "G")),
    "爆乳": CupRule(("G", "H", "I", "J", "K")),
}


def years_before(today: date, years: int) -> date:
    """Same calendar day `years` earlier; Feb 29 becomes Feb 28."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


def build_predicate(tags: Sequence[str], today: Optional[date] = None) -> str:
    """
    Translate filter tags into one predicate.

    Args:
        tags: Filter tags in request order
        today: Reference date for age brackets (defaults to date.today())

    Returns:
        Clauses joined with AND, or an empty string when no tag matched
    """
    if today is None:
        today = date.today()

    clauses: List[str] = []
    cups: List[str] = []

    for tag in tags:
        rule = TAG_RULES.get(tag)
        if rule is None:
            logger.debug("unknown_filter_tag", tag=tag)
            continue

        if isinstance(rule, CupRule):
            # Overlapping brackets repeat letters; the list is not de-duplicated
            cups.extend(rule.letters)
        elif isinstance(rule, RelativeDateRule):
            clauses.append(rule.clause(today))
        else:
            clauses.append(rule.clause)

    if cups:
        letters = ",".join(f"'{letter}'" for letter in cups)
        clauses.append(f"s.cup IN ({letters})")

    return " AND ".join(clauses)


def build_expression(predicate: str) -> str:
    """Embed a predicate into the select template."""
    if not predicate:
        return SELECT_TEMPLATE
    return f"{SELECT_TEMPLATE} WHERE {predicate}"

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class HeaderMatcher:
    """Predicate over a lower-cased column header.

    A header matches when it equals one of ``equals``, or when it contains every
    token in ``contains_all`` and at least one token in ``contains_any`` (an
    empty group is ignored, but at least one group must be set).
    """

    contains_all: Tuple[str, ...] = ()
    contains_any: Tuple[str, ...] = ()
    equals: Tuple[str, ...] = ()

    def matches(self, header: str) -> bool:
        if header in self.equals:
            return True
        if not self.contains_all and not self.contains_any:
            return False
        if not all(token in header for token in self.contains_all):
            return False
        return not self.contains_any or any(token in header for token in self.contains_any)


@dataclass(frozen=True)
class ColumnRule:
    """Named field with matchers tried in order; the first matcher with a hit wins."""

    field: str
    matchers: Tuple[HeaderMatcher, ...]

    def find(self, headers: Sequence[str]) -> Optional[str]:
        lowered = [(header, str(header).lower()) for header in headers]
        for matcher in self.matchers:
            for original, lower in lowered:
                if matcher.matches(lower):
                    return original
        return None


DEFAULT_COLUMN_RULES: Tuple[ColumnRule, ...] = (
    ColumnRule("date", (HeaderMatcher(contains_any=("date",), equals=("day",)),)),
    ColumnRule("name", (HeaderMatcher(contains_any=("name", "employee")),)),
    ColumnRule(
        "in_time",
        (
            HeaderMatcher(contains_all=("in",), contains_any=("time", "punch")),
            HeaderMatcher(equals=("in",)),
        ),
    ),
    ColumnRule(
        "out_time",
        (
            HeaderMatcher(contains_all=("out",), contains_any=("time", "punch")),
            HeaderMatcher(equals=("out",)),
        ),
    ),
)


@dataclass(frozen=True)
class ResolvedColumns:
    date: Optional[str] = None
    name: Optional[str] = None
    in_time: Optional[str] = None
    out_time: Optional[str] = None


def resolve_columns(
    headers: Iterable[str],
    rules: Optional[Sequence[ColumnRule]] = None,
) -> ResolvedColumns:
    """Pick the source header for each field.

    When several rules target the same field, the earliest rule that finds a
    header wins, so extra synonyms can be appended after the defaults.
    """

    headers = list(headers)
    found = {}
    for rule in rules if rules is not None else DEFAULT_COLUMN_RULES:
        if rule.field in found:
            continue
        header = rule.find(headers)
        if header is not None:
            found[rule.field] = header
    return ResolvedColumns(**{key: value for key, value in found.items() if key in ResolvedColumns.__dataclass_fields__})


__all__ = [
    "ColumnRule",
    "DEFAULT_COLUMN_RULES",
    "HeaderMatcher",
    "ResolvedColumns",
    "resolve_columns",
]

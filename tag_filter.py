"""Tag filter selectors.

A selector is a comma separated list of OR-groups, each group a ``+``
separated list of AND-conditions. A condition is either a bare key (the tag
must be present) or ``key~value`` (the tag must have exactly that value).

    amenity~fountain+tourism,amenity~townhall

selects fountains that also carry a tourism tag, or any town hall.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Optional

from config import DEFAULT_ADMIN_LEVELS, STREET_HIGHWAY_VALUES


class Condition(NamedTuple):
    key: str
    value: Optional[str] = None

    def matches(self, tags: Dict[str, str]) -> bool:
        if self.value is None:
            return self.key in tags
        return tags.get(self.key) == self.value

    def __str__(self):
        return self.key if self.value is None else f"{self.key}~{self.value}"


class Group(NamedTuple):
    conditions: List[Condition]

    def matches(self, tags: Dict[str, str]) -> bool:
        return all(c.matches(tags) for c in self.conditions)

    def __str__(self):
        return "+".join(str(c) for c in self.conditions)


def parse_condition(condition_str: str) -> Condition:
    key, sep, value = condition_str.partition("~")
    if not sep:
        return Condition(condition_str)
    return Condition(key, value)


def parse_group(group_str: str) -> Group:
    return Group([parse_condition(c) for c in group_str.split("+")])


def parse(selector: str) -> List[Group]:
    return [parse_group(g) for g in selector.split(",")]


def matches(tags: Dict[str, str], groups: Iterable[Group]) -> bool:
    return any(group.matches(tags) for group in groups)


def predicate(groups: Optional[List[Group]]):
    """Return a ``tags -> bool`` callable; no groups selects everything."""
    if groups is None:
        return lambda tags: True
    return lambda tags: matches(tags, groups)


def admin_groups(levels: Optional[Iterable[int]] = None) -> List[Group]:
    levels = DEFAULT_ADMIN_LEVELS if levels is None else levels
    return [
        Group([Condition("boundary", "administrative"), Condition("admin_level", str(level))])
        for level in levels
    ]


def street_groups(name: Optional[str] = None) -> List[Group]:
    name_condition = Condition("name", name)
    return [Group([Condition("highway", value), name_condition]) for value in STREET_HIGHWAY_VALUES]


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def to_overpass_clauses(groups: Iterable[Group], bbox: str) -> str:
    """Render groups as Overpass QL ``nwr`` statements restricted to ``bbox``.

    ``bbox`` is the already formatted "south,west,north,east" string.
    """
    lines = []
    for group in groups:
        parts = []
        for c in group.conditions:
            if c.value is None:
                parts.append(f'["{_escape(c.key)}"]')
            else:
                parts.append(f'["{_escape(c.key)}"="{_escape(c.value)}"]')
        lines.append(f"\tnwr{''.join(parts)}({bbox});")
    return "\n".join(lines)

"""
================================================================================
Tag Filters
================================================================================

Boolean tag expressions selecting scenarios for a suite:

    "@managing_countries && @ui"     both tags
    "@ui || @domain", "@ui,@domain"  either tag
    "~@todo"                         tag absent

`&&` binds tighter than `||` and there is no grouping: parentheses are
rejected. The `@` prefix is optional.

================================================================================
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple


OR_SEPARATOR = re.compile(r"\|\||,")
TAG_NAME = re.compile(r"[^\s()@~&|,]+")


class TagFilter:
    def __init__(self, expression: str = ""):
        self.expression = (expression or "").strip()
        self._clauses: List[List[Tuple[str, bool]]] = self._parse(self.expression)

    @staticmethod
    def _parse(expression: str) -> List[List[Tuple[str, bool]]]:
        clauses = []
        if not expression:
            return clauses
        for alternative in OR_SEPARATOR.split(expression):
            terms = []
            for term in alternative.split("&&"):
                term = term.strip()
                if not term:
                    raise ValueError(f"Empty term in tag expression: {expression!r}")
                negated = term.startswith("~")
                name = term.lstrip("~").strip().lstrip("@")
                if not name:
                    raise ValueError(f"Empty tag in tag expression: {expression!r}")
                if not TAG_NAME.fullmatch(name):
                    raise ValueError(f"Invalid tag {name!r} in tag expression: {expression!r} (grouping is not supported)")
                terms.append((name, negated))
            clauses.append(terms)
        return clauses

    def matches(self, tags: Iterable[str]) -> bool:
        if not self._clauses:
            return True
        present = {tag.lstrip("@") for tag in tags}
        return any(
            all((name in present) != negated for name, negated in clause)
            for clause in self._clauses
        )

    def __bool__(self) -> bool:
        return bool(self._clauses)

    def __repr__(self) -> str:
        return f"TagFilter({self.expression!r})"


__all__ = [
    "TagFilter",
]

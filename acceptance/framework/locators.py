"""
================================================================================
Named Element Locators
================================================================================

Logical element names mapped to locators.

A definition is one of:
    - a bare selector string (implicit CSS)
    - a typed mapping: {"kind": "xpath", "selector": "//table"}
    - a list of the above, tried in order (primary + fallbacks)

Selectors may contain `%param%` placeholders which are filled from keyword
arguments when the element is looked up:

    DEFINED_ELEMENTS = {
        "province": "[data-test-province='%province%']",
    }
    await page.get_element("province", province="Bretagne")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple, Union


class ElementNotFoundError(Exception):
    """Raised when a named element is undefined or absent from the page."""
    pass


class LocatorKind(str, Enum):
    CSS = "css"
    XPATH = "xpath"
    TEXT = "text"
    TESTID = "testid"
    ROLE = "role"


PLACEHOLDER_PATTERN = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)%")

ElementDefinition = Union[str, Mapping[str, str], List[Union[str, Mapping[str, str]]]]


@dataclass(frozen=True)
class NamedLocator:
    """Typed locator: kind + selector template."""

    kind: LocatorKind
    selector: str

    @classmethod
    def parse(cls, definition: Union[str, Mapping[str, str]]) -> "NamedLocator":
        if isinstance(definition, str):
            return cls(LocatorKind.CSS, definition)
        if isinstance(definition, Mapping):
            try:
                kind = LocatorKind(definition.get("kind", "css"))
            except ValueError:
                raise ValueError(f"Unknown locator kind: {definition.get('kind')!r}") from None
            if "selector" not in definition:
                raise ValueError(f"Locator definition without selector: {dict(definition)!r}")
            return cls(kind, definition["selector"])
        raise TypeError(f"Unsupported locator definition: {definition!r}")

    @property
    def placeholders(self) -> List[str]:
        return PLACEHOLDER_PATTERN.findall(self.selector)

    def resolve(self, **parameters: Any) -> str:
        """Return the Playwright selector string with placeholders filled."""
        missing = [name for name in self.placeholders if name not in parameters]
        if missing:
            raise ElementNotFoundError(
                f"Missing parameter(s) {', '.join(missing)} for selector '{self.selector}'"
            )
        selector = PLACEHOLDER_PATTERN.sub(lambda m: str(parameters[m.group(1)]), self.selector)

        if self.kind is LocatorKind.XPATH:
            return f"xpath={selector}"
        if self.kind is LocatorKind.TEXT:
            return f"text={selector}"
        if self.kind is LocatorKind.TESTID:
            return f"[data-testid='{selector}']"
        if self.kind is LocatorKind.ROLE:
            return f"role={selector}"
        return selector


def parse_definition(definition: ElementDefinition) -> Tuple[NamedLocator, ...]:
    """Normalise an element definition into an ordered tuple of locators."""
    if isinstance(definition, (list, tuple)):
        if not definition:
            raise ValueError("Empty locator list")
        return tuple(NamedLocator.parse(item) for item in definition)
    return (NamedLocator.parse(definition),)


def merged_elements(cls: type) -> Dict[str, Tuple[NamedLocator, ...]]:
    """
    Merge `DEFINED_ELEMENTS` along the class hierarchy.

    Base classes are applied first so subclasses override inherited names.
    """
    elements: Dict[str, Tuple[NamedLocator, ...]] = {}
    for klass in reversed(cls.__mro__):
        own = klass.__dict__.get("DEFINED_ELEMENTS")
        if not own:
            continue
        for name, definition in own.items():
            elements[name] = parse_definition(definition)
    return elements


__all__ = [
    "ElementNotFoundError",
    "LocatorKind",
    "NamedLocator",
    "parse_definition",
    "merged_elements",
]

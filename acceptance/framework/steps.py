"""
================================================================================
Step Definitions & Registry
================================================================================

Binds natural-language step text to handlers.

Definitions are plain values of a small sum type (`Given`, `When`, `Then`
and `Transformation`) that contexts add to a `StepRegistry` explicitly:

    registry.add(When(r'/^I enable (it)$/', self.enable_it))
    registry.add(Given("the store has disabled country :countryName", self.store_has_disabled_country))
    registry.add(Transformation(":country", self.get_country_by_name))

Pattern syntax:
    - "/^...$/"   a regular expression (named or positional groups)
    - otherwise   a turnip pattern: ":name" captures a double-quoted string
                  or a single word, "(s)" marks optional text

Matching is keyword-agnostic and deterministic: the first registered
definition that matches wins. Overlapping definitions are rejected when they
are added.

Every handler is called as `handler(storage, *arguments)` where `storage` is
the scenario's `SharedStorage`.

================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, List, Optional, Pattern, Sequence, Tuple

from loguru import logger


TURNIP_TOKEN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)|\(([^()]*)\)")
SAMPLE_VALUE = '"sample"'


class UndefinedStepError(Exception):
    """Raised when no definition matches a step."""

    def __init__(self, text: str):
        super().__init__(f'Undefined step: "{text}"')
        self.text = text


class AmbiguousStepError(Exception):
    """Raised when a definition overlaps one that is already registered."""
    pass


def is_regex_pattern(pattern: str) -> bool:
    return len(pattern) > 2 and pattern.startswith("/") and pattern.endswith("/")


def compile_turnip(pattern: str) -> Tuple[Pattern, str]:
    """Compile a turnip pattern; also return a sample text matching it."""
    regex_parts = []
    sample_parts = []
    seen = {}
    position = 0
    for token in TURNIP_TOKEN.finditer(pattern):
        literal = pattern[position:token.start()]
        regex_parts.append(re.escape(literal))
        sample_parts.append(literal)
        placeholder, optional = token.groups()
        if placeholder is not None:
            seen[placeholder] = seen.get(placeholder, 0) + 1
            group = placeholder if seen[placeholder] == 1 else f"{placeholder}_{seen[placeholder]}"
            regex_parts.append(f'(?P<{group}>"[^"]*"|[^\\s"]+)')
            sample_parts.append(SAMPLE_VALUE)
        else:
            regex_parts.append(f"(?:{re.escape(optional)})?")
        position = token.end()
    regex_parts.append(re.escape(pattern[position:]))
    sample_parts.append(pattern[position:])
    return re.compile("^" + "".join(regex_parts) + "$"), "".join(sample_parts)


@dataclass(frozen=True)
class Argument:
    """Captured step argument; `name` is the placeholder/group name if any."""

    name: Optional[str]
    value: Any


@dataclass
class StepDefinition:
    pattern: str
    handler: Callable[..., Any]
    examples: Sequence[str] = ()

    keyword: ClassVar[str] = ""

    regex: Pattern = field(init=False, repr=False)
    samples: Tuple[str, ...] = field(init=False, repr=False)
    is_turnip: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.is_turnip = not is_regex_pattern(self.pattern)
        if self.is_turnip:
            self.regex, sample = compile_turnip(self.pattern)
            self.samples = (sample, *self.examples)
        else:
            self.regex = re.compile(self.pattern[1:-1])
            self.samples = tuple(self.examples)

    def match(self, text: str) -> Optional[List[Argument]]:
        match = self.regex.search(text)
        if match is None:
            return None
        return extract_arguments(match, strip_quotes=self.is_turnip)

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))


class Given(StepDefinition):
    keyword = "Given"


class When(StepDefinition):
    keyword = "When"


class Then(StepDefinition):
    keyword = "Then"


@dataclass
class Transformation:
    """
    Converts captured arguments before they reach a step handler.

    ":country" applies to arguments captured by the placeholder `:country`;
    "/^...$/" applies to any argument whose text fully matches it, and the
    handler receives the regex groups (or the whole value if there are none).
    """

    pattern: str
    handler: Callable[..., Any]

    regex: Optional[Pattern] = field(init=False, repr=False, default=None)
    placeholder: Optional[str] = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        if is_regex_pattern(self.pattern):
            self.regex = re.compile(self.pattern[1:-1])
        elif self.pattern.startswith(":"):
            self.placeholder = self.pattern[1:]
        else:
            raise ValueError(f"Unsupported transformation pattern: {self.pattern!r}")

    def applies_to(self, argument: Argument) -> Optional[Tuple[Any, ...]]:
        """Return handler arguments when this transformation applies."""
        if not isinstance(argument.value, str):
            return None
        if self.placeholder is not None:
            base_name = re.sub(r"_\d+$", "", argument.name) if argument.name else None
            if base_name == self.placeholder:
                return (argument.value,)
            return None
        match = self.regex.fullmatch(argument.value)
        if match is None:
            return None
        return match.groups() or (argument.value,)


def extract_arguments(match: "re.Match", strip_quotes: bool) -> List[Argument]:
    names = {index: name for name, index in match.re.groupindex.items()}
    arguments = []
    for index in range(1, (match.re.groups or 0) + 1):
        value = match.group(index)
        if value is None and index not in names:
            continue
        if strip_quotes and value and len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        arguments.append(Argument(names.get(index), value))
    return arguments


@dataclass
class StepMatch:
    definition: StepDefinition
    arguments: List[Argument]


class StepRegistry:
    """
    Ordered registry of step definitions and transformations.

    Usage:
        >>> registry = StepRegistry()
        >>> registry.add(When("I enable it", handler))
        >>> registry.match("I enable it").definition.handler is handler
        True
    """

    def __init__(self) -> None:
        self._definitions: List[StepDefinition] = []
        self._transformations: List[Transformation] = []

    def add(self, definition: Any) -> None:
        if isinstance(definition, Transformation):
            self._add_transformation(definition)
        elif isinstance(definition, StepDefinition):
            self._add_step(definition)
        else:
            raise TypeError(f"Cannot register {definition!r}")

    def extend(self, definitions: Sequence[Any]) -> None:
        for definition in definitions:
            self.add(definition)

    def _add_step(self, definition: StepDefinition) -> None:
        for existing in self._definitions:
            if existing.pattern == definition.pattern:
                raise AmbiguousStepError(
                    f'Step "{definition.pattern}" is already defined by {existing.handler_name}'
                )
            for sample in definition.samples:
                if existing.match(sample) is not None:
                    raise AmbiguousStepError(
                        f'Step "{definition.pattern}" overlaps "{existing.pattern}" '
                        f'({existing.handler_name}) on text "{sample}"'
                    )
            for sample in existing.samples:
                if definition.match(sample) is not None:
                    raise AmbiguousStepError(
                        f'Step "{definition.pattern}" overlaps "{existing.pattern}" '
                        f'({existing.handler_name}) on text "{sample}"'
                    )
        self._definitions.append(definition)
        logger.trace(f"Registered {definition.keyword} {definition.pattern}")

    def _add_transformation(self, transformation: Transformation) -> None:
        for existing in self._transformations:
            if existing.pattern == transformation.pattern:
                raise AmbiguousStepError(f'Transformation "{transformation.pattern}" is already defined')
        self._transformations.append(transformation)

    def match(self, text: str) -> StepMatch:
        for definition in self._definitions:
            arguments = definition.match(text)
            if arguments is not None:
                return StepMatch(definition, arguments)
        raise UndefinedStepError(text)

    def find_transformation(self, argument: Argument) -> Optional[Tuple[Transformation, Tuple[Any, ...]]]:
        for transformation in self._transformations:
            handler_args = transformation.applies_to(argument)
            if handler_args is not None:
                return transformation, handler_args
        return None

    @property
    def definitions(self) -> List[StepDefinition]:
        return list(self._definitions)

    @property
    def transformations(self) -> List[Transformation]:
        return list(self._transformations)

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = [
    "Argument",
    "StepDefinition",
    "Given",
    "When",
    "Then",
    "Transformation",
    "StepMatch",
    "StepRegistry",
    "UndefinedStepError",
    "AmbiguousStepError",
]

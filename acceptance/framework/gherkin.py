"""
================================================================================
Gherkin Features
================================================================================

Loads `.feature` files with the official Gherkin parser and turns its AST
into the features, backgrounds and scenarios the runner executes.

Supported:
    - Feature / Rule / Background / Scenario / Scenario Outline (+ Examples)
    - free-form descriptions below every block header
    - @tags on features, rules, scenarios, outlines and example blocks
    - step data tables and doc strings
    - every language the parser knows (`# language: fr`)

`And`, `But` and `*` steps take the keyword of the step before them.

================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from gherkin.errors import CompositeParserException, ParserException
from gherkin.parser import Parser
from gherkin.token_scanner import TokenScanner
from loguru import logger


OUTLINE_PARAMETER = re.compile(r"<([^<>]+)>")
ERROR_LOCATION = re.compile(r"^\(\d+:\d+\):\s*")

KEYWORD_TYPES = {"Context": "Given", "Action": "When", "Outcome": "Then"}
CONJUNCTIONS = ("And", "But", "*")
OUTLINE_KEYWORDS = ("Scenario Outline", "Scenario Template")


class GherkinSyntaxError(Exception):
    """Raised on malformed feature files."""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        location = f"{path or '<string>'}:{line}" if line else (path or "<string>")
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line


@dataclass
class Step:
    keyword: str
    text: str
    line: int
    table: Optional[List[List[str]]] = None
    doc_string: Optional[str] = None


@dataclass
class Background:
    steps: List[Step] = field(default_factory=list)
    line: int = 0
    description: str = ""


@dataclass
class Scenario:
    name: str
    tags: List[str] = field(default_factory=list)
    steps: List[Step] = field(default_factory=list)
    line: int = 0
    description: str = ""
    rule: Optional[str] = None
    background: Optional[Background] = None


@dataclass
class Examples:
    tags: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    line: int = 0


@dataclass
class ScenarioOutline:
    name: str
    tags: List[str] = field(default_factory=list)
    steps: List[Step] = field(default_factory=list)
    examples: List[Examples] = field(default_factory=list)
    line: int = 0
    description: str = ""
    rule: Optional[str] = None
    background: Optional[Background] = None

    def expand(self) -> List[Scenario]:
        """One scenario per example row; `<column>` placeholders substituted."""
        scenarios = []
        for block in self.examples:
            if not block.rows:
                continue
            header, *rows = block.rows
            for index, row in enumerate(rows, start=1):
                values = dict(zip(header, row))

                def substitute(text: str) -> str:
                    return OUTLINE_PARAMETER.sub(lambda m: values.get(m.group(1), m.group(0)), text)

                steps = [
                    Step(
                        keyword=step.keyword,
                        text=substitute(step.text),
                        line=step.line,
                        table=[[substitute(c) for c in r] for r in step.table] if step.table else None,
                        doc_string=substitute(step.doc_string) if step.doc_string else None,
                    )
                    for step in self.steps
                ]
                scenarios.append(
                    Scenario(
                        name=f"{substitute(self.name)} #{index}",
                        tags=[*self.tags, *block.tags],
                        steps=steps,
                        line=block.line,
                        description=self.description,
                        rule=self.rule,
                        background=self.background,
                    )
                )
        return scenarios


@dataclass
class Feature:
    name: str
    path: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    description: str = ""
    language: str = "en"
    background: Optional[Background] = None
    scenarios: List[Union[Scenario, ScenarioOutline]] = field(default_factory=list)

    def iter_scenarios(self) -> Iterator[Scenario]:
        for scenario in self.scenarios:
            if isinstance(scenario, ScenarioOutline):
                yield from scenario.expand()
            else:
                yield scenario


# ================================================================================
# AST conversion
# ================================================================================

def _line(node: Dict[str, Any]) -> int:
    return node["location"]["line"]


def _tags(node: Dict[str, Any]) -> List[str]:
    return [tag["name"].lstrip("@") for tag in node.get("tags") or []]


def _description(node: Dict[str, Any]) -> str:
    lines = (node.get("description") or "").splitlines()
    return "\n".join(line.strip() for line in lines).strip()


def _rows(rows: List[Dict[str, Any]]) -> List[List[str]]:
    return [[cell["value"] for cell in row["cells"]] for row in rows]


def _steps(nodes: List[Dict[str, Any]]) -> List[Step]:
    steps = []
    previous: Optional[str] = None
    for node in nodes:
        keyword = KEYWORD_TYPES.get(node.get("keywordType"))
        if keyword is None:
            keyword = node["keyword"].strip()
            if keyword in CONJUNCTIONS and previous is not None:
                keyword = previous
        previous = keyword

        data_table = node.get("dataTable")
        doc_string = node.get("docString")
        steps.append(Step(
            keyword=keyword,
            text=node["text"],
            line=_line(node),
            table=_rows(data_table["rows"]) if data_table else None,
            doc_string=doc_string["content"] if doc_string else None,
        ))
    return steps


def _background(node: Dict[str, Any]) -> Background:
    return Background(steps=_steps(node.get("steps") or []), line=_line(node), description=_description(node))


def _scenario(
    node: Dict[str, Any],
    tags: List[str],
    rule: Optional[str],
    background: Optional[Background],
) -> Union[Scenario, ScenarioOutline]:
    common = dict(
        name=node["name"],
        tags=[*tags, *_tags(node)],
        steps=_steps(node.get("steps") or []),
        line=_line(node),
        description=_description(node),
        rule=rule,
        background=background,
    )
    examples = node.get("examples") or []
    if not examples and node["keyword"].strip() not in OUTLINE_KEYWORDS:
        return Scenario(**common)

    blocks = []
    for block in examples:
        header = block.get("tableHeader")
        rows = [header, *(block.get("tableBody") or [])] if header else []
        blocks.append(Examples(tags=_tags(block), rows=_rows(rows), line=_line(block)))
    return ScenarioOutline(examples=blocks, **common)


def _children(
    feature: Feature,
    children: List[Dict[str, Any]],
    tags: List[str],
    rule: Optional[str] = None,
) -> None:
    background: Optional[Background] = None
    for child in children:
        if "background" in child:
            background = _background(child["background"])
            if rule is None:
                feature.background = background
        elif "scenario" in child:
            scenario_background = background if rule is not None else None
            feature.scenarios.append(_scenario(child["scenario"], tags, rule, scenario_background))
        elif "rule" in child:
            node = child["rule"]
            _children(feature, node.get("children") or [], [*tags, *_tags(node)], rule=node["name"])


def _syntax_error(error: ParserException, path: Optional[str]) -> GherkinSyntaxError:
    location = getattr(error, "location", None) or {}
    message = ERROR_LOCATION.sub("", str(error))
    return GherkinSyntaxError(message, path, location.get("line"))


def parse_feature(text: str, path: Optional[str] = None) -> Feature:
    """
    Parse feature text.

    Raises:
        GherkinSyntaxError: On the first parser error, or when there is no
            `Feature:` in the text
    """
    try:
        document = Parser().parse(TokenScanner(text))
    except CompositeParserException as e:
        raise _syntax_error(e.errors[0], path) from e
    except ParserException as e:
        raise _syntax_error(e, path) from e

    node = document.get("feature")
    if not node:
        raise GherkinSyntaxError("No 'Feature:' found", path)

    feature = Feature(
        name=node["name"],
        path=path,
        tags=_tags(node),
        description=_description(node),
        language=node.get("language", "en"),
    )
    _children(feature, node.get("children") or [], feature.tags)
    return feature


def load_feature(path: Union[str, Path]) -> Feature:
    path = Path(path)
    feature = parse_feature(path.read_text(encoding="utf-8"), str(path))
    logger.debug(f"Parsed feature '{feature.name}' ({len(feature.scenarios)} scenarios) from {path}")
    return feature


def load_features(directory: Union[str, Path]) -> List[Feature]:
    """Load every `.feature` file below `directory` (sorted by path)."""
    directory = Path(directory)
    if directory.is_file():
        return [load_feature(directory)]
    return [load_feature(p) for p in sorted(directory.rglob("*.feature"))]


__all__ = [
    "GherkinSyntaxError",
    "Step",
    "Background",
    "Scenario",
    "ScenarioOutline",
    "Examples",
    "Feature",
    "parse_feature",
    "load_feature",
    "load_features",
]

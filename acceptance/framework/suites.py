"""
================================================================================
Suite Configuration
================================================================================

Loads suite definitions from YAML:

    suites:
      ui_managing_countries:
        browser: true
        contexts:
          - acceptance.context.setup.geographical
          - acceptance.context.ui.admin.managing_countries
        filters:
          tags: "@managing_countries && @ui"

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

import yaml
from loguru import logger

from .config_loader import ConfigurationError
from .tags import TagFilter


@dataclass
class SuiteConfig:
    name: str
    contexts: List[str] = field(default_factory=list)
    tags: TagFilter = field(default_factory=TagFilter)
    browser: bool = False


def parse_suites(data: dict) -> Dict[str, SuiteConfig]:
    suites: Dict[str, SuiteConfig] = {}
    for name, options in (data.get("suites") or {}).items():
        options = options or {}
        contexts = options.get("contexts") or []
        if not isinstance(contexts, list) or not all(isinstance(c, str) for c in contexts):
            raise ConfigurationError(f'Suite "{name}": contexts must be a list of service ids')
        try:
            tags = TagFilter((options.get("filters") or {}).get("tags", ""))
        except ValueError as e:
            raise ConfigurationError(f'Suite "{name}": {e}') from e
        suites[name] = SuiteConfig(
            name=name,
            contexts=contexts,
            tags=tags,
            browser=bool(options.get("browser", False)),
        )
    return suites


def load_suites(path: Union[str, Path]) -> Dict[str, SuiteConfig]:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Suite configuration not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in suite configuration: {e}") from e

    suites = parse_suites(data)
    logger.debug(f"Loaded suites: {', '.join(suites) or 'none'}")
    return suites


__all__ = [
    "SuiteConfig",
    "parse_suites",
    "load_suites",
]

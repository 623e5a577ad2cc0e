"""
================================================================================
Acceptance Framework
================================================================================

Playwright-based behaviour-driven acceptance harness.

Components:
    - page / locators: page objects with named element dictionaries
    - steps: step definitions, transformations and the step registry
    - gherkin / tags / suites: feature parsing and suite selection
    - container: YAML service wiring
    - runner: per-scenario execution with fail-fast semantics

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import ConfigLoader, ConfigurationError
from .container import CircularReferenceError, Container, ServiceNotFoundError
from .gherkin import GherkinSyntaxError, load_features, parse_feature
from .locators import ElementNotFoundError
from .logging_config import init_logger
from .notification import NotificationChecker, NotificationType
from .page import Page, PageToken, SymfonyPage, UnexpectedPageError
from .router import RouteNotFoundError, RouteParameterError, Router
from .runner import FeatureRunner, RunResult, StepStatus
from .shared_storage import KeyNotFoundError, SharedStorage
from .steps import AmbiguousStepError, Given, StepRegistry, Then, Transformation, UndefinedStepError, When
from .suites import SuiteConfig, load_suites
from .tags import TagFilter

__all__ = [
    "BrowserManager",
    "ConfigLoader",
    "ConfigurationError",
    "CircularReferenceError",
    "Container",
    "ServiceNotFoundError",
    "GherkinSyntaxError",
    "load_features",
    "parse_feature",
    "ElementNotFoundError",
    "init_logger",
    "NotificationChecker",
    "NotificationType",
    "Page",
    "PageToken",
    "SymfonyPage",
    "UnexpectedPageError",
    "RouteNotFoundError",
    "RouteParameterError",
    "Router",
    "FeatureRunner",
    "RunResult",
    "StepStatus",
    "KeyNotFoundError",
    "SharedStorage",
    "AmbiguousStepError",
    "Given",
    "StepRegistry",
    "Then",
    "Transformation",
    "UndefinedStepError",
    "When",
    "SuiteConfig",
    "load_suites",
    "TagFilter",
]

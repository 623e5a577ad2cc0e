"""
================================================================================
Feature Runner
================================================================================

Executes parsed features suite by suite.

For every suite and every scenario selected by the suite's tag filter:
    1. a scenario-scoped child container is created (fresh contexts, pages)
    2. a fresh SharedStorage is created and passed to every step handler
    3. `acceptance.before_scenario` hooks run (database purge)
    4. feature background, rule background, then scenario steps, run in order

The first failing or undefined step aborts the scenario; remaining steps are
reported as skipped. Nothing is retried.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

import allure
from loguru import logger

from .config_loader import ConfigurationError
from .container import Container, ServiceNotFoundError
from .gherkin import Feature, Scenario, Step
from .shared_storage import SharedStorage
from .steps import StepRegistry, UndefinedStepError
from .suites import SuiteConfig
from .tags import TagFilter


STORAGE_SERVICE = "acceptance.shared_storage"
SESSION_SERVICE = "acceptance.browser_session"
BEFORE_SCENARIO_TAG = "acceptance.before_scenario"

SessionFactory = Callable[[], Awaitable[Any]]


class StepStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    UNDEFINED = "undefined"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    keyword: str
    text: str
    status: StepStatus
    message: str = ""
    line: int = 0


@dataclass
class ScenarioResult:
    suite: str
    feature: str
    scenario: str
    tags: List[str] = field(default_factory=list)
    steps: List[StepResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(step.status is StepStatus.PASSED for step in self.steps)

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if step.status in (StepStatus.FAILED, StepStatus.UNDEFINED):
                return step
        return None


@dataclass
class SuiteResult:
    name: str
    scenarios: List[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(s.passed for s in self.scenarios)

    @property
    def failed_scenarios(self) -> List[ScenarioResult]:
        return [s for s in self.scenarios if not s.passed]


@dataclass
class RunResult:
    suites: List[SuiteResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(s.passed for s in self.suites)

    @property
    def scenarios(self) -> List[ScenarioResult]:
        return [scenario for suite in self.suites for scenario in suite.scenarios]

    def summary(self) -> Dict[str, int]:
        scenarios = self.scenarios
        failed = sum(1 for s in scenarios if not s.passed)
        return {"scenarios": len(scenarios), "passed": len(scenarios) - failed, "failed": failed}


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class FeatureRunner:
    """
    Runs features against configured suites.

    Usage:
        >>> runner = FeatureRunner(container, load_suites("config/suites.yaml"))
        >>> result = await runner.run(load_features("features"))
        >>> result.passed
        True
    """

    def __init__(
        self,
        container: Container,
        suites: Mapping[str, SuiteConfig],
        session_factory: Optional[SessionFactory] = None,
    ):
        """
        Args:
            container: Root service container
            suites: Suite configurations by name
            session_factory: Creates a browser page per scenario (browser suites)
        """
        self.container = container
        self.suites = dict(suites)
        self.session_factory = session_factory

    def validate(self, suite: SuiteConfig) -> None:
        """Check that every context of `suite` is a known service."""
        missing = [c for c in suite.contexts if not self.container.has(c)]
        if missing:
            raise ConfigurationError(f'Suite "{suite.name}" references unknown contexts: {", ".join(missing)}')
        if suite.browser and self.session_factory is None:
            raise ConfigurationError(f'Suite "{suite.name}" needs a browser but no session factory was given')

    async def run(
        self,
        features: Iterable[Feature],
        suite_names: Optional[Iterable[str]] = None,
        tags: str = "",
    ) -> RunResult:
        features = list(features)
        names = list(suite_names) if suite_names else list(self.suites)
        unknown = [n for n in names if n not in self.suites]
        if unknown:
            raise ConfigurationError(f"Unknown suite(s): {', '.join(unknown)}")

        try:
            extra_filter = TagFilter(tags)
        except ValueError as e:
            raise ConfigurationError(f"Invalid --tags filter: {e}") from e
        result = RunResult()
        for name in names:
            result.suites.append(await self.run_suite(self.suites[name], features, extra_filter))

        summary = result.summary()
        logger.info(
            f"{summary['scenarios']} scenarios ({summary['passed']} passed, {summary['failed']} failed)"
        )
        return result

    async def run_suite(
        self,
        suite: SuiteConfig,
        features: Iterable[Feature],
        extra_filter: Optional[TagFilter] = None,
    ) -> SuiteResult:
        self.validate(suite)
        suite_result = SuiteResult(name=suite.name)
        logger.info(f"Suite: {suite.name} ({suite.tags.expression or 'no filter'})")

        for feature in features:
            for scenario in feature.iter_scenarios():
                if not suite.tags.matches(scenario.tags):
                    continue
                if extra_filter is not None and not extra_filter.matches(scenario.tags):
                    continue
                suite_result.scenarios.append(await self.run_scenario(suite, feature, scenario))
        return suite_result

    async def run_scenario(self, suite: SuiteConfig, feature: Feature, scenario: Scenario) -> ScenarioResult:
        result = ScenarioResult(
            suite=suite.name, feature=feature.name, scenario=scenario.name, tags=list(scenario.tags)
        )
        scope = self.container.scenario_scope()
        storage = SharedStorage()
        scope.set(STORAGE_SERVICE, storage)

        session = None
        if suite.browser:
            session = await self.session_factory()
            scope.set(SESSION_SERVICE, session)

        try:
            with allure.step(f"Scenario: {scenario.name}"):
                registry = self._build_registry(suite, scope)
                await self._run_hooks(scope)

                steps: List[Step] = []
                for background in (feature.background, scenario.background):
                    if background is not None:
                        steps.extend(background.steps)
                steps.extend(scenario.steps)

                failed = False
                for step in steps:
                    if failed:
                        result.steps.append(StepResult(step.keyword, step.text, StepStatus.SKIPPED, line=step.line))
                        continue
                    step_result = await self.run_step(registry, storage, step)
                    result.steps.append(step_result)
                    failed = step_result.status is not StepStatus.PASSED

            if result.passed:
                logger.info(f"✅ [{suite.name}] {scenario.name}")
            else:
                failed_step = result.failed_step
                logger.error(
                    f"❌ [{suite.name}] {scenario.name}\n"
                    f"    {failed_step.keyword} {failed_step.text}\n"
                    f"    {failed_step.message}"
                )
                await self._capture_failure(session, scenario)
        finally:
            if session is not None:
                await session.close()

        return result

    async def run_step(self, registry: StepRegistry, storage: SharedStorage, step: Step) -> StepResult:
        try:
            step_match = registry.match(step.text)
        except UndefinedStepError as e:
            return StepResult(step.keyword, step.text, StepStatus.UNDEFINED, str(e), step.line)

        with allure.step(f"{step.keyword} {step.text}"):
            try:
                arguments = []
                for argument in step_match.arguments:
                    found = registry.find_transformation(argument)
                    if found is None:
                        arguments.append(argument.value)
                    else:
                        transformation, handler_args = found
                        arguments.append(await _maybe_await(transformation.handler(storage, *handler_args)))
                if step.table is not None:
                    arguments.append(step.table)
                if step.doc_string is not None:
                    arguments.append(step.doc_string)

                await _maybe_await(step_match.definition.handler(storage, *arguments))
            except AssertionError as e:
                return StepResult(step.keyword, step.text, StepStatus.FAILED, str(e) or "Assertion failed", step.line)
            except Exception as e:
                return StepResult(step.keyword, step.text, StepStatus.FAILED, f"{type(e).__name__}: {e}", step.line)

        return StepResult(step.keyword, step.text, StepStatus.PASSED, line=step.line)

    def _build_registry(self, suite: SuiteConfig, scope: Container) -> StepRegistry:
        registry = StepRegistry()
        for context_id in suite.contexts:
            try:
                context = scope.get(context_id)
            except ServiceNotFoundError as e:
                raise ConfigurationError(str(e)) from e
            context.register(registry)
        return registry

    async def _run_hooks(self, scope: Container) -> None:
        for service_id, attributes in scope.find_tagged_service_ids(BEFORE_SCENARIO_TAG):
            method = attributes.get("method", "__call__")
            await _maybe_await(getattr(scope.get(service_id), method)())

    async def _capture_failure(self, session: Any, scenario: Scenario) -> None:
        if session is None:
            return
        try:
            allure.attach(
                await session.screenshot(full_page=True),
                name=f"failure_{scenario.name}",
                attachment_type=allure.attachment_type.PNG,
            )
        except Exception as e:
            logger.warning(f"Failed to capture screenshot on failure: {e}")


__all__ = [
    "FeatureRunner",
    "StepStatus",
    "StepResult",
    "ScenarioResult",
    "SuiteResult",
    "RunResult",
]

#!/usr/bin/env python3
# ================================================================================
# Acceptance Suite Runner
# ================================================================================
#
# Main entry point for executing the behaviour-driven acceptance suites.
#
# Features:
#   - Run every suite or a selection (--suite, repeatable)
#   - Narrow scenarios with an extra tag expression (--tags)
#   - Launch a Playwright browser only when a selected suite needs one
#   - Report the failing step and its message verbatim
#
# Usage:
#   python run_suites.py
#   python run_suites.py --suite domain_managing_countries
#   python run_suites.py --suite ui_managing_countries --browser firefox --no-headless
#   python run_suites.py --tags "~@todo"
#
# ================================================================================

import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from acceptance.framework.browser_manager import BrowserManager
from acceptance.framework.config_loader import ConfigLoader, ConfigurationError
from acceptance.framework.container import Container
from acceptance.framework.gherkin import GherkinSyntaxError, load_features
from acceptance.framework.logging_config import init_logger
from acceptance.framework.runner import FeatureRunner, RunResult
from acceptance.framework.suites import load_suites


class SuiteRunner:
    """
    Orchestrates one acceptance run.

    This class handles:
    - Configuration and service container loading
    - Browser lifecycle for browser suites
    - Summary output and exit code
    """

    def __init__(
        self,
        suites: Optional[List[str]] = None,
        tags: str = "",
        features: Optional[str] = None,
        browser: Optional[str] = None,
        headless: Optional[bool] = None,
        verbose: bool = False,
    ):
        self.config = ConfigLoader()
        self.suite_names = suites or []
        self.tags = tags
        self.features_path = self.config.path("features.path", "features") if features is None else features
        self.browser = browser or self.config.get("browser.type", "chromium")
        self.headless = self.config.get("browser.headless", True) if headless is None else headless
        self.verbose = verbose

    async def run(self) -> int:
        init_logger(self.config, level="DEBUG" if self.verbose else None)

        logger.info("=" * 60)
        logger.info("Starting Acceptance Run")
        logger.info("=" * 60)
        logger.info(f"Suites: {', '.join(self.suite_names) or 'All'}")
        logger.info(f"Tags: {self.tags or 'All'}")
        logger.info(f"Features: {self.features_path}")

        container = Container.from_yaml(
            self.config.path("services.path", "config/services.yaml"),
            parameters={
                "ui.base_url": self.config.get("ui.base_url", "http://localhost:8080"),
                "ui.timeout": self.config.get("ui.timeout", 5000),
            },
        )
        suites = load_suites(self.config.path("suites.path", "config/suites.yaml"))
        features = load_features(self.features_path)

        selected = self.suite_names or list(suites)
        needs_browser = any(suites[name].browser for name in selected if name in suites)

        if needs_browser:
            logger.info(f"Browser: {self.browser} (headless={self.headless})")
            async with BrowserManager(headless=self.headless, browser_type=self.browser) as manager:
                runner = FeatureRunner(container, suites, session_factory=manager.new_page)
                result = await runner.run(features, selected, self.tags)
        else:
            runner = FeatureRunner(container, suites)
            result = await runner.run(features, selected, self.tags)

        self._print_summary(result)
        return 0 if result.passed else 1

    def _print_summary(self, result: RunResult) -> None:
        logger.info("=" * 60)
        for suite in result.suites:
            for scenario in suite.failed_scenarios:
                step = scenario.failed_step
                logger.error(f"[{suite.name}] {scenario.feature} / {scenario.scenario}")
                logger.error(f"    {step.keyword} {step.text}  ({step.status.value})")
                logger.error(f"    {step.message}")

        summary = result.summary()
        if result.passed:
            logger.info(f"✅ ALL {summary['scenarios']} SCENARIOS PASSED")
        else:
            logger.error(f"❌ {summary['failed']} OF {summary['scenarios']} SCENARIOS FAILED")
        logger.info("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront Acceptance Suite Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every suite
  python run_suites.py

  # Run the domain suite only
  python run_suites.py --suite domain_managing_countries

  # Run UI suites with a visible browser
  python run_suites.py --suite ui_managing_countries --no-headless --browser firefox
        """
    )

    parser.add_argument(
        "--suite",
        action="append",
        default=[],
        help="Suite to run (repeatable, default: all)"
    )

    parser.add_argument(
        "--tags",
        default="",
        help='Extra tag filter, e.g. "@managing_countries && ~@todo"'
    )

    parser.add_argument(
        "--features",
        default=None,
        help="Feature file or directory (default: features.path from config)"
    )

    parser.add_argument(
        "--browser",
        choices=["chromium", "firefox", "webkit"],
        default=None,
        help="Browser for UI suites (default: browser.type from config)"
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug output"
    )

    args = parser.parse_args()

    runner = SuiteRunner(
        suites=args.suite,
        tags=args.tags,
        features=args.features,
        browser=args.browser,
        headless=False if args.no_headless else None,
        verbose=args.verbose,
    )

    try:
        exit_code = asyncio.run(runner.run())
    except (ConfigurationError, GherkinSyntaxError) as e:
        logger.error(str(e))
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

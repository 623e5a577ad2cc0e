"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for the UI suites.

Features:
    - Single browser instance per run
    - One isolated context (cookies, storage) per scenario
    - Browser configuration presets

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)


class BrowserManager:
    """
    Manages the browser and per-scenario contexts.

    Usage:
        async with BrowserManager(browser_type="firefox") as manager:
            page = await manager.new_page()
            await page.goto("http://localhost:8080/admin/login")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
    ):
        """
        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
        """
        self.headless = headless
        self.browser_type = browser_type

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {**self.DEFAULT_LAUNCH_OPTIONS, "headless": self.headless}
        if self.browser_type != "chromium":
            launch_options.pop("args")

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close all contexts and the browser."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """Create a new isolated browser context."""
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(**{**self.DEFAULT_CONTEXT_OPTIONS, **options})
        self._contexts.append(context)
        return context

    async def new_page(self, **context_options: Any) -> Page:
        """Create a page in a fresh context (one per scenario)."""
        context = await self.new_context(**context_options)
        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
]

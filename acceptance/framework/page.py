"""
================================================================================
Base Page Objects
================================================================================

Foundation classes for the Page Object Model.

Hierarchy:
    - Page: named element lookup, navigation, URL verification
    - SymfonyPage: URL generated from a route name + parameters

A page object is only usable while the browser actually shows it. `open()`
and `verify()` hand out a `PageToken`; every operation checks that the token
exists and that the browser is still on the token's URL, and raises
`UnexpectedPageError` otherwise.

Usage:
    class LoginPage(SymfonyPage):
        ROUTE_NAME = "sylius_admin_login"
        DEFINED_ELEMENTS = {
            "username": "#_username",
            "login_button": {"kind": "testid", "selector": "login-button"},
        }

        async def specify_username(self, username: str) -> None:
            await (await self.get_element("username")).fill(username)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlsplit

import allure
from loguru import logger
from playwright.async_api import Locator, Page as BrowserPage
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .locators import ElementNotFoundError, NamedLocator, merged_elements
from .router import Router


DEFAULT_TIMEOUT = 5000


class UnexpectedPageError(Exception):
    """Raised when a page object is used while the browser shows another page."""
    pass


@dataclass(frozen=True)
class PageToken:
    """Proof that a page object was verified against the loaded document."""

    page: str
    url: str


def _normalize_url(url: str) -> Tuple[str, str]:
    parts = urlsplit(url)
    path = parts.path.rstrip("/") or "/"
    return path, parts.query


class Page:
    """
    Base class for all page objects.

    Subclasses declare `URL_PATH` (may contain `{param}` placeholders) and
    `DEFINED_ELEMENTS`; the element dictionaries of base classes are merged in.
    """

    URL_PATH: str = "/"
    DEFINED_ELEMENTS: Dict[str, Any] = {}

    def __init__(
        self,
        session: BrowserPage,
        base_url: str = "",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize page object.

        Args:
            session: Playwright Page the object drives
            base_url: Base URL for the application
            timeout: Bound for element lookups in milliseconds
        """
        self.session = session
        if not base_url:
            base_url = os.getenv("UI_BASE_URL", "http://localhost:8080")
        self.base_url = base_url.rstrip("/")
        self.timeout = int(timeout)
        self._token: Optional[PageToken] = None
        self._elements: Dict[str, Tuple[NamedLocator, ...]] = merged_elements(type(self))

    # =========================================================================
    # Navigation & verification
    # =========================================================================

    def get_url(self, **url_parameters: Any) -> str:
        return f"{self.base_url}{self.URL_PATH.format(**url_parameters)}"

    async def open(self, **url_parameters: Any) -> PageToken:
        """Navigate to this page and bind the object to the loaded document."""
        url = self.get_url(**url_parameters)
        with allure.step(f"Open {type(self).__name__}"):
            await self.session.goto(url)
            logger.debug(f"Navigated to: {url}")
        return self.verify(**url_parameters)

    def verify(self, **url_parameters: Any) -> PageToken:
        """
        Bind to the currently loaded document without navigating.

        Raises:
            UnexpectedPageError: The browser is not on this page's URL
        """
        expected = self.get_url(**url_parameters)
        current = self.session.url
        if _normalize_url(current) != _normalize_url(expected):
            self._token = None
            raise UnexpectedPageError(
                f"Expected {type(self).__name__} at {expected}, but the browser is on {current}"
            )
        self._token = PageToken(type(self).__name__, expected)
        return self._token

    def is_open(self, **url_parameters: Any) -> bool:
        try:
            self.verify(**url_parameters)
        except UnexpectedPageError:
            return False
        return True

    @property
    def token(self) -> Optional[PageToken]:
        return self._token

    def _assert_open(self) -> None:
        if self._token is None:
            raise UnexpectedPageError(
                f"{type(self).__name__} has not been opened; call open() or verify() first"
            )
        current = self.session.url
        if _normalize_url(current) != _normalize_url(self._token.url):
            raise UnexpectedPageError(
                f"{type(self).__name__} was opened at {self._token.url}, "
                f"but the browser is on {current}"
            )

    # =========================================================================
    # Element access
    # =========================================================================

    def get_document(self) -> BrowserPage:
        """Handle to the whole rendered document."""
        self._assert_open()
        return self.session

    async def get_element(self, name: str, /, **parameters: Any) -> Locator:
        """
        Resolve a named element and wait until it is attached.

        Raises:
            ElementNotFoundError: Undefined name, or not found before timeout
            UnexpectedPageError: Page not opened / browser left the page
        """
        self._assert_open()
        try:
            locators = self._elements[name]
        except KeyError:
            raise ElementNotFoundError(
                f'Element "{name}" is not defined on {type(self).__name__}'
            ) from None

        errors = []
        for index, named_locator in enumerate(locators):
            selector = named_locator.resolve(**parameters)
            locator = self.session.locator(selector)
            try:
                await locator.first.wait_for(state="attached", timeout=self.timeout)
            except PlaywrightTimeoutError as e:
                errors.append(f"{selector} -> {str(e)[:50]}")
                continue

            if index:
                logger.warning(f"⚠️ Element '{name}' used fallback: {selector}")
            return locator

        raise ElementNotFoundError(
            f'Element "{name}" was not found on {type(self).__name__}:\n'
            + "\n".join(f"  - {err}" for err in errors)
        )

    async def has_element(self, name: str, /, **parameters: Any) -> bool:
        try:
            await self.get_element(name, **parameters)
        except ElementNotFoundError:
            return False
        return True

    @property
    def defined_elements(self) -> Dict[str, Tuple[NamedLocator, ...]]:
        return dict(self._elements)


class SymfonyPage(Page):
    """Page whose URL comes from a named route."""

    ROUTE_NAME: str = ""

    def __init__(
        self,
        session: BrowserPage,
        router: Router,
        base_url: str = "",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        super().__init__(session, base_url=base_url, timeout=timeout)
        self.router = router

    def get_route_name(self) -> str:
        return self.ROUTE_NAME

    def get_url(self, **url_parameters: Any) -> str:
        return f"{self.base_url}{self.router.generate(self.get_route_name(), **url_parameters)}"


__all__ = [
    "Page",
    "SymfonyPage",
    "PageToken",
    "UnexpectedPageError",
    "DEFAULT_TIMEOUT",
]

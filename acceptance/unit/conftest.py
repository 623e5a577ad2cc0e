"""
================================================================================
Unit Test Configuration
================================================================================

Markers and fixtures for the harness' own tests.

Key Features:
- Service container built from the real config/services.yaml
- In-memory browser page wired to the container's repositories
- Suite and feature fixtures for end-to-end runner checks

================================================================================
"""

from typing import Awaitable, Callable

import pytest

from acceptance.domain import Database
from acceptance.framework.config_loader import PROJECT_ROOT
from acceptance.framework.container import Container
from acceptance.framework.gherkin import load_features
from acceptance.framework.router import Router
from acceptance.framework.suites import load_suites
from acceptance.unit.fake_browser import FakeAdminApp, FakeBrowserPage


BASE_URL = "http://localhost:8080"


# ================================================================================
# Pytest Configuration
# ================================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "ui: Page object and browser-suite tests"
    )
    config.addinivalue_line(
        "markers", "domain: Entity and domain-suite tests"
    )


# ================================================================================
# Container Fixtures
# ================================================================================

@pytest.fixture
def container() -> Container:
    """Fresh root container per test (shared services are not reused)."""
    return Container.from_yaml(
        PROJECT_ROOT / "config" / "services.yaml",
        parameters={"ui.base_url": BASE_URL, "ui.timeout": 100},
    )


@pytest.fixture
def database(container: Container) -> Database:
    return container.get("acceptance.database")


@pytest.fixture
def router(container: Container) -> Router:
    return container.get("acceptance.router")


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
def fake_page(database: Database, router: Router) -> FakeBrowserPage:
    """A logged-out browser tab on the simulated administration panel."""
    return FakeBrowserPage(FakeAdminApp(database, router), base_url=BASE_URL)


@pytest.fixture
def session_factory(database: Database, router: Router) -> Callable[[], Awaitable[FakeBrowserPage]]:
    """One fresh tab (and session) per scenario, like BrowserManager.new_page."""
    opened = []

    async def new_page() -> FakeBrowserPage:
        page = FakeBrowserPage(FakeAdminApp(database, router), base_url=BASE_URL)
        opened.append(page)
        return page

    new_page.opened = opened
    return new_page


# ================================================================================
# Suite Fixtures
# ================================================================================

@pytest.fixture
def suites():
    return load_suites(PROJECT_ROOT / "config" / "suites.yaml")


@pytest.fixture
def features():
    return load_features(PROJECT_ROOT / "features")

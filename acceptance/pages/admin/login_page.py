"""
================================================================================
Admin Login & Dashboard Page Objects
================================================================================

The login form served by the security controller, and the dashboard an
administrator lands on afterwards.

================================================================================
"""

from __future__ import annotations

import allure

from acceptance.framework.page import SymfonyPage


class LoginPage(SymfonyPage):
    """Admin login form."""

    ROUTE_NAME = "sylius_admin_login"

    DEFINED_ELEMENTS = {
        "username": "#_username",
        "password": "#_password",
        "login_button": ["[data-test-login-button]", "form button[type='submit']"],
        "validation_error": ".message.negative",
    }

    async def specify_username(self, username: str) -> None:
        await (await self.get_element("username")).fill(username)

    async def specify_password(self, password: str) -> None:
        with allure.step(f"Fill password: {'*' * len(password)}"):
            await (await self.get_element("password")).fill(password)

    @allure.step("Log in")
    async def log_in(self) -> None:
        await (await self.get_element("login_button")).click()

    async def has_validation_error(self) -> bool:
        return await self.has_element("validation_error")


class DashboardPage(SymfonyPage):
    """Admin dashboard."""

    ROUTE_NAME = "sylius_admin_dashboard"

    DEFINED_ELEMENTS = {
        "admin_name": "[data-test-admin-name]",
    }

    async def is_logged_in_as(self, name: str) -> bool:
        element = await self.get_element("admin_name")
        return name in (await element.first.text_content() or "")


__all__ = [
    "LoginPage",
    "DashboardPage",
]

"""
================================================================================
Resource CRUD Page Objects
================================================================================

Generic index / create / update pages for admin resources. The route name is
derived from the resource name: `sylius_admin_<resource>_<index|create|update>`.

================================================================================
"""

from __future__ import annotations

from typing import Any

import allure
from loguru import logger
from playwright.async_api import Page as BrowserPage

from acceptance.framework.locators import ElementNotFoundError
from acceptance.framework.page import DEFAULT_TIMEOUT, SymfonyPage
from acceptance.framework.router import Router
from acceptance.framework.table_accessor import TableAccessor


DELETE_BUTTON = "[data-test-action='delete']"


class ResourcePage(SymfonyPage):
    """Symfony page bound to a resource name."""

    ACTION: str = ""

    def __init__(
        self,
        session: BrowserPage,
        router: Router,
        resource_name: str,
        base_url: str = "",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        super().__init__(session, router, base_url=base_url, timeout=timeout)
        self.resource_name = resource_name

    def get_route_name(self) -> str:
        return f"sylius_admin_{self.resource_name}_{self.ACTION}"


class IndexPage(ResourcePage):
    ACTION = "index"

    DEFINED_ELEMENTS = {
        "table": "[data-test-grid-table]",
    }

    def __init__(
        self,
        session: BrowserPage,
        router: Router,
        resource_name: str,
        base_url: str = "",
        timeout: int = DEFAULT_TIMEOUT,
        table_accessor: TableAccessor = None,
    ):
        super().__init__(session, router, resource_name, base_url=base_url, timeout=timeout)
        self.table_accessor = table_accessor or TableAccessor()

    async def is_single_resource_on_page(self, **fields: Any) -> bool:
        """True iff exactly one table row matches every field value."""
        try:
            table = await self.get_element("table")
            rows = await self.table_accessor.get_rows_with_fields(table, fields)
        except ElementNotFoundError as e:
            logger.debug(f"No {self.resource_name} matching {fields}: {e}")
            return False
        return len(rows) == 1

    async def count_items(self) -> int:
        try:
            table = await self.get_element("table")
        except ElementNotFoundError:
            return 0
        return await self.table_accessor.count_table_body_rows(table)

    async def get_column_fields(self, column: str) -> list:
        table = await self.get_element("table")
        return await self.table_accessor.get_indexed_column(table, column)

    @allure.step("Delete resource on index page")
    async def delete_resource_on_page(self, **fields: Any) -> None:
        table = await self.get_element("table")
        row = await self.table_accessor.get_row_with_fields(table, fields)
        await row.locator(DELETE_BUTTON).click()


class CreatePage(ResourcePage):
    ACTION = "create"

    DEFINED_ELEMENTS = {
        "create_button": "[data-test-button='create']",
        "validation_message": "[data-test-validation-error='%field%']",
    }

    @allure.step("Submit create form")
    async def create(self) -> None:
        await (await self.get_element("create_button")).click()

    async def get_validation_message(self, field: str) -> str:
        element = await self.get_element("validation_message", field=field)
        return (await element.first.text_content() or "").strip()


class UpdatePage(ResourcePage):
    ACTION = "update"

    DEFINED_ELEMENTS = {
        "save_button": "[data-test-button='update']",
        "validation_message": "[data-test-validation-error='%field%']",
    }

    @allure.step("Save changes")
    async def save_changes(self) -> None:
        await (await self.get_element("save_button")).click()

    async def has_resource_values(self, **values: Any) -> bool:
        for name, expected in values.items():
            element = await self.get_element(name)
            if await element.first.input_value() != str(expected):
                return False
        return True

    async def get_validation_message(self, field: str) -> str:
        element = await self.get_element("validation_message", field=field)
        return (await element.first.text_content() or "").strip()


__all__ = [
    "ResourcePage",
    "IndexPage",
    "CreatePage",
    "UpdatePage",
]

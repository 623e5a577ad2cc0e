"""
================================================================================
Country Page Objects
================================================================================

Admin pages for browsing, creating and editing countries and their
provinces.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from acceptance.pages.crud import CreatePage as CrudCreatePage
from acceptance.pages.crud import IndexPage as CrudIndexPage
from acceptance.pages.crud import UpdatePage as CrudUpdatePage


PROVINCE_ITEM = "[data-form-collection='item']"


class ProvinceFormMixin:
    """Province collection editing shared by the create and update forms."""

    PROVINCE_ELEMENTS = {
        "add_province": "[data-test-add-province]",
        "provinces": "#sylius_country_provinces",
        "province": "[data-test-province='%province%']",
    }

    @allure.step("Add province {name} ({code})")
    async def add_province(self, name: str, code: str, abbreviation: Optional[str] = None) -> None:
        await (await self.get_element("add_province")).click()

        item = (await self.get_element("provinces")).locator(PROVINCE_ITEM).last
        await item.locator("[data-test-province-name]").fill(name)
        await item.locator("[data-test-province-code]").fill(code)
        if abbreviation is not None:
            await item.locator("[data-test-province-abbreviation]").fill(abbreviation)


class IndexPage(CrudIndexPage):
    pass


class CreatePage(ProvinceFormMixin, CrudCreatePage):
    DEFINED_ELEMENTS = {
        "code": "#sylius_country_code",
        "enabled": "#sylius_country_enabled",
        **ProvinceFormMixin.PROVINCE_ELEMENTS,
    }

    @allure.step("Choose country {name}")
    async def choose_name(self, name: str) -> None:
        await (await self.get_element("code")).select_option(label=name)

    async def enable(self) -> None:
        await (await self.get_element("enabled")).check()

    async def disable(self) -> None:
        await (await self.get_element("enabled")).uncheck()


class UpdatePage(ProvinceFormMixin, CrudUpdatePage):
    DEFINED_ELEMENTS = {
        "code": "#sylius_country_code",
        "enabled": "#sylius_country_enabled",
        **ProvinceFormMixin.PROVINCE_ELEMENTS,
    }

    @allure.step("Enable country")
    async def enable(self) -> None:
        await (await self.get_element("enabled")).check()

    @allure.step("Disable country")
    async def disable(self) -> None:
        await (await self.get_element("enabled")).uncheck()

    async def is_code_field_disabled(self) -> bool:
        return await (await self.get_element("code")).is_disabled()

    async def is_country_enabled(self) -> bool:
        return await (await self.get_element("enabled")).is_checked()

    async def is_there_province(self, name: str) -> bool:
        return await self.has_element("province", province=name)

    @allure.step("Remove province {name}")
    async def remove_province(self, name: str) -> None:
        province = await self.get_element("province", province=name)
        await province.locator("[data-test-delete-province]").click()


__all__ = [
    "IndexPage",
    "CreatePage",
    "UpdatePage",
]

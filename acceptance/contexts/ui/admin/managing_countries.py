"""
================================================================================
Managing Countries (UI)
================================================================================

Drives the admin country pages through the browser.

================================================================================
"""

from __future__ import annotations

from typing import Optional, Union

from acceptance.contexts.base import Context
from acceptance.domain import Country
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Then, When
from acceptance.pages.admin.country_pages import CreatePage, IndexPage, UpdatePage


class ManagingCountriesContext(Context):
    def __init__(self, index_page: IndexPage, create_page: CreatePage, update_page: UpdatePage):
        self.index_page = index_page
        self.create_page = create_page
        self.update_page = update_page
        self._form: Optional[Union[CreatePage, UpdatePage]] = None

    def definitions(self):
        return [
            When("I want to add a new country", self.want_to_add_new_country),
            When("I choose :countryName", self.choose),
            When(
                r'/^I add the "([^"]+)" province with "([^"]+)" code$/',
                self.add_province,
                examples=['I add the "Bretagne" province with "FR-BRE" code'],
            ),
            When("I add it", self.add_it),
            When(r"/^I want to edit (this country)$/", self.want_to_edit, examples=["I want to edit this country"]),
            When("I enable it", self.enable_it),
            When("I disable it", self.disable_it),
            When("I delete the :provinceName province", self.delete_province),
            When("I save my changes", self.save_changes),
            When("I browse countries", self.browse_countries),
            Then("the country :country should appear in the store", self.country_should_appear_in_the_store),
            Then(
                r"/^(this country) should be (enabled|disabled)$/",
                self.country_should_be,
                examples=["this country should be enabled", "this country should be disabled"],
            ),
            Then(
                "the country :country should have the :provinceName province",
                self.country_should_have_province,
            ),
            Then(
                r'/^(this country) should not have the "([^"]+)" province$/',
                self.country_should_not_have_province,
                examples=['this country should not have the "Bretagne" province'],
            ),
            Then("I should not be able to edit its code", self.should_not_be_able_to_edit_code),
            Then("I should see :count countries in the list", self.should_see_countries_in_the_list),
            Then("I should see the country :countryName in the list", self.should_see_country_in_the_list),
            Then(
                "I should be notified that the country is already added",
                self.should_be_notified_that_country_is_already_added,
            ),
        ]

    # =========================================================================
    # Actions
    # =========================================================================

    async def want_to_add_new_country(self, storage: SharedStorage) -> None:
        await self.create_page.open()
        self._form = self.create_page

    async def choose(self, storage: SharedStorage, country_name: str) -> None:
        await self.create_page.choose_name(country_name)

    async def add_province(self, storage: SharedStorage, name: str, code: str) -> None:
        await self._current_form().add_province(name, code)

    async def add_it(self, storage: SharedStorage) -> None:
        await self.create_page.create()

    async def want_to_edit(self, storage: SharedStorage, country: Country) -> None:
        await self.update_page.open(id=country.id)
        self._form = self.update_page

    async def enable_it(self, storage: SharedStorage) -> None:
        await self.update_page.enable()

    async def disable_it(self, storage: SharedStorage) -> None:
        await self.update_page.disable()

    async def delete_province(self, storage: SharedStorage, province_name: str) -> None:
        await self.update_page.remove_province(province_name)

    async def save_changes(self, storage: SharedStorage) -> None:
        await self.update_page.save_changes()

    async def browse_countries(self, storage: SharedStorage) -> None:
        await self.index_page.open()

    # =========================================================================
    # Assertions
    # =========================================================================

    async def country_should_appear_in_the_store(self, storage: SharedStorage, country: Country) -> None:
        await self.index_page.open()
        assert await self.index_page.is_single_resource_on_page(code=country.code), (
            f'Country with code "{country.code}" should appear exactly once in the store'
        )

    async def country_should_be(self, storage: SharedStorage, country: Country, state: str) -> None:
        await self.update_page.open(id=country.id)
        enabled = await self.update_page.is_country_enabled()
        assert enabled == (state == "enabled"), f"Country {country.code} should be {state}"

    async def country_should_have_province(self, storage: SharedStorage, country: Country, province_name: str) -> None:
        await self.update_page.open(id=country.id)
        assert await self.update_page.is_there_province(province_name), (
            f'Country {country.code} should have the "{province_name}" province'
        )

    async def country_should_not_have_province(self, storage: SharedStorage, country: Country, province_name: str) -> None:
        await self.update_page.open(id=country.id)
        assert not await self.update_page.is_there_province(province_name), (
            f'Country {country.code} should not have the "{province_name}" province'
        )

    async def should_not_be_able_to_edit_code(self, storage: SharedStorage) -> None:
        assert await self.update_page.is_code_field_disabled(), "Code field should be disabled"

    async def should_see_countries_in_the_list(self, storage: SharedStorage, count: str) -> None:
        found = await self.index_page.count_items()
        assert found == int(count), f"Expected {count} countries in the list, found {found}"

    async def should_see_country_in_the_list(self, storage: SharedStorage, country_name: str) -> None:
        assert await self.index_page.is_single_resource_on_page(name=country_name), (
            f'Country "{country_name}" should be in the list'
        )

    async def should_be_notified_that_country_is_already_added(self, storage: SharedStorage) -> None:
        message = await self.create_page.get_validation_message("code")
        assert message == "Country ISO code must be unique.", f'Unexpected validation message "{message}"'

    def _current_form(self) -> Union[CreatePage, UpdatePage]:
        assert self._form is not None, "No country form has been opened"
        return self._form

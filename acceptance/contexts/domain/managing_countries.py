"""
================================================================================
Managing Countries (domain)
================================================================================

Same steps as the UI context, exercised on entities and repositories only.
Validation violations are handed to the notification steps through the
scenario storage under the "violations" key.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

from acceptance.contexts.base import Context
from acceptance.domain import Country, CountryFactory, CountryNameConverter, InMemoryRepository, ProvinceFactory
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Then, When


UNIQUE_CODE_MESSAGE = "Country ISO code must be unique."


class ManagingCountriesContext(Context):
    def __init__(
        self,
        country_repository: InMemoryRepository,
        country_factory: CountryFactory,
        province_factory: ProvinceFactory,
        converter: CountryNameConverter,
    ):
        self.country_repository = country_repository
        self.country_factory = country_factory
        self.province_factory = province_factory
        self.converter = converter
        self._country: Optional[Country] = None

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
            Then("I should see :count countries in the list", self.should_see_countries_in_the_list),
            Then("I should see the country :countryName in the list", self.should_see_country_in_the_list),
        ]

    def want_to_add_new_country(self, storage: SharedStorage) -> None:
        self._country = self.country_factory.create_new()

    def choose(self, storage: SharedStorage, country_name: str) -> None:
        country = self._current()
        country.code = self.converter.convert_to_code(country_name)
        country.name = country_name

    def add_province(self, storage: SharedStorage, name: str, code: str) -> None:
        self._current().add_province(self.province_factory.create(name, code))

    def add_it(self, storage: SharedStorage) -> None:
        country = self._current()
        violations = self._validate(country)
        storage.set("violations", violations)
        if not violations:
            self.country_repository.add(country)
            storage.set("country", country)

    def want_to_edit(self, storage: SharedStorage, country: Country) -> None:
        self._country = country

    def enable_it(self, storage: SharedStorage) -> None:
        self._current().enable()

    def disable_it(self, storage: SharedStorage) -> None:
        self._current().disable()

    def delete_province(self, storage: SharedStorage, province_name: str) -> None:
        country = self._current()
        province = country.get_province_named(province_name)
        assert province is not None, f'Country {country.code} has no "{province_name}" province'
        country.remove_province(province)

    def save_changes(self, storage: SharedStorage) -> None:
        storage.set("violations", self._validate(self._current()))

    def browse_countries(self, storage: SharedStorage) -> None:
        storage.set("countries", self.country_repository.find_all())

    def country_should_appear_in_the_store(self, storage: SharedStorage, country: Country) -> None:
        matching = self.country_repository.find_by(code=country.code)
        assert len(matching) == 1, f'Country with code "{country.code}" should appear exactly once in the store'

    def country_should_be(self, storage: SharedStorage, country: Country, state: str) -> None:
        assert country.is_enabled() == (state == "enabled"), f"Country {country.code} should be {state}"

    def country_should_have_province(self, storage: SharedStorage, country: Country, province_name: str) -> None:
        assert country.get_province_named(province_name) is not None, (
            f'Country {country.code} should have the "{province_name}" province'
        )

    def country_should_not_have_province(self, storage: SharedStorage, country: Country, province_name: str) -> None:
        assert country.get_province_named(province_name) is None, (
            f'Country {country.code} should not have the "{province_name}" province'
        )

    def should_see_countries_in_the_list(self, storage: SharedStorage, count: str) -> None:
        found = len(storage.get("countries"))
        assert found == int(count), f"Expected {count} countries in the list, found {found}"

    def should_see_country_in_the_list(self, storage: SharedStorage, country_name: str) -> None:
        names = [country.name for country in storage.get("countries")]
        assert names.count(country_name) == 1, f'Country "{country_name}" should be in the list'

    def _validate(self, country: Country) -> List[str]:
        violations = []
        if not country.code:
            violations.append("Please choose country ISO code.")
        else:
            existing = self.country_repository.find_one_by(code=country.code)
            if existing is not None and existing is not country:
                violations.append(UNIQUE_CODE_MESSAGE)
        return violations

    def _current(self) -> Country:
        assert self._country is not None, "No country is being edited"
        return self._country

"""
================================================================================
Geographical Setup Context
================================================================================

Creates countries and provinces directly in the repositories, bypassing the
UI.

================================================================================
"""

from __future__ import annotations

from loguru import logger

from acceptance.contexts.base import Context
from acceptance.domain import Country, CountryFactory, InMemoryRepository, ProvinceFactory
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Given


class GeographicalContext(Context):
    def __init__(
        self,
        country_repository: InMemoryRepository,
        province_repository: InMemoryRepository,
        country_factory: CountryFactory,
        province_factory: ProvinceFactory,
    ):
        self.country_repository = country_repository
        self.province_repository = province_repository
        self.country_factory = country_factory
        self.province_factory = province_factory

    def definitions(self):
        return [
            Given("the store operates in :countryName", self.store_operates_in),
            Given("the store has disabled country :countryName", self.store_has_disabled_country),
            Given(
                r'/^(this country) has the "([^"]+)" province with "([^"]+)" code$/',
                self.country_has_province,
                examples=['this country has the "Bretagne" province with "FR-BRE" code'],
            ),
        ]

    def store_operates_in(self, storage: SharedStorage, country_name: str) -> None:
        self._save_country(storage, self.country_factory.create_named(country_name))

    def store_has_disabled_country(self, storage: SharedStorage, country_name: str) -> None:
        self._save_country(storage, self.country_factory.create_named(country_name, enabled=False))

    def country_has_province(self, storage: SharedStorage, country: Country, name: str, code: str) -> None:
        province = self.province_factory.create(name, code)
        country.add_province(province)
        self.province_repository.add(province)
        storage.set("province", province)

    def _save_country(self, storage: SharedStorage, country: Country) -> None:
        self.country_repository.add(country)
        storage.set("country", country)
        logger.debug(f"Store operates in {country.name} (enabled={country.enabled})")

"""Turns country names captured from step text into persisted entities."""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.domain import Country, InMemoryRepository
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Transformation


class CountryContext(Context):
    def __init__(self, country_repository: InMemoryRepository):
        self.country_repository = country_repository

    def definitions(self):
        return [
            Transformation(":country", self.get_country_by_name),
            Transformation(r'/^country "([^"]+)"$/', self.get_country_by_name),
        ]

    def get_country_by_name(self, storage: SharedStorage, name: str) -> Country:
        country = self.country_repository.find_one_by(name=name)
        assert country is not None, f'Country with name "{name}" does not exist'
        return country

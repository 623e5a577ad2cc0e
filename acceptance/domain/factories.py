"""
================================================================================
Entity Factories and Converters
================================================================================

Factories build fresh entities with sensible defaults so setup steps stay
short. `CountryNameConverter` translates between the country names used in
feature files and ISO 3166-1 alpha-2 codes.

================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .entities import AdminUser, Country, Province


class CountryNameConverter:
    """Bidirectional country name <-> ISO code mapping."""

    COUNTRIES: Dict[str, str] = {
        "AT": "Austria",
        "BE": "Belgium",
        "CA": "Canada",
        "CH": "Switzerland",
        "CN": "China",
        "DE": "Germany",
        "ES": "Spain",
        "FR": "France",
        "GB": "United Kingdom",
        "IE": "Ireland",
        "IT": "Italy",
        "JP": "Japan",
        "NL": "Netherlands",
        "PL": "Poland",
        "PT": "Portugal",
        "US": "United States",
    }

    def convert_to_code(self, name: str) -> str:
        for code, country_name in self.COUNTRIES.items():
            if country_name == name:
                return code
        raise ValueError(f'Country "{name}" not found! Available names: {", ".join(self.COUNTRIES.values())}.')

    def convert_to_name(self, code: str) -> str:
        try:
            return self.COUNTRIES[code.upper()]
        except KeyError:
            raise ValueError(f'Country code "{code}" is not supported.') from None


class CountryFactory:
    def __init__(self, converter: Optional[CountryNameConverter] = None):
        self.converter = converter or CountryNameConverter()

    def create_new(self) -> Country:
        return Country()

    def create_named(self, name: str, enabled: bool = True) -> Country:
        country = Country(code=self.converter.convert_to_code(name), name=name)
        country.enabled = enabled
        return country


class ProvinceFactory:
    def create_new(self) -> Province:
        return Province()

    def create(self, name: str, code: str, abbreviation: Optional[str] = None) -> Province:
        return Province(code=code, name=name, abbreviation=abbreviation)


class AdminUserFactory:
    """Builds administrator accounts, enabled by default."""

    def create(self, **attributes: Any) -> AdminUser:
        admin = AdminUser()
        admin.set_username(attributes.get("username", "sylius"))
        admin.set_email(attributes.get("email", "sylius@example.com"))
        admin.set_plain_password(attributes.get("password", "sylius"))
        admin.set_first_name(attributes.get("first_name"))
        admin.set_last_name(attributes.get("last_name"))
        admin.set_enabled(attributes.get("enabled", True))
        admin.add_role(AdminUser.DEFAULT_ROLE)
        return admin


__all__ = [
    "CountryNameConverter",
    "CountryFactory",
    "ProvinceFactory",
    "AdminUserFactory",
]

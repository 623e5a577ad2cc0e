"""
================================================================================
Domain Layer
================================================================================

Entities, in-memory repositories and factories used by the acceptance suites.

================================================================================
"""

from .entities import AdminUser, AdminUserInterface, Country, Province, User, UserInterface
from .factories import AdminUserFactory, CountryFactory, CountryNameConverter, ProvinceFactory
from .repository import Database, InMemoryRepository

__all__ = [
    "AdminUser",
    "AdminUserInterface",
    "Country",
    "Province",
    "User",
    "UserInterface",
    "AdminUserFactory",
    "CountryFactory",
    "CountryNameConverter",
    "ProvinceFactory",
    "Database",
    "InMemoryRepository",
]

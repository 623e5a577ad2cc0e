"""
================================================================================
Domain Entities
================================================================================

Plain data holders for the administration panel under test.

Entities:
    - User / AdminUser: administrator accounts (optional first/last name)
    - Country / Province: geographical configuration of the store

The entities carry no persistence logic. They are created by factories,
stored in in-memory repositories and mutated freely by step handlers.

================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional


# ================================================================================
# Interfaces
# ================================================================================

class UserInterface(ABC):
    """Minimal contract shared by every kind of user."""

    @abstractmethod
    def get_username(self) -> Optional[str]:
        ...

    @abstractmethod
    def get_roles(self) -> List[str]:
        ...

    @abstractmethod
    def is_enabled(self) -> bool:
        ...


class AdminUserInterface(UserInterface):
    """User allowed to access the administration panel."""

    @abstractmethod
    def get_first_name(self) -> Optional[str]:
        ...

    @abstractmethod
    def set_first_name(self, first_name: Optional[str]) -> None:
        ...

    @abstractmethod
    def get_last_name(self) -> Optional[str]:
        ...

    @abstractmethod
    def set_last_name(self, last_name: Optional[str]) -> None:
        ...


# ================================================================================
# Users
# ================================================================================

class User(UserInterface):
    """
    Base user model.

    Holds credentials and state common to shop customers and administrators.
    """

    DEFAULT_ROLE = "ROLE_USER"

    def __init__(self) -> None:
        self.id: Optional[int] = None
        self.username: Optional[str] = None
        self.email: Optional[str] = None
        self.plain_password: Optional[str] = None
        self.enabled: bool = False
        self.roles: List[str] = [self.DEFAULT_ROLE]

    def get_username(self) -> Optional[str]:
        return self.username

    def set_username(self, username: Optional[str]) -> None:
        self.username = username

    def get_email(self) -> Optional[str]:
        return self.email

    def set_email(self, email: Optional[str]) -> None:
        self.email = email

    def get_plain_password(self) -> Optional[str]:
        return self.plain_password

    def set_plain_password(self, password: Optional[str]) -> None:
        self.plain_password = password

    def is_enabled(self) -> bool:
        return self.enabled

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def get_roles(self) -> List[str]:
        return list(self.roles)

    def add_role(self, role: str) -> None:
        role = role.upper()
        if role not in self.roles:
            self.roles.append(role)

    def has_role(self, role: str) -> bool:
        return role.upper() in self.roles

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} username={self.username!r}>"


class AdminUser(User, AdminUserInterface):
    """Administrator account with an optional display name."""

    DEFAULT_ROLE = "ROLE_ADMINISTRATION_ACCESS"

    def __init__(self) -> None:
        super().__init__()
        self.first_name: Optional[str] = None
        self.last_name: Optional[str] = None

    def get_first_name(self) -> Optional[str]:
        return self.first_name

    def set_first_name(self, first_name: Optional[str]) -> None:
        self.first_name = first_name

    def get_last_name(self) -> Optional[str]:
        return self.last_name

    def set_last_name(self, last_name: Optional[str]) -> None:
        self.last_name = last_name

    def get_full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


# ================================================================================
# Addressing
# ================================================================================

class Province:
    """Administrative area of a country."""

    def __init__(
        self,
        code: Optional[str] = None,
        name: Optional[str] = None,
        abbreviation: Optional[str] = None,
    ) -> None:
        self.id: Optional[int] = None
        self.code = code
        self.name = name
        self.abbreviation = abbreviation
        self.country: Optional["Country"] = None

    def __repr__(self) -> str:
        return f"<Province code={self.code!r} name={self.name!r}>"


class Country:
    """Country the store may operate in."""

    def __init__(self, code: Optional[str] = None, name: Optional[str] = None) -> None:
        self.id: Optional[int] = None
        self.code = code
        self.name = name
        self.enabled: bool = True
        self.provinces: List[Province] = []

    def is_enabled(self) -> bool:
        return self.enabled

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def add_province(self, province: Province) -> None:
        if self.has_province(province):
            return
        province.country = self
        self.provinces.append(province)

    def remove_province(self, province: Province) -> None:
        if self.has_province(province):
            self.provinces.remove(province)
            province.country = None

    def has_province(self, province: Province) -> bool:
        return province in self.provinces

    def get_province_named(self, name: str) -> Optional[Province]:
        for province in self.provinces:
            if province.name == name:
                return province
        return None

    def __repr__(self) -> str:
        return f"<Country code={self.code!r} enabled={self.enabled}>"


__all__ = [
    "UserInterface",
    "AdminUserInterface",
    "User",
    "AdminUser",
    "Province",
    "Country",
]

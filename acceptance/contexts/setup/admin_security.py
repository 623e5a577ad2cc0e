"""Administrator accounts created straight in the repository."""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.domain import AdminUser, AdminUserFactory, InMemoryRepository
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Given


class AdminSecurityContext(Context):
    def __init__(self, admin_user_repository: InMemoryRepository, admin_user_factory: AdminUserFactory):
        self.admin_user_repository = admin_user_repository
        self.admin_user_factory = admin_user_factory

    def definitions(self):
        return [
            Given("there is an administrator :username identified by :password", self.there_is_an_administrator),
            Given(
                r'/^(this administrator) is named "([^" ]+) ([^"]+)"$/',
                self.administrator_is_named,
                examples=['this administrator is named "John Doe"'],
            ),
        ]

    def there_is_an_administrator(self, storage: SharedStorage, username: str, password: str) -> None:
        admin = self.admin_user_factory.create(
            username=username,
            email=f"{username}@example.com",
            password=password,
        )
        self.admin_user_repository.add(admin)
        storage.set("administrator", admin)

    def administrator_is_named(self, storage: SharedStorage, admin: AdminUser, first_name: str, last_name: str) -> None:
        admin.set_first_name(first_name)
        admin.set_last_name(last_name)

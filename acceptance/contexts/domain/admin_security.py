"""Administrator session for the domain suite (no browser involved)."""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.domain import AdminUserFactory, InMemoryRepository
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Given


class AdminSecurityContext(Context):
    def __init__(self, admin_user_repository: InMemoryRepository, admin_user_factory: AdminUserFactory):
        self.admin_user_repository = admin_user_repository
        self.admin_user_factory = admin_user_factory

    def definitions(self):
        return [
            Given("I am logged in as an administrator", self.logged_in_as_administrator),
        ]

    def logged_in_as_administrator(self, storage: SharedStorage) -> None:
        admin = self.admin_user_factory.create(first_name="John", last_name="Doe")
        self.admin_user_repository.add(admin)
        storage.set("administrator", admin)

"""
================================================================================
Admin Login (UI)
================================================================================

Signs administrators in through the login form served by the security
controller.

================================================================================
"""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.domain import AdminUserFactory, InMemoryRepository
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Given, Then, When
from acceptance.pages.admin.login_page import DashboardPage, LoginPage


class LoginContext(Context):
    def __init__(
        self,
        login_page: LoginPage,
        dashboard_page: DashboardPage,
        admin_user_repository: InMemoryRepository,
        admin_user_factory: AdminUserFactory,
    ):
        self.login_page = login_page
        self.dashboard_page = dashboard_page
        self.admin_user_repository = admin_user_repository
        self.admin_user_factory = admin_user_factory

    def definitions(self):
        return [
            Given("I am logged in as an administrator", self.logged_in_as_administrator),
            When("I want to log in", self.want_to_log_in),
            When("I specify the username as :username", self.specify_username),
            When("I specify the password as :password", self.specify_password),
            When("I log in", self.log_in),
            Then("I should be logged in", self.should_be_logged_in),
            Then("I should be logged in as :fullName", self.should_be_logged_in_as),
            Then("I should not be logged in", self.should_not_be_logged_in),
            Then("I should be notified about bad credentials", self.should_be_notified_about_bad_credentials),
        ]

    async def logged_in_as_administrator(self, storage: SharedStorage) -> None:
        admin = self.admin_user_factory.create(
            username="sylius",
            email="sylius@example.com",
            password="sylius",
            first_name="John",
            last_name="Doe",
        )
        self.admin_user_repository.add(admin)
        storage.set("administrator", admin)

        await self.login_page.open()
        await self.login_page.specify_username(admin.get_username())
        await self.login_page.specify_password(admin.get_plain_password())
        await self.login_page.log_in()
        self.dashboard_page.verify()

    async def want_to_log_in(self, storage: SharedStorage) -> None:
        await self.login_page.open()

    async def specify_username(self, storage: SharedStorage, username: str) -> None:
        await self.login_page.specify_username(username)

    async def specify_password(self, storage: SharedStorage, password: str) -> None:
        await self.login_page.specify_password(password)

    async def log_in(self, storage: SharedStorage) -> None:
        await self.login_page.log_in()

    async def should_be_logged_in(self, storage: SharedStorage) -> None:
        assert self.dashboard_page.is_open(), "Administrator should land on the dashboard"

    async def should_be_logged_in_as(self, storage: SharedStorage, full_name: str) -> None:
        self.dashboard_page.verify()
        assert await self.dashboard_page.is_logged_in_as(full_name), (
            f'Dashboard should greet "{full_name}"'
        )

    async def should_not_be_logged_in(self, storage: SharedStorage) -> None:
        assert not self.dashboard_page.is_open(), "Administrator should not reach the dashboard"

    async def should_be_notified_about_bad_credentials(self, storage: SharedStorage) -> None:
        self.login_page.verify()
        assert await self.login_page.has_validation_error(), "Bad credentials error should be shown"

"""
================================================================================
Country Pages & Notifications Tests
================================================================================

Create / update forms of the country admin screens and the flash message
checker.

================================================================================
"""

import allure
import pytest

from acceptance.domain import AdminUserFactory, CountryFactory, ProvinceFactory
from acceptance.framework.notification import NotificationChecker, NotificationType


@pytest.fixture
async def scope(container, fake_page, database):
    scope = container.scenario_scope()
    scope.set("acceptance.browser_session", fake_page)

    database.repository("admin_user").add(AdminUserFactory().create())
    login_page = scope.get("acceptance.page.admin.login")
    await login_page.open()
    await login_page.specify_username("sylius")
    await login_page.specify_password("sylius")
    await login_page.log_in()
    return scope


@pytest.fixture
def countries(database):
    return database.repository("country")


@pytest.fixture
def checker(scope) -> NotificationChecker:
    return scope.get("acceptance.notification_checker")


@allure.epic("Page Objects")
@allure.feature("Country Create Page")
class TestCreatePage:

    @pytest.mark.P0
    async def test_create_country_with_province(self, scope, countries, checker):
        create_page = scope.get("acceptance.page.admin.country.create")
        await create_page.open()
        await create_page.choose_name("United Kingdom")
        await create_page.add_province("Scotland", "GB-SCT", "SCT")
        await create_page.create()

        country = countries.find_one_by(code="GB")
        assert country is not None
        assert country.name == "United Kingdom"
        assert country.get_province_named("Scotland").abbreviation == "SCT"
        await checker.check_notification("has been successfully created.", NotificationType.SUCCESS)

    async def test_duplicate_code_shows_validation_message(self, scope, countries):
        countries.add(CountryFactory().create_named("Germany"))
        create_page = scope.get("acceptance.page.admin.country.create")
        await create_page.open()
        await create_page.choose_name("Germany")
        await create_page.create()

        assert create_page.is_open()
        assert await create_page.get_validation_message("code") == "Country ISO code must be unique."
        assert len(countries) == 1


@allure.epic("Page Objects")
@allure.feature("Country Update Page")
class TestUpdatePage:

    @pytest.fixture
    def france(self, countries):
        france = countries.add(CountryFactory().create_named("France", enabled=False))
        france.add_province(ProvinceFactory().create("Normandie", "FR-NOR"))
        return france

    async def test_enable_and_save(self, scope, france, checker):
        update_page = scope.get("acceptance.page.admin.country.update")
        await update_page.open(id=france.id)
        assert not await update_page.is_country_enabled()
        assert await update_page.is_code_field_disabled()
        assert await update_page.has_resource_values(code="FR")

        await update_page.enable()
        await update_page.save_changes()

        assert france.is_enabled()
        await checker.check_notification("has been successfully updated.", NotificationType.SUCCESS)

    async def test_remove_province(self, scope, france):
        update_page = scope.get("acceptance.page.admin.country.update")
        await update_page.open(id=france.id)
        assert await update_page.is_there_province("Normandie")

        await update_page.remove_province("Normandie")
        assert not await update_page.is_there_province("Normandie")
        await update_page.save_changes()

        assert france.get_province_named("Normandie") is None

    async def test_add_province_on_existing_country(self, scope, france):
        update_page = scope.get("acceptance.page.admin.country.update")
        await update_page.open(id=france.id)
        await update_page.add_province("Bretagne", "FR-BRE")
        await update_page.save_changes()

        await update_page.open(id=france.id)
        assert await update_page.is_there_province("Bretagne")
        assert await update_page.is_there_province("Normandie")


@allure.epic("Page Objects")
@allure.feature("Notifications")
class TestNotificationChecker:

    async def test_missing_notification_fails(self, scope, checker):
        await scope.get("acceptance.page.admin.country.index").open()
        with pytest.raises(AssertionError, match="no notification was shown"):
            await checker.check_notification("has been successfully created.", NotificationType.SUCCESS)

    async def test_wrong_type_fails(self, scope, checker):
        create_page = scope.get("acceptance.page.admin.country.create")
        await create_page.open()
        await create_page.choose_name("Spain")
        await create_page.create()

        with pytest.raises(AssertionError, match="failure notification"):
            await checker.check_notification("has been successfully created.", NotificationType.FAILURE)

    async def test_wrong_text_fails(self, scope, checker):
        create_page = scope.get("acceptance.page.admin.country.create")
        await create_page.open()
        await create_page.choose_name("Spain")
        await create_page.create()

        with pytest.raises(AssertionError, match="has been successfully deleted"):
            await checker.check_notification("has been successfully deleted.", NotificationType.SUCCESS)

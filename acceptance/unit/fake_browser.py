"""
================================================================================
In-Memory Browser Double
================================================================================

A tiny stand-in for a Playwright `Page` driving a simulated administration
panel, so page objects and UI contexts run without launching a browser.

    - FakeElement: node with attributes, text, form state and children
    - FakeLocator: lazy selector chain (locator / first / last / nth)
    - FakeBrowserPage: url, goto, locator, screenshot, close
    - FakeAdminApp: login, dashboard and country CRUD screens backed by the
      same in-memory repositories the setup contexts write to

Selectors are matched exactly as written in the page objects' element maps.

================================================================================
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from acceptance.domain import Country, CountryNameConverter, Database, Province
from acceptance.framework.router import Router


UPDATE_PATH = re.compile(r"/admin/countries/(\d+)/edit$")

PROVINCE_ITEM = "[data-form-collection='item']"


class FakeElement:
    def __init__(
        self,
        tag: str = "div",
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        value: str = "",
        checked: bool = False,
        disabled: bool = False,
        options: Optional[List[Tuple[str, str]]] = None,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self.tag = tag
        self.text = text
        self.attrs = dict(attrs or {})
        self.value = value
        self.checked = checked
        self.disabled = disabled
        self.options = list(options or [])
        self.children: Dict[str, List[FakeElement]] = children or {}
        self.on_click = on_click
        self.payload: Any = None

    def __repr__(self) -> str:
        return f"<FakeElement {self.tag} {self.attrs} {self.text!r}>"


class FakeLocator:
    def __init__(self, resolve: Callable[[], List[FakeElement]], description: str):
        self._resolve = resolve
        self.description = description

    def locator(self, selector: str) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            return [child for element in self._resolve() for child in element.children.get(selector, [])]
        return FakeLocator(resolve, f"{self.description} >> {selector}")

    def nth(self, index: int) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            elements = self._resolve()
            try:
                return [elements[index]]
            except IndexError:
                return []
        return FakeLocator(resolve, f"{self.description} >> nth={index}")

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    @property
    def last(self) -> "FakeLocator":
        return self.nth(-1)

    async def count(self) -> int:
        return len(self._resolve())

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        if not self._resolve():
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.description}")

    def _element(self) -> FakeElement:
        elements = self._resolve()
        if not elements:
            raise PlaywrightTimeoutError(f"Timeout exceeded: no element matches {self.description}")
        return elements[0]

    async def click(self, **kwargs: Any) -> None:
        element = self._element()
        if element.disabled:
            raise PlaywrightTimeoutError(f"Element is disabled: {self.description}")
        if element.on_click is not None:
            element.on_click()

    async def fill(self, value: str, **kwargs: Any) -> None:
        self._element().value = value

    async def select_option(self, value: Optional[str] = None, label: Optional[str] = None, **kwargs: Any) -> List[str]:
        element = self._element()
        for option_value, option_label in element.options:
            if (label is not None and option_label == label) or (value is not None and option_value == value):
                element.value = option_value
                return [option_value]
        raise PlaywrightTimeoutError(f"No option {label or value!r} in {self.description}")

    async def check(self, **kwargs: Any) -> None:
        self._element().checked = True

    async def uncheck(self, **kwargs: Any) -> None:
        self._element().checked = False

    async def is_checked(self) -> bool:
        return self._element().checked

    async def is_disabled(self) -> bool:
        return self._element().disabled

    async def text_content(self) -> str:
        return self._element().text

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._element().attrs.get(name)

    async def input_value(self) -> str:
        return self._element().value


class FakeBrowserPage:
    """Playwright-like page rendering documents produced by an app."""

    def __init__(self, app: "FakeAdminApp", base_url: str = "http://localhost:8080"):
        self.app = app
        self.base_url = base_url.rstrip("/")
        self.url = "about:blank"
        self.document = FakeElement("html")
        self.closed = False
        self.history: List[str] = []

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.navigate(url)

    def navigate(self, url: str) -> None:
        parts = urlsplit(url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        final_path, self.document = self.app.handle(self, path)
        self.url = f"{self.base_url}{final_path}"
        self.history.append(final_path)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(lambda: list(self.document.children.get(selector, [])), selector)

    async def screenshot(self, **kwargs: Any) -> bytes:
        return b"\x89PNG\r\n"

    async def close(self) -> None:
        self.closed = True


def _document(elements: Optional[Dict[str, List[FakeElement]]] = None) -> FakeElement:
    return FakeElement("html", children=elements if elements is not None else {})


class FakeAdminApp:
    """
    Simulated administration panel.

    Every session gets its own app (logged out), while the repositories come
    from the shared `Database` so setup steps and screens see the same data.
    """

    def __init__(self, database: Database, router: Router, converter: Optional[CountryNameConverter] = None):
        self.countries = database.repository("country")
        self.provinces = database.repository("province")
        self.admins = database.repository("admin_user")
        self.router = router
        self.converter = converter or CountryNameConverter()
        self.user = None
        self._flash: Optional[Tuple[str, str]] = None
        self._login_failed = False

    def handle(self, page: FakeBrowserPage, path: str) -> Tuple[str, FakeElement]:
        route = self.router.match(path)
        if route is None:
            return path, _document()

        if route == "sylius_admin_login":
            return path, self._login(page)
        if self.user is None:
            return self.handle(page, self.router.generate("sylius_admin_login"))
        if route == "sylius_admin_dashboard":
            return path, self._dashboard()
        if route == "sylius_admin_country_index":
            return path, self._country_index(page)
        if route == "sylius_admin_country_create":
            return path, self._country_form(page, None)
        if route == "sylius_admin_country_update":
            country = self.countries.find(UPDATE_PATH.search(path.split("?", 1)[0]).group(1))
            if country is None:
                return path, _document()
            return path, self._country_form(page, country)
        return path, _document()

    # =========================================================================
    # Rendering
    # =========================================================================

    def _with_flash(self, elements: Dict[str, List[FakeElement]]) -> FakeElement:
        if self._flash is not None:
            message, css_class = self._flash
            elements[".sylius-flash-message"] = [
                FakeElement(text=message, attrs={"class": f"ui icon sylius-flash-message {css_class} message"})
            ]
            self._flash = None
        return _document(elements)

    def _login(self, page: FakeBrowserPage) -> FakeElement:
        username = FakeElement("input", attrs={"id": "_username"})
        password = FakeElement("input", attrs={"id": "_password", "type": "password"})

        def submit() -> None:
            admin = self.admins.find_one_by(username=username.value, plain_password=password.value)
            if admin is not None and admin.is_enabled():
                self.user, self._login_failed = admin, False
                page.navigate(self.router.generate("sylius_admin_dashboard"))
            else:
                self._login_failed = True
                page.navigate(self.router.generate("sylius_admin_login"))

        elements = {
            "#_username": [username],
            "#_password": [password],
            "form button[type='submit']": [FakeElement("button", text="Login", on_click=submit)],
        }
        if self._login_failed:
            elements[".message.negative"] = [FakeElement(text="Invalid credentials.")]
        return self._with_flash(elements)

    def _dashboard(self) -> FakeElement:
        return self._with_flash({
            "[data-test-admin-name]": [FakeElement("span", text=self.user.get_full_name())],
        })

    def _country_index(self, page: FakeBrowserPage) -> FakeElement:
        index_path = self.router.generate("sylius_admin_country_index")

        def deleter(country: Country) -> Callable[[], None]:
            def delete() -> None:
                self.countries.remove(country)
                self._flash = ("Country has been successfully deleted.", "positive")
                page.navigate(index_path)
            return delete

        rows = []
        for country in self.countries.find_all():
            rows.append(FakeElement("tr", children={
                "[data-column='code']": [FakeElement("td", text=country.code)],
                "[data-column='name']": [FakeElement("td", text=f" {country.name} ")],
                "[data-column='enabled']": [FakeElement("td", text="Enabled" if country.enabled else "Disabled")],
                "[data-test-action='delete']": [FakeElement("button", text="Delete", on_click=deleter(country))],
            }))
        table = FakeElement("table", attrs={"data-test-grid-table": ""}, children={"tbody tr": rows})
        return self._with_flash({"[data-test-grid-table]": [table]})

    def _province_item(self, document: Dict[str, List[FakeElement]], container: FakeElement,
                       province: Optional[Province]) -> FakeElement:
        item = FakeElement(children={
            "[data-test-province-name]": [FakeElement("input", value=province.name if province else "")],
            "[data-test-province-code]": [FakeElement("input", value=province.code if province else "")],
            "[data-test-province-abbreviation]": [
                FakeElement("input", value=(province.abbreviation or "") if province else "")
            ],
        })
        item.payload = province

        def delete() -> None:
            container.children[PROVINCE_ITEM].remove(item)
            if province is not None:
                document.pop(f"[data-test-province='{province.name}']", None)

        item.children["[data-test-delete-province]"] = [FakeElement("button", text="Delete", on_click=delete)]
        return item

    def _country_form(self, page: FakeBrowserPage, country: Optional[Country],
                      violation: Optional[str] = None) -> FakeElement:
        document: Dict[str, List[FakeElement]] = {}
        code = FakeElement(
            "select",
            attrs={"id": "sylius_country_code"},
            value=country.code if country else "",
            options=list(self.converter.COUNTRIES.items()),
            disabled=country is not None,
        )
        enabled = FakeElement("input", attrs={"id": "sylius_country_enabled", "type": "checkbox"},
                              checked=country.enabled if country else True)
        provinces = FakeElement(attrs={"id": "sylius_country_provinces"}, children={PROVINCE_ITEM: []})
        for province in (country.provinces if country else []):
            item = self._province_item(document, provinces, province)
            provinces.children[PROVINCE_ITEM].append(item)
            document[f"[data-test-province='{province.name}']"] = [item]

        def add_province() -> None:
            provinces.children[PROVINCE_ITEM].append(self._province_item(document, provinces, None))

        document.update({
            "#sylius_country_code": [code],
            "#sylius_country_enabled": [enabled],
            "#sylius_country_provinces": [provinces],
            "[data-test-add-province]": [FakeElement("button", text="Add province", on_click=add_province)],
        })

        if country is None:
            def submit() -> None:
                self._create_country(page, code.value, enabled.checked, provinces.children[PROVINCE_ITEM])
            document["[data-test-button='create']"] = [FakeElement("button", text="Create", on_click=submit)]
        else:
            def submit() -> None:
                self._update_country(page, country, enabled.checked, provinces.children[PROVINCE_ITEM])
            document["[data-test-button='update']"] = [FakeElement("button", text="Save changes", on_click=submit)]

        if violation is not None:
            document["[data-test-validation-error='code']"] = [FakeElement(text=violation)]
        return self._with_flash(document)

    # =========================================================================
    # Form handling
    # =========================================================================

    def _province_from_item(self, item: FakeElement) -> Province:
        if item.payload is not None:
            return item.payload
        def value(selector: str) -> str:
            return item.children[selector][0].value

        province = Province(
            code=value("[data-test-province-code]"),
            name=value("[data-test-province-name]"),
            abbreviation=value("[data-test-province-abbreviation]") or None,
        )
        self.provinces.add(province)
        return province

    def _create_country(self, page: FakeBrowserPage, code: str, enabled: bool, items: List[FakeElement]) -> None:
        create_path = self.router.generate("sylius_admin_country_create")
        violation = None
        if not code:
            violation = "Please choose country ISO code."
        elif self.countries.find_one_by(code=code) is not None:
            violation = "Country ISO code must be unique."
        if violation is not None:
            page.url = f"{page.base_url}{create_path}"
            page.document = self._country_form(page, None, violation)
            return

        country = Country(code=code, name=self.converter.convert_to_name(code))
        country.enabled = enabled
        for item in items:
            country.add_province(self._province_from_item(item))
        self.countries.add(country)
        self._flash = ("Country has been successfully created.", "positive")
        page.navigate(self.router.generate("sylius_admin_country_update", id=country.id))

    def _update_country(self, page: FakeBrowserPage, country: Country, enabled: bool, items: List[FakeElement]) -> None:
        country.enabled = enabled
        kept = [self._province_from_item(item) for item in items]
        for province in list(country.provinces):
            if province not in kept:
                country.remove_province(province)
                self.provinces.remove(province)
        for province in kept:
            country.add_province(province)
        self._flash = ("Country has been successfully updated.", "positive")
        page.navigate(self.router.generate("sylius_admin_country_update", id=country.id))

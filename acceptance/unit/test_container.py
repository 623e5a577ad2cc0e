"""
================================================================================
Service Container Tests
================================================================================

YAML service definitions: references, parameters, factories, aliases, scopes
and tags, plus the project's own services.yaml.

================================================================================
"""

import allure
import pytest
import yaml

from acceptance.domain import CountryNameConverter, Database
from acceptance.framework.config_loader import ConfigurationError
from acceptance.framework.container import (
    CircularReferenceError,
    Container,
    ScopeWideningError,
    ServiceNotFoundError,
)
from acceptance.framework.router import Router
from acceptance.framework.runner import BEFORE_SCENARIO_TAG
from acceptance.pages.admin.country_pages import IndexPage


def write_services(tmp_path, data, name="services.yaml"):
    path = tmp_path / name
    path.write_text(yaml.dump(data), encoding="utf-8")
    return path


@allure.epic("Service Container")
@allure.feature("Definitions")
class TestDefinitions:

    def test_references_parameters_and_factories(self, tmp_path):
        path = write_services(tmp_path, {
            "parameters": {"repository.name": "country", "timeout": 250},
            "services": {
                "database": {"class": "acceptance.domain.repository.Database", "arguments": ["zone"]},
                "countries": {"factory": ["@database", "repository"], "arguments": ["%repository.name%"]},
                "converter": {"class": "acceptance.domain.factories.CountryNameConverter"},
                "country_factory": {
                    "class": "acceptance.domain.factories.CountryFactory",
                    "arguments": {"converter": "@converter"},
                },
                "checker": {
                    "class": "acceptance.framework.notification.NotificationChecker",
                    "arguments": ["@?missing_session", "%timeout%"],
                },
            },
        })
        container = Container.from_yaml(path)

        database = container.get("database")
        assert isinstance(database, Database)
        assert container.get("countries") is database.repository("country")
        assert database.names == ["zone", "country"]
        assert container.get("country_factory").converter is container.get("converter")
        assert isinstance(container.get("converter"), CountryNameConverter)

        checker = container.get("checker")
        assert checker.session is None
        assert checker.timeout == 250
        assert container.parameter("kernel.project_dir")

    def test_string_parameters_are_interpolated(self, tmp_path):
        path = write_services(tmp_path, {
            "parameters": {"who": "Ted"},
            "services": {
                "router": {
                    "class": "acceptance.framework.router.Router",
                    "arguments": [{"greeting": "/hello/%who%/100%%"}, "http://%who%.test"],
                },
            },
        })
        container = Container.from_yaml(path, parameters={"who": "Bear"})

        router = container.get("router")
        assert router.generate("greeting") == "/hello/Bear/100%"
        assert router.base_url == "http://Bear.test"

    def test_unknown_service_and_parameter(self, tmp_path):
        container = Container.from_yaml(write_services(tmp_path, {"services": {}}))
        with pytest.raises(ServiceNotFoundError, match="non-existent service"):
            container.get("acceptance.nothing")
        with pytest.raises(ConfigurationError, match="non-existent parameter"):
            container.parameter("nothing")

    def test_circular_reference(self, tmp_path):
        path = write_services(tmp_path, {
            "services": {
                "a": {"class": "acceptance.domain.factories.CountryFactory", "arguments": ["@b"]},
                "b": {"class": "acceptance.domain.factories.CountryFactory", "arguments": ["@a"]},
            },
        })
        with pytest.raises(CircularReferenceError, match="a -> b -> a"):
            Container.from_yaml(path).get("a")

    def test_bad_class_path(self, tmp_path):
        path = write_services(tmp_path, {"services": {"x": {"class": "acceptance.domain.Nope"}}})
        with pytest.raises(ConfigurationError, match="Cannot import"):
            Container.from_yaml(path).get("x")

    def test_imports_and_aliases(self, tmp_path):
        (tmp_path / "services").mkdir()
        write_services(tmp_path, {
            "services": {"converter": {"class": "acceptance.domain.factories.CountryNameConverter"}},
        }, name="services/domain.yaml")
        path = write_services(tmp_path, {
            "imports": [{"resource": "services/domain.yaml"}],
            "services": {"CountryNameConverter": "@converter"},
        })
        container = Container.from_yaml(path)
        assert container.get("CountryNameConverter") is container.get("converter")
        assert set(container.service_ids()) == {"converter", "CountryNameConverter"}


@allure.epic("Service Container")
@allure.feature("Scopes")
class TestScopes:

    def test_synthetic_service_must_be_set(self, tmp_path):
        container = Container.from_yaml(write_services(tmp_path, {
            "services": {"session": {"synthetic": True, "scope": "scenario"}},
        }))
        with pytest.raises(ServiceNotFoundError, match="synthetic"):
            container.get("session")

        scope = container.scenario_scope()
        session = object()
        scope.set("session", session)
        assert scope.get("session") is session
        assert container.scenario_scope().has("session")
        with pytest.raises(ServiceNotFoundError):
            container.scenario_scope().get("session")

    def test_scenario_services_are_fresh_per_scope(self, container):
        first, second = container.scenario_scope(), container.scenario_scope()
        for scope in (first, second):
            scope.set("acceptance.browser_session", object())

        index = first.get("acceptance.page.admin.country.index")
        assert isinstance(index, IndexPage)
        assert first.get("acceptance.page.admin.country.index") is index
        assert second.get("acceptance.page.admin.country.index") is not index

        assert first.get("acceptance.router") is second.get("acceptance.router")
        assert isinstance(first.get("acceptance.router"), Router)

    @pytest.mark.P0
    def test_shared_service_cannot_hold_a_scenario_service(self, tmp_path):
        container = Container.from_yaml(write_services(tmp_path, {
            "services": {
                "converter": {"class": "acceptance.domain.factories.CountryNameConverter", "scope": "scenario"},
                "country_factory": {
                    "class": "acceptance.domain.factories.CountryFactory",
                    "arguments": ["@converter"],
                },
            },
        }))
        first, second = container.scenario_scope(), container.scenario_scope()

        with pytest.raises(ScopeWideningError, match='shared service "country_factory"'):
            first.get("country_factory")
        assert first.get("converter") is not second.get("converter")

    def test_root_container_does_not_build_scenario_services(self, tmp_path):
        container = Container.from_yaml(write_services(tmp_path, {
            "services": {
                "converter": {"class": "acceptance.domain.factories.CountryNameConverter", "scope": "scenario"},
            },
        }))
        with pytest.raises(ConfigurationError, match="request it from scenario_scope"):
            container.get("converter")

        scope = container.scenario_scope()
        converter = scope.get("converter")
        assert scope.get("converter") is converter
        assert container.scenario_scope().get("converter") is not converter

    def test_project_shared_services_stay_outside_scenarios(self, container):
        for service_id in container.service_ids():
            definition = container.definition(service_id)
            if definition.scope == "shared" and not definition.synthetic:
                container.get(service_id)

    def test_unknown_scope_is_rejected(self, tmp_path):
        path = write_services(tmp_path, {"services": {"x": {"class": "builtins.object", "scope": "request"}}})
        with pytest.raises(ConfigurationError, match="unknown scope"):
            Container.from_yaml(path)


@allure.epic("Service Container")
@allure.feature("Project Services")
class TestProjectServices:

    def test_every_suite_context_is_defined(self, container, suites):
        for suite in suites.values():
            for context_id in suite.contexts:
                assert container.has(context_id), context_id

    def test_database_purge_hook_is_tagged(self, container):
        assert container.find_tagged_service_ids(BEFORE_SCENARIO_TAG) == [
            ("acceptance.database", {"name": BEFORE_SCENARIO_TAG, "method": "purge"})
        ]

    def test_pages_receive_configured_parameters(self, container):
        scope = container.scenario_scope()
        scope.set("acceptance.browser_session", object())
        page = scope.get("acceptance.page.admin.country.update")
        assert page.base_url == "http://localhost:8080"
        assert page.timeout == 100
        assert page.resource_name == "country"

"""
================================================================================
Service Container
================================================================================

Declarative wiring of contexts, pages and collaborators from YAML.

Format (config/services.yaml):

    parameters:
        ui.timeout: 5000

    services:
        _defaults:
            scope: scenario

        acceptance.page.admin.country.index:
            class: acceptance.pages.admin.country_pages.IndexPage
            arguments: ["@acceptance.browser_session", "@acceptance.router", "country"]

        acceptance.router:
            factory: acceptance.framework.router.Router::from_yaml
            arguments: ["%kernel.project_dir%/config/routes.yaml"]
            scope: shared

        acceptance.browser_session:
            synthetic: true

        Some\\Alias: "@acceptance.router"

    imports:
        - { resource: services/contexts.yaml }

References:
    "@id"    another service         "@?id"  optional (None when missing)
    "%name%" a parameter             "%%"    a literal percent sign

Scopes:
    shared    one instance per container tree
    scenario  one instance per `scenario_scope()` child container; never
              built by the root container or injected into a shared service

================================================================================
"""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger

from .config_loader import PROJECT_ROOT, ConfigurationError


PARAMETER_REFERENCE = re.compile(r"%%|%([^%\s]+)%")

SHARED = "shared"
SCENARIO = "scenario"


class ServiceNotFoundError(Exception):
    """Raised when requesting an unknown (or unset synthetic) service."""
    pass


class CircularReferenceError(Exception):
    """Raised when services depend on each other in a cycle."""
    pass


class ScopeWideningError(ConfigurationError):
    """Raised when a scenario-scoped service is requested outside a scenario scope."""
    pass


@dataclass
class ServiceDefinition:
    id: str
    class_path: Optional[str] = None
    factory: Optional[str] = None
    arguments: Union[List[Any], Dict[str, Any]] = field(default_factory=list)
    scope: str = SHARED
    public: bool = True
    synthetic: bool = False
    tags: List[Dict[str, Any]] = field(default_factory=list)


def import_string(dotted_path: str) -> Any:
    """Import `package.module.Attribute`."""
    module_path, _, attribute = dotted_path.rpartition(".")
    if not module_path:
        raise ConfigurationError(f"'{dotted_path}' is not a dotted import path")
    try:
        module = importlib.import_module(module_path)
        return getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot import '{dotted_path}': {e}") from e


class Container:
    """
    Lazily instantiating service container.

    Usage:
        >>> container = Container.from_yaml("config/services.yaml")
        >>> scenario = container.scenario_scope()
        >>> scenario.set("acceptance.browser_session", page)
        >>> context = scenario.get("acceptance.context.ui.admin.managing_countries")
    """

    def __init__(
        self,
        definitions: Optional[Mapping[str, ServiceDefinition]] = None,
        parameters: Optional[Mapping[str, Any]] = None,
        aliases: Optional[Mapping[str, str]] = None,
        parent: Optional["Container"] = None,
    ):
        self._definitions: Dict[str, ServiceDefinition] = dict(definitions or {})
        self._parameters: Dict[str, Any] = dict(parameters or {})
        self._aliases: Dict[str, str] = dict(aliases or {})
        self._parent = parent
        self._instances: Dict[str, Any] = {}
        self._loading: List[str] = []

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_yaml(
        cls,
        path: Union[str, Path],
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> "Container":
        """
        Build a container from a YAML file and its imports.

        Args:
            path: Root services file
            parameters: Values overriding the file's parameters
        """
        container = cls(parameters={"kernel.project_dir": str(PROJECT_ROOT)})
        container._load_file(Path(path), seen=set())
        if parameters:
            container._parameters.update(parameters)
        logger.debug(
            f"Container built: {len(container._definitions)} services, "
            f"{len(container._aliases)} aliases, {len(container._parameters)} parameters"
        )
        return container

    def _load_file(self, path: Path, seen: set) -> None:
        path = path.resolve()
        if path in seen:
            return
        seen.add(path)
        if not path.exists():
            raise ConfigurationError(f"Service configuration not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        for entry in data.get("imports") or []:
            resource = entry["resource"] if isinstance(entry, dict) else entry
            self._load_file(path.parent / resource, seen)

        self._parameters.update(data.get("parameters") or {})

        services = dict(data.get("services") or {})
        defaults = services.pop("_defaults", None) or {}
        for service_id, definition in services.items():
            if isinstance(definition, str):
                if not definition.startswith("@"):
                    raise ConfigurationError(f'Alias "{service_id}" must reference a service with "@"')
                self._aliases[service_id] = definition[1:]
                continue
            self._definitions[service_id] = self._parse_definition(service_id, definition or {}, defaults)

    @staticmethod
    def _parse_definition(service_id: str, definition: Mapping[str, Any], defaults: Mapping[str, Any]) -> ServiceDefinition:
        options = {**defaults, **definition}
        scope = options.get("scope", SHARED)
        if scope not in (SHARED, SCENARIO):
            raise ConfigurationError(f'Service "{service_id}": unknown scope "{scope}"')

        factory = options.get("factory")
        if isinstance(factory, (list, tuple)):
            factory = "::".join(factory)

        class_path = options.get("class")
        synthetic = bool(options.get("synthetic", False))
        if not synthetic and not class_path and not factory:
            # Service id doubles as the class path (`App\Foo: ~` style).
            class_path = service_id

        tags = []
        for tag in options.get("tags") or []:
            tags.append({"name": tag} if isinstance(tag, str) else dict(tag))

        return ServiceDefinition(
            id=service_id,
            class_path=class_path,
            factory=factory,
            arguments=options.get("arguments") or [],
            scope=scope,
            public=bool(options.get("public", True)),
            synthetic=synthetic,
            tags=tags,
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    @property
    def root(self) -> "Container":
        return self._parent.root if self._parent else self

    def _resolve_alias(self, service_id: str) -> str:
        root = self.root
        seen = []
        while service_id in root._aliases:
            if service_id in seen:
                raise CircularReferenceError(f"Circular alias: {' -> '.join(seen + [service_id])}")
            seen.append(service_id)
            service_id = root._aliases[service_id]
        return service_id

    def definition(self, service_id: str) -> ServiceDefinition:
        service_id = self._resolve_alias(service_id)
        try:
            return self.root._definitions[service_id]
        except KeyError:
            raise ServiceNotFoundError(f'You have requested a non-existent service "{service_id}".') from None

    def has(self, service_id: str) -> bool:
        service_id = self._resolve_alias(service_id)
        return service_id in self.root._definitions or self._owner_has_instance(service_id)

    def _owner_has_instance(self, service_id: str) -> bool:
        container: Optional[Container] = self
        while container is not None:
            if service_id in container._instances:
                return True
            container = container._parent
        return False

    def get(self, service_id: str) -> Any:
        service_id = self._resolve_alias(service_id)

        container: Optional[Container] = self
        while container is not None:
            if service_id in container._instances:
                return container._instances[service_id]
            container = container._parent

        definition = self.definition(service_id)
        if definition.synthetic:
            raise ServiceNotFoundError(
                f'The "{service_id}" service is synthetic, it needs to be set at boot time before it can be used.'
            )

        if definition.scope == SCENARIO:
            if self._parent is None:
                raise self._scope_widening(service_id)
            return self._instantiate(definition)
        return self.root._instantiate(definition)

    def _scope_widening(self, service_id: str) -> ScopeWideningError:
        if self._loading:
            return ScopeWideningError(
                f'Scope widening: shared service "{self._loading[-1]}" cannot depend on '
                f'scenario-scoped service "{service_id}".'
            )
        return ScopeWideningError(
            f'Service "{service_id}" is scenario-scoped; request it from scenario_scope().'
        )

    def set(self, service_id: str, instance: Any) -> None:
        """Register a ready-made instance in this container."""
        self._instances[self._resolve_alias(service_id)] = instance

    def _instantiate(self, definition: ServiceDefinition) -> Any:
        if definition.id in self._loading:
            raise CircularReferenceError(
                f"Circular reference detected for service \"{definition.id}\", "
                f"path: \"{' -> '.join(self._loading + [definition.id])}\"."
            )
        self._loading.append(definition.id)
        try:
            target = self._factory_callable(definition)
            arguments = self._resolve_value(definition.arguments)
            if isinstance(arguments, dict):
                instance = target(**arguments)
            else:
                instance = target(*arguments)
        finally:
            self._loading.pop()

        self._instances[definition.id] = instance
        logger.trace(f"Instantiated service {definition.id}")
        return instance

    def _factory_callable(self, definition: ServiceDefinition) -> Callable[..., Any]:
        if definition.factory:
            owner, _, method = definition.factory.partition("::")
            if not method:
                return import_string(owner)
            if owner.startswith("@"):
                return getattr(self.get(owner[1:]), method)
            return getattr(import_string(owner), method)
        return import_string(definition.class_path)

    # =========================================================================
    # Parameters
    # =========================================================================

    def parameter(self, name: str) -> Any:
        try:
            return self.root._parameters[name]
        except KeyError:
            raise ConfigurationError(f'You have requested a non-existent parameter "{name}".') from None

    def has_parameter(self, name: str) -> bool:
        return name in self.root._parameters

    def _resolve_value(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._resolve_value(v) for v in value]
        if isinstance(value, dict):
            return {k: self._resolve_value(v) for k, v in value.items()}
        if not isinstance(value, str):
            return value

        if value.startswith("@@"):
            return value[1:]
        if value.startswith("@?"):
            try:
                return self.get(value[2:])
            except ServiceNotFoundError:
                return None
        if value.startswith("@"):
            return self.get(value[1:])

        whole = PARAMETER_REFERENCE.fullmatch(value)
        if whole and whole.group(1):
            return self._resolve_value(self.parameter(whole.group(1)))

        def replace(match: "re.Match") -> str:
            if match.group(0) == "%%":
                return "%"
            return str(self._resolve_value(self.parameter(match.group(1))))

        return PARAMETER_REFERENCE.sub(replace, value)

    # =========================================================================
    # Tags & scopes
    # =========================================================================

    def find_tagged_service_ids(self, tag: str) -> List[Tuple[str, Dict[str, Any]]]:
        found = []
        for service_id, definition in self.root._definitions.items():
            for attributes in definition.tags:
                if attributes.get("name") == tag:
                    found.append((service_id, attributes))
        return found

    def scenario_scope(self) -> "Container":
        """Child container holding fresh scenario-scoped services."""
        return Container(parent=self.root)

    def service_ids(self) -> List[str]:
        return [*self.root._definitions, *self.root._aliases]


__all__ = [
    "Container",
    "ServiceDefinition",
    "ServiceNotFoundError",
    "CircularReferenceError",
    "ScopeWideningError",
    "import_string",
]

"""
================================================================================
Router
================================================================================

Generates application URLs from route names, mirroring the routes the
administration panel exposes (config/routes.yaml):

    sylius_admin_country_update: /admin/countries/{id}/edit

Parameters not consumed by the path become the query string.

================================================================================
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import yaml
from loguru import logger


PATH_PARAMETER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class RouteNotFoundError(Exception):
    """Raised when generating a URL for an unknown route name."""
    pass


class RouteParameterError(Exception):
    """Raised when a required path parameter is missing."""
    pass


class Router:
    """
    Route name -> path template registry.

    Usage:
        >>> router = Router({"sylius_admin_country_update": "/admin/countries/{id}/edit"})
        >>> router.generate("sylius_admin_country_update", id=3)
        '/admin/countries/3/edit'
    """

    def __init__(self, routes: Mapping[str, str], base_url: str = ""):
        self._routes: Dict[str, str] = dict(routes)
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_yaml(cls, path: Union[str, Path], base_url: str = "") -> "Router":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        routes = data.get("routes", data)
        logger.debug(f"Loaded {len(routes)} routes from {path}")
        return cls(routes, base_url=base_url)

    def has(self, name: str) -> bool:
        return name in self._routes

    def generate(self, name: str, absolute: bool = False, **parameters: Any) -> str:
        try:
            template = self._routes[name]
        except KeyError:
            raise RouteNotFoundError(f'Unable to generate a URL for the named route "{name}".') from None

        required = PATH_PARAMETER.findall(template)
        missing = [p for p in required if p not in parameters]
        if missing:
            raise RouteParameterError(
                f'Some mandatory parameters are missing ("{", ".join(missing)}") '
                f'to generate a URL for route "{name}".'
            )

        path = PATH_PARAMETER.sub(lambda m: str(parameters[m.group(1)]), template)
        query = {k: v for k, v in parameters.items() if k not in required}
        if query:
            path = f"{path}?{urlencode(query)}"
        return f"{self.base_url}{path}" if absolute else path

    def match(self, path: str) -> Optional[str]:
        """Return the name of the first route whose template matches `path`."""
        path = path.split("?", 1)[0]
        for name, template in self._routes.items():
            pattern = "^" + PATH_PARAMETER.sub(r"[^/]+", re.escape(template).replace(r"\{", "{").replace(r"\}", "}")) + "$"
            if re.match(pattern, path):
                return name
        return None


__all__ = [
    "Router",
    "RouteNotFoundError",
    "RouteParameterError",
]

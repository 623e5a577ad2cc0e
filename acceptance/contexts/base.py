"""Common base for step contexts."""

from __future__ import annotations

from typing import Any, List

from acceptance.framework.steps import StepRegistry


class Context:
    """
    A group of step definitions sharing collaborators.

    Subclasses return their definitions from `definitions()`; the runner
    registers them into the scenario's registry.
    """

    def definitions(self) -> List[Any]:
        raise NotImplementedError

    def register(self, registry: StepRegistry) -> None:
        registry.extend(self.definitions())

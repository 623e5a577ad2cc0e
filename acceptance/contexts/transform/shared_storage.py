"""Resolves "this country", "that province", "it" to stored entities."""

from __future__ import annotations

from typing import Any

from acceptance.contexts.base import Context
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Transformation


class SharedStorageContext(Context):
    def definitions(self):
        return [
            Transformation(r"/^(?:this|that|the) ([^\"]+)$/", self.get_resource),
            Transformation(r"/^(?:it|its|theirs|them)$/", self.get_latest_resource),
        ]

    def get_resource(self, storage: SharedStorage, resource: str) -> Any:
        return storage.get(resource.replace(" ", "_"))

    def get_latest_resource(self, storage: SharedStorage, *_: Any) -> Any:
        return storage.get_latest_resource()

"""Outcome assertions for the domain suite, read from the scenario storage."""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.contexts.domain.managing_countries import UNIQUE_CODE_MESSAGE
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Then


class NotificationContext(Context):
    def definitions(self):
        return [
            Then(
                r"/^I should be notified that it has been successfully (created|edited|deleted)$/",
                self.should_be_notified_about_successful_action,
                examples=["I should be notified that it has been successfully created"],
            ),
            Then(
                "I should be notified that the country is already added",
                self.should_be_notified_that_country_is_already_added,
            ),
        ]

    def should_be_notified_about_successful_action(self, storage: SharedStorage, action: str) -> None:
        violations = storage.get("violations") if storage.has("violations") else []
        assert not violations, f"Expected the resource to be {action}, got: {'; '.join(violations)}"

    def should_be_notified_that_country_is_already_added(self, storage: SharedStorage) -> None:
        violations = storage.get("violations")
        assert UNIQUE_CODE_MESSAGE in violations, f"Expected a uniqueness violation, got: {violations}"

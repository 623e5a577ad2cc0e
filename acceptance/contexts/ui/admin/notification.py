"""Flash message assertions for the admin panel."""

from __future__ import annotations

from acceptance.contexts.base import Context
from acceptance.framework.notification import NotificationChecker, NotificationType
from acceptance.framework.shared_storage import SharedStorage
from acceptance.framework.steps import Then


SUCCESS_MESSAGES = {
    "created": "has been successfully created.",
    "edited": "has been successfully updated.",
    "deleted": "has been successfully deleted.",
}


class NotificationContext(Context):
    def __init__(self, notification_checker: NotificationChecker):
        self.notification_checker = notification_checker

    def definitions(self):
        return [
            Then(
                r"/^I should be notified that it has been successfully (created|edited|deleted)$/",
                self.should_be_notified_about_successful_action,
                examples=[f"I should be notified that it has been successfully {a}" for a in SUCCESS_MESSAGES],
            ),
            Then(
                r'/^I should be notified that "([^"]+)" has failed$/',
                self.should_be_notified_about_failure,
                examples=['I should be notified that "Removing" has failed'],
            ),
        ]

    async def should_be_notified_about_successful_action(self, storage: SharedStorage, action: str) -> None:
        await self.notification_checker.check_notification(SUCCESS_MESSAGES[action], NotificationType.SUCCESS)

    async def should_be_notified_about_failure(self, storage: SharedStorage, message: str) -> None:
        await self.notification_checker.check_notification(message, NotificationType.FAILURE)

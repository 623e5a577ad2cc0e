"""
================================================================================
Notification Checker
================================================================================

Assertions on flash messages (toasts) shown after form submissions.

================================================================================
"""

from __future__ import annotations

from enum import Enum

import allure
from loguru import logger
from playwright.async_api import Page as BrowserPage
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


FLASH_SELECTOR = ".sylius-flash-message"


class NotificationType(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    INFO = "info"

    @property
    def css_class(self) -> str:
        return {
            NotificationType.SUCCESS: "positive",
            NotificationType.FAILURE: "negative",
            NotificationType.INFO: "info",
        }[self]


class NotificationChecker:
    """
    Reads the flash message of whatever page is loaded.

    Usage:
        >>> checker = NotificationChecker(session)
        >>> await checker.check_notification("has been successfully updated", NotificationType.SUCCESS)
    """

    def __init__(self, session: BrowserPage, timeout: int = 5000):
        self.session = session
        self.timeout = int(timeout)

    async def check_notification(self, message: str, notification_type: NotificationType) -> None:
        with allure.step(f"Check {notification_type.value} notification: {message}"):
            flash = self.session.locator(FLASH_SELECTOR).first
            try:
                await flash.wait_for(state="visible", timeout=self.timeout)
            except PlaywrightTimeoutError:
                raise AssertionError(
                    f'Expected {notification_type.value} notification "{message}", but no notification was shown'
                ) from None

            text = (await flash.text_content() or "").strip()
            classes = (await flash.get_attribute("class") or "").split()
            logger.debug(f"Flash message: {text!r} classes={classes}")

            assert message in text, (
                f'Expected notification "{message}", got "{text}" instead'
            )
            assert notification_type.css_class in classes, (
                f'Expected a {notification_type.value} notification, got classes "{" ".join(classes)}"'
            )


__all__ = [
    "NotificationChecker",
    "NotificationType",
]

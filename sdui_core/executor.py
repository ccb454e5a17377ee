from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Literal

from .actions import (
    ActionParseError,
    BIOMETRIC_AUTH,
    POP_PAGE,
    PUSH_PAGE,
    REGISTER,
    SUBMIT_FORM,
    TOAST,
    decode_action_token,
)
from .navigation import NavigationController

LOGGER = logging.getLogger(__name__)

NotificationLevel = Literal["success", "info", "error"]
OutcomeKind = Literal["navigated", "notified", "ignored"]

GENERIC_ACTION_MESSAGE = "Action executed!"
DEFAULT_TOAST_MESSAGE = "Toast message displayed!"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


@dataclass(frozen=True)
class ActionOutcome:
    token: str
    kind: OutcomeKind
    page_id: str | None = None
    notification: Notification | None = None


class PreviewActionExecutor:
    """Runs action tokens inside a preview: navigation plus advisory notifications."""

    def __init__(
        self,
        navigation: NavigationController,
        notify: Callable[[Notification], None] | None = None,
    ) -> None:
        self._navigation = navigation
        self._notify = notify

    @property
    def navigation(self) -> NavigationController:
        return self._navigation

    def execute(self, token: str) -> ActionOutcome:
        LOGGER.debug("executing action token %s", token)
        if token == POP_PAGE or token == PUSH_PAGE or token.startswith(f"{PUSH_PAGE}:"):
            self._navigation.apply_token(token)
            return ActionOutcome(token=token, kind="navigated", page_id=self._navigation.current)

        try:
            action_type, params = decode_action_token(token)
        except ActionParseError as exc:
            LOGGER.warning("could not parse action token: %s", exc)
            return self._emit(token, Notification("info", GENERIC_ACTION_MESSAGE))

        if action_type == PUSH_PAGE:
            page_id = params.get("pageId") or params.get("page_id")
            if page_id:
                self._navigation.push(str(page_id))
            return ActionOutcome(token=token, kind="navigated", page_id=self._navigation.current)
        if action_type == POP_PAGE:
            self._navigation.pop()
            return ActionOutcome(token=token, kind="navigated", page_id=self._navigation.current)
        if action_type == SUBMIT_FORM:
            return self._emit(token, Notification("success", "Form submitted successfully!"))
        if action_type == TOAST:
            message = params.get("message")
            return self._emit(token, Notification("info", str(message) if message else DEFAULT_TOAST_MESSAGE))
        if action_type == BIOMETRIC_AUTH:
            return self._emit(token, Notification("info", "Biometric authentication requested"))
        if action_type == REGISTER:
            return self._emit(token, Notification("info", "Registration initiated!"))
        LOGGER.info("action `%s` executed without a handler", action_type)
        return ActionOutcome(token=token, kind="ignored")

    def _emit(self, token: str, notification: Notification) -> ActionOutcome:
        if self._notify is not None:
            self._notify(notification)
        return ActionOutcome(token=token, kind="notified", notification=notification)

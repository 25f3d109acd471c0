# services/notifications.py

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional, Protocol

from utils import get_logger

logger = get_logger("notifications")


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Notification:
    kind: str
    title: str
    body: Optional[str] = None
    toast: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, body: Optional[str] = None,
               toast: bool = False) -> None: ...

    async def confirm(self, title: str, body: str,
                      kind: NotificationKind = NotificationKind.WARNING) -> bool: ...


class RequestNotifier:
    """
    Notification surface for one HTTP request.

    Notifications are collected so the page (or the JSON response) can show
    them. Confirmation happens in the browser before the request is sent, so
    confirm() answers with what the user already chose; no answer counts as
    dismissed.
    """

    def __init__(self, confirmed: Optional[bool] = None):
        self.confirmed = confirmed
        self.notifications: List[Notification] = []
        self.prompts: List[Notification] = []

    def notify(self, kind: NotificationKind, title: str, body: Optional[str] = None,
               toast: bool = False) -> None:
        kind = NotificationKind(kind)
        level = logging.ERROR if kind == NotificationKind.ERROR else logging.INFO
        logger.log(level, "%s: %s %s", kind.value, title, body or "")
        self.notifications.append(Notification(kind=kind.value, title=title, body=body, toast=toast))

    async def confirm(self, title: str, body: str,
                      kind: NotificationKind = NotificationKind.WARNING) -> bool:
        self.prompts.append(Notification(kind=NotificationKind(kind).value, title=title, body=body))
        answer = bool(self.confirmed)
        logger.info("confirm '%s' (%s) -> %s", title, body, answer)
        return answer

    def as_dicts(self) -> List[Dict]:
        return [n.to_dict() for n in self.notifications]

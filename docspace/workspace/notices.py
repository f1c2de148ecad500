"""User-facing dismissible messages."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notice:
    id: int
    kind: NoticeKind
    text: str


class NoticeBoard:
    """Collects messages for the view; the user dismisses them one by one."""

    def __init__(self) -> None:
        self._notices: List[Notice] = []
        self._ids = itertools.count(1)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    def error(self, text: str) -> Notice:
        return self._post(NoticeKind.ERROR, text)

    def success(self, text: str) -> Notice:
        return self._post(NoticeKind.SUCCESS, text)

    def _post(self, kind: NoticeKind, text: str) -> Notice:
        notice = Notice(next(self._ids), kind, text)
        self._notices.append(notice)
        logger.debug("Notice %d (%s): %s", notice.id, kind.value, text)
        return notice

    def dismiss(self, notice_id: int) -> None:
        self._notices = [n for n in self._notices if n.id != notice_id]

    def latest(self, kind: Optional[NoticeKind] = None) -> Optional[Notice]:
        for notice in reversed(self._notices):
            if kind is None or notice.kind is kind:
                return notice
        return None


__all__ = ["Notice", "NoticeBoard", "NoticeKind"]

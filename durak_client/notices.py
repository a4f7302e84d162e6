"""
Timed notices shown to the user.

Two kinds exist and they are independent of each other: the command-error
banner and the informational toast. Showing a notice replaces the visible one
of the same kind and restarts that kind's clear timer.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("durak_client.notices")


class NoticeKind(Enum):
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    """
    A visible notice.

    Attributes:
        kind: Error banner or info toast
        message: Error text, or the message id of an info toast
        params: Parameters for a localized info message
    """

    kind: NoticeKind
    message: str
    params: Dict[str, Any] = field(default_factory=dict)


class NoticeBoard:
    """
    Holds at most one visible notice per kind and clears it on a timer.

    Args:
        error_timeout: Seconds the error banner stays visible
        info_timeout: Seconds the info toast stays visible
        on_change: Called with ``(kind, notice)`` when a notice is shown, and
            with ``(kind, None)`` when it is cleared
    """

    def __init__(
        self,
        error_timeout: float = 3.0,
        info_timeout: float = 10.0,
        on_change: Optional[Callable[[NoticeKind, Optional[Notice]], None]] = None,
    ):
        self.timeouts = {NoticeKind.ERROR: error_timeout, NoticeKind.INFO: info_timeout}
        self.on_change = on_change
        self._visible: Dict[NoticeKind, Notice] = {}
        self._timers: Dict[NoticeKind, asyncio.TimerHandle] = {}

    @property
    def error(self) -> Optional[Notice]:
        return self._visible.get(NoticeKind.ERROR)

    @property
    def info(self) -> Optional[Notice]:
        return self._visible.get(NoticeKind.INFO)

    def show_error(self, message: str) -> Notice:
        return self.show(Notice(NoticeKind.ERROR, message))

    def show_info(self, message_id: str, params: Optional[Dict[str, Any]] = None) -> Notice:
        return self.show(Notice(NoticeKind.INFO, message_id, dict(params or {})))

    def show(self, notice: Notice) -> Notice:
        """
        Show a notice and (re)start its kind's clear timer.

        Must be called from a running event loop.
        """
        kind = notice.kind
        self._cancel_timer(kind)
        self._visible[kind] = notice

        loop = asyncio.get_running_loop()
        self._timers[kind] = loop.call_later(self.timeouts[kind], self.clear, kind)
        logger.debug(f"Showing {kind.value} notice {notice.message!r}")

        self._changed(kind, notice)
        return notice

    def clear(self, kind: NoticeKind) -> None:
        self._cancel_timer(kind)
        if self._visible.pop(kind, None) is not None:
            self._changed(kind, None)

    def close(self) -> None:
        """Cancel pending timers without notifying."""
        for kind in list(self._timers):
            self._cancel_timer(kind)
        self._visible.clear()

    def _cancel_timer(self, kind: NoticeKind) -> None:
        timer = self._timers.pop(kind, None)
        if timer is not None:
            timer.cancel()

    def _changed(self, kind: NoticeKind, notice: Optional[Notice]) -> None:
        if self.on_change is not None:
            self.on_change(kind, notice)

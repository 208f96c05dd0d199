"""Adapter between an external selection source and the history store."""

from __future__ import annotations

import logging
from typing import Callable, Protocol, runtime_checkable

from .history import Handle, HistoryStore

logger = logging.getLogger(__name__)


@runtime_checkable
class SelectionEnvironment(Protocol):
    """Source of selection-changed notifications that can also be driven.

    ``select`` returns True when the environment will report the change back
    through the subscribed callbacks, and False when no notification will
    follow (the handle is already selected or cannot be selected).
    """

    def subscribe(self, callback: Callable[[Handle | None], None]) -> None: ...
    def unsubscribe(self, callback: Callable[[Handle | None], None]) -> None: ...
    def select(self, handle: Handle) -> bool: ...


class SelectionBridge:
    """Forwards external selections into a HistoryStore without looping.

    When the store navigates, the bridge tells the environment to select
    the target item. The environment echoes that as an ordinary
    selection-changed notification, which must not be recorded as new
    history. Each navigation issues a fresh token; the next notification
    consumes the pending token instead of being recorded.
    """

    def __init__(self, store: HistoryStore, environment: SelectionEnvironment) -> None:
        self.store = store
        self.environment = environment
        self._attached = False
        self._last_token = 0
        self._pending_token: int | None = None

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def suppression_active(self) -> bool:
        return self._pending_token is not None

    def attach(self) -> None:
        """Start listening to the environment and driving it from the store."""
        if self._attached:
            return
        self.environment.subscribe(self.on_external_selection_changed)
        self.store.set_apply_selection(self.apply_navigation)
        self._attached = True
        logger.debug("Selection bridge attached to %r", self.environment)

    def detach(self) -> None:
        """Stop listening. Safe to call more than once."""
        if not self._attached:
            return
        try:
            self.environment.unsubscribe(self.on_external_selection_changed)
        finally:
            self.store.set_apply_selection(None)
            self._pending_token = None
            self._attached = False
            logger.debug("Selection bridge detached from %r", self.environment)

    def on_external_selection_changed(self, handle: Handle | None) -> None:
        """Handle a selection-changed notification from the environment."""
        if self._pending_token is not None:
            logger.debug(
                "Suppressed navigation echo %r (token %d)", handle, self._pending_token
            )
            self._pending_token = None
            return

        if handle is None:
            return

        self.store.record_selection(handle)

    def apply_navigation(self, handle: Handle) -> None:
        """Select ``handle`` in the environment on behalf of the store."""
        self._last_token += 1
        token = self._last_token
        self._pending_token = token

        try:
            will_echo = self.environment.select(handle)
        except Exception:
            if self._pending_token == token:
                self._pending_token = None
            raise

        # No notification is coming, so nothing is left to suppress
        if not will_echo and self._pending_token == token:
            logger.debug("No echo expected for %r, clearing token %d", handle, token)
            self._pending_token = None

    def __enter__(self) -> "SelectionBridge":
        self.attach()
        return self

    def __exit__(self, *args) -> None:
        self.detach()

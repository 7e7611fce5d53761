# -*- coding: utf-8 -*-
"""Undo / redo history for inverter status edits.

The history owns the enriched feature collection. Every edit replaces the
whole collection with a new immutable snapshot (a tuple of frozen
:class:`EnrichedFeature`) and pushes the previous one onto a stack:

- ``toggle_status`` pushes onto the undo stack and clears the redo stack,
  so there is never a branching history.
- ``undo`` / ``redo`` move snapshots between the two stacks.

Both stacks are bounded; when full, the oldest snapshot is discarded.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple
from typing import Protocol

from lvtracker_lib.constants import HISTORY_MAX_DEPTH
from lvtracker_lib.models import EnrichedFeature

logger = logging.getLogger(__name__)

Snapshot = tuple[EnrichedFeature, ...]


class HistoryState(NamedTuple):
    """Current collection and availability of further undo / redo."""

    features: Snapshot
    can_undo: bool
    can_redo: bool


class HistoryListener(Protocol):
    """Protocol for history-change callbacks."""

    def __call__(self, state: HistoryState) -> None:
        """Receive the state after a change."""
        ...


class StatusHistory:
    """Two-stack command history over the enriched feature collection.

    Example:
        history = StatusHistory(site.features)
        history.toggle_status("INV 01")
        history.undo()
        history.redo()
    """

    def __init__(
        self,
        features: Iterable[EnrichedFeature],
        *,
        max_depth: int | None = HISTORY_MAX_DEPTH,
    ) -> None:
        self._current: Snapshot = tuple(features)
        self._undo: deque[Snapshot] = deque(maxlen=max_depth)
        self._redo: deque[Snapshot] = deque(maxlen=max_depth)
        self._listeners: list[HistoryListener] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def features(self) -> Snapshot:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def state(self) -> HistoryState:
        return HistoryState(self._current, self.can_undo, self.can_redo)

    def done_features(self) -> list[EnrichedFeature]:
        return [f for f in self._current if f.is_done]

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: HistoryListener) -> None:
        """Call ``listener`` with the new state after every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: HistoryListener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> HistoryState:
        state = self.state
        for listener in list(self._listeners):
            listener(state)
        return state

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def toggle_status(self, inverter_id: str) -> HistoryState:
        """Flip ``pending`` / ``done`` on the feature(s) named ``inverter_id``.

        The previous collection goes onto the undo stack and the redo stack
        is cleared. An id matching no feature leaves the history untouched.
        """
        if not any(f.inverter_id == inverter_id for f in self._current):
            logger.warning("Cannot toggle unknown inverter `%s`", inverter_id)
            return self.state

        self._undo.append(self._current)
        self._redo.clear()
        self._current = tuple(
            f.toggled() if f.inverter_id == inverter_id else f for f in self._current
        )
        return self._notify()

    def undo(self) -> HistoryState:
        """Restore the previous collection; no-op when nothing to undo."""
        if not self._undo:
            return self.state
        self._redo.append(self._current)
        self._current = self._undo.pop()
        return self._notify()

    def redo(self) -> HistoryState:
        """Re-apply the last undone edit; no-op when nothing to redo."""
        if not self._redo:
            return self.state
        self._undo.append(self._current)
        self._current = self._redo.pop()
        return self._notify()

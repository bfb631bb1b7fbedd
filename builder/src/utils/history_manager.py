"""
Undo/Redo History Manager for the Bouquet Builder

Linear history of item-list snapshots with a cursor. Committing while the
cursor is behind the newest entry drops the redo tail; there is no
branching. The oldest entries are evicted once the cap is exceeded.
"""

import copy
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from constants import DEFAULT_HISTORY_CAP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One commit point: a private deep copy of the snapshot"""
    snapshot: Any
    description: str = ""
    timestamp: float = field(default_factory=time.monotonic)


class HistoryManager:
    """Manages undo/redo history with state snapshots"""

    def __init__(self, max_history: int = DEFAULT_HISTORY_CAP):
        """
        Initialize the history manager

        Args:
            max_history: Maximum number of entries to keep
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self.max_history = max_history
        self.history: List[HistoryEntry] = []
        self.current_index = -1  # -1 means no entries
        self._listeners: List[Callable[[bool, bool], None]] = []

    def commit(self, snapshot, description: str = "") -> HistoryEntry:
        """
        Record a new commit point

        Args:
            snapshot: State to record; deep copied, so later changes to the
                caller's object never reach the history
            description: Optional description of the change

        Returns:
            The stored HistoryEntry
        """
        # Drop the redo tail
        if self.current_index < len(self.history) - 1:
            del self.history[self.current_index + 1:]

        entry = HistoryEntry(copy.deepcopy(snapshot), description)
        self.history.append(entry)
        self.current_index += 1

        # Evict oldest first
        while len(self.history) > self.max_history:
            evicted = self.history.pop(0)
            self.current_index -= 1
            logger.debug("Evicted history entry: %s", evicted.description)

        self._notify_listeners()
        logger.debug("State committed: %s (index: %d, total: %d)",
                     description, self.current_index, len(self.history))
        return entry

    def undo(self):
        """
        Move back one entry

        Returns:
            Copy of the snapshot at the new cursor, or None if at the start
        """
        if not self.can_undo():
            logger.debug("Cannot undo - at beginning of history")
            return None

        self.current_index -= 1
        entry = self.history[self.current_index]
        self._notify_listeners()
        logger.debug("Undo to: %s (index: %d)", entry.description, self.current_index)
        return copy.deepcopy(entry.snapshot)

    def redo(self):
        """
        Move forward one entry

        Returns:
            Copy of the snapshot at the new cursor, or None if at the end
        """
        if not self.can_redo():
            logger.debug("Cannot redo - at end of history")
            return None

        self.current_index += 1
        entry = self.history[self.current_index]
        self._notify_listeners()
        logger.debug("Redo to: %s (index: %d)", entry.description, self.current_index)
        return copy.deepcopy(entry.snapshot)

    def can_undo(self) -> bool:
        return self.current_index > 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.history) - 1

    def clear(self):
        """Clear all history"""
        self.history = []
        self.current_index = -1
        self._notify_listeners()
        logger.debug("History cleared")

    def current_snapshot(self):
        """Copy of the snapshot at the cursor, or None if empty"""
        if 0 <= self.current_index < len(self.history):
            return copy.deepcopy(self.history[self.current_index].snapshot)
        return None

    def __len__(self) -> int:
        return len(self.history)

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback: Callable[[bool, bool], None]):
        """
        Add a listener to be notified when history state changes

        Args:
            callback: Called with (can_undo, can_redo)
        """
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self):
        can_undo, can_redo = self.can_undo(), self.can_redo()
        for callback in list(self._listeners):
            try:
                callback(can_undo, can_redo)
            except Exception:
                # A broken listener must not break the history operation
                logger.exception("Error notifying history listener %r", callback)

    # ========================================
    # Descriptions
    # ========================================

    def get_current_description(self) -> str:
        if 0 <= self.current_index < len(self.history):
            return self.history[self.current_index].description
        return ""

    def get_undo_description(self) -> str:
        """Description of the entry being undone (the one at the cursor)"""
        if self.can_undo():
            return self.history[self.current_index].description
        return ""

    def get_redo_description(self) -> str:
        """Description of the entry redo would move to"""
        if self.can_redo():
            return self.history[self.current_index + 1].description
        return ""

"""History management and undo/redo for BuilderSession"""

from utils.logger import loggerRaise


class HistoryMixin:
    """Undo/redo system and commit bookkeeping

    This mixin assumes the class has:
    - self.model: ArrangementModel
    - self.history: HistoryManager
    - self._is_applying_history: bool
    """

    def _capture_current_state(self):
        """Capture the current item list for history"""
        return self.model.get_snapshot()

    def _restore_state(self, state):
        """Restore an item list from history"""
        if state is None:
            return

        self._is_applying_history = True
        try:
            self.model.set_snapshot(state)
        except Exception as e:
            loggerRaise(e, "Error restoring history state")
        finally:
            self._is_applying_history = False

    def _save_state(self, description):
        """Commit the current state to history"""
        if self._is_applying_history:
            return  # Don't commit while undo/redo is restoring

        self.history.commit(self._capture_current_state(), description)
        if description != "New bouquet":
            self.is_saved = False

    # ========================================
    # Undo / Redo
    # ========================================

    def undo(self) -> bool:
        """Restore the previous commit point; False if there is none"""
        state = self.history.undo()
        if state is None:
            return False
        self._restore_state(state)
        return True

    def redo(self) -> bool:
        """Re-apply the next commit point; False if there is none"""
        state = self.history.redo()
        if state is None:
            return False
        self._restore_state(state)
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

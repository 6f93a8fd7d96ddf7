"""One-shot confirmation gates for actions that discard unsaved edits."""
import logging
from enum import Enum
from typing import Callable, Dict

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    """States of a confirmation gate"""
    CLEAN = "clean"
    PENDING_CONFIRM = "pending-confirm"


class ConfirmGate:
    """
    Admission check in front of a discarding action

    The first request made while the form is dirty is refused and the gate
    moves to pending-confirm. The next request goes through and the gate
    returns to clean.
    """

    def __init__(self, action: str):
        self.action = action
        self.state = GateState.CLEAN

    def request(self, is_dirty: Callable[[], bool]) -> bool:
        """
        Ask to run the action

        Args:
            is_dirty: Predicate reporting unsaved changes

        Returns:
            bool: True if the action may proceed
        """
        if self.state == GateState.CLEAN and is_dirty():
            self.state = GateState.PENDING_CONFIRM
            logger.debug(f"'{self.action}' held for confirmation")
            return False

        self.state = GateState.CLEAN
        return True

    def arm(self) -> None:
        """Move straight to pending-confirm"""
        self.state = GateState.PENDING_CONFIRM

    @property
    def pending(self) -> bool:
        return self.state == GateState.PENDING_CONFIRM


class ConfirmGates:
    """One gate per action kind"""

    ACTIONS = ("save", "delete", "reset", "close")

    def __init__(self):
        self._gates: Dict[str, ConfirmGate] = {action: ConfirmGate(action) for action in self.ACTIONS}

    def __getitem__(self, action: str) -> ConfirmGate:
        return self._gates[action]

    def pending(self) -> Dict[str, bool]:
        """{action: pending} for every gate"""
        return {action: gate.pending for action, gate in self._gates.items()}

"""Tests for confirmation gates."""
from record_editor.sync.confirm_gate import ConfirmGate, ConfirmGates, GateState


class TestConfirmGate:
    """Test the one-shot gate."""

    def test_clean_form_passes(self):
        """Test requests go through when nothing is dirty."""
        gate = ConfirmGate("close")
        assert gate.request(lambda: False) is True
        assert gate.state == GateState.CLEAN

    def test_dirty_form_needs_second_request(self):
        """Test the first dirty request is held and the second passes."""
        gate = ConfirmGate("close")

        assert gate.request(lambda: True) is False
        assert gate.pending

        assert gate.request(lambda: True) is True
        assert gate.state == GateState.CLEAN

    def test_confirmation_is_one_shot(self):
        """Test the gate re-arms after a confirmed pass."""
        gate = ConfirmGate("reset")
        gate.request(lambda: True)
        gate.request(lambda: True)

        assert gate.request(lambda: True) is False

    def test_arm(self):
        """Test an armed gate lets the next request through."""
        gate = ConfirmGate("save")
        gate.arm()

        assert gate.pending
        assert gate.request(lambda: True) is True
        assert not gate.pending


class TestConfirmGates:
    """Test the gate registry."""

    def test_gates_are_independent(self):
        gates = ConfirmGates()
        gates["delete"].request(lambda: True)

        assert gates.pending() == {
            "save": False,
            "delete": True,
            "reset": False,
            "close": False,
        }

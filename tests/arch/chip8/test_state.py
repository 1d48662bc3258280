import pytest

from retro_chip8.core.errors import StackOverflow, StackUnderflow
from retro_chip8.arch.chip8.state import CallStack, Chip8CpuState, STACK_DEPTH
from retro_chip8.arch.chip8.keypad import Keypad, RunState

class TestCallStack:
    def test_push_pop_lifo(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x304)
        assert stack.peek() == 0x304
        assert stack.pop() == 0x304
        assert stack.pop() == 0x202
        assert len(stack) == 0

    def test_overflow_leaves_stack_unchanged(self):
        stack = CallStack()
        for n in range(STACK_DEPTH):
            stack.push(0x200 + n * 2)
        with pytest.raises(StackOverflow):
            stack.push(0x400)
        assert len(stack) == STACK_DEPTH
        assert stack.peek() == 0x200 + (STACK_DEPTH - 1) * 2

    def test_underflow(self):
        with pytest.raises(StackUnderflow):
            CallStack().pop()
        with pytest.raises(StackUnderflow):
            CallStack().peek()

    def test_copy_is_independent(self):
        stack = CallStack()
        stack.push(0x202)
        clone = stack.copy()
        clone.push(0x204)
        assert stack.frames() == [0x202]
        assert clone != stack

class TestChip8CpuState:
    def test_vf_is_v15(self):
        state = Chip8CpuState()
        state.vf = 0x1FF
        assert state.v[15] == 0xFF
        state.v[15] = 0
        assert state.vf == 0

    def test_copy_is_deep(self):
        state = Chip8CpuState()
        state.stack.push(0x202)
        clone = state.copy()
        clone.v[0] = 1
        clone.stack.pop()
        assert state.v[0] == 0
        assert state.sp == 1
        assert clone.sp == 0

class TestKeypad:
    def test_press_release(self):
        keypad = Keypad()
        assert keypad.press(0xC) is None
        assert keypad.is_down(0xC)
        assert keypad.pressed_keys() == [0xC]
        keypad.release(0xC)
        assert not keypad.is_down(0xC)

    def test_wait_latch(self):
        keypad = Keypad()
        keypad.wait_for_key(7)
        assert keypad.run_state == RunState.AWAITING_KEY
        assert keypad.awaiting_register == 7
        assert keypad.press(0x2) == 7
        assert keypad.run_state == RunState.RUNNING
        assert keypad.press(0x3) is None

    def test_cancel_wait(self):
        keypad = Keypad()
        keypad.wait_for_key(4)
        keypad.cancel_wait()
        assert keypad.run_state == RunState.RUNNING
        assert keypad.awaiting_register is None
        assert keypad.pressed_keys() == []

    @pytest.mark.parametrize("key", [-1, 16, 0xFF])
    def test_invalid_key(self, key):
        keypad = Keypad()
        with pytest.raises(ValueError):
            keypad.press(key)
        with pytest.raises(ValueError):
            keypad.is_down(key)

# tests/debugger/test_debugger.py
"""
retro_chip8.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および履歴の巻き戻しを検証します。
"""
import pytest
from unittest.mock import patch

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.keypad import RunState
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.errors import StackUnderflow
from retro_chip8.debugger.debugger import (
    Debugger, BreakpointCondition, BreakpointConditionType, StopReason, register_value
)

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

def write_program(bus, words, base=0x200):
    for offset, word in enumerate(words):
        bus.load(base + offset * 2, word >> 8)
        bus.load(base + offset * 2 + 1, word & 0xFF)

class TestDebugger:
    @pytest.fixture
    def setup_debugger(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus)
        debugger = Debugger(cpu)
        return debugger, cpu, bus

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x300)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x400)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1) # 重複追加は無視される
        assert debugger.get_breakpoints() == [bp1, bp2]

        bp3 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x302)
        debugger.update_breakpoint(bp1, bp3)
        assert debugger.get_breakpoints() == [bp3, bp2]

        debugger.remove_breakpoint(bp3)
        debugger.remove_breakpoint(bp3) # 存在しないブレークポイントの削除はエラーにならない
        assert debugger.get_breakpoints() == [bp2]

    # @intent:test_case_step_instruction step_instructionがcpu.stepを呼び出し、Snapshotを返すことを検証します。
    def test_step_instruction(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        with patch.object(cpu, 'step', return_value=Snapshot(
            state=Chip8CpuState(pc=0x202),
            operation=Operation(opcode_hex="00E0", mnemonic="CLS", length=2),
            metadata=Metadata(cycle_count=1),
        )) as mock_step:
            snapshot = debugger.step_instruction()
            mock_step.assert_called_once()
            assert snapshot.state.pc == 0x202
            assert debugger.get_last_snapshot() is snapshot
            assert debugger.get_history() == [snapshot]

    # @intent:test_case_pc_match_breakpoint PC_MATCHブレークポイントで停止することを検証します。
    def test_pc_match_breakpoint(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x6001, 0x6102, 0x6203, 0x1206])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))

        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x204
        assert cpu.get_state().v[2] == 0

        # 同じ位置から再開すると、まず1命令進む
        assert debugger.run(max_steps=5) == StopReason.STEP_LIMIT
        assert cpu.get_state().v[2] == 3

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x6001, 0x1202])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x202, enabled=False))
        assert debugger.run(max_steps=10) == StopReason.STEP_LIMIT

    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0xA300, 0x6099, 0xF033, 0x1206])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x301))
        assert debugger.run() == StopReason.BREAKPOINT
        assert debugger.get_last_snapshot().operation.opcode_hex == "F033"

    def test_memory_read_breakpoint(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0xA300, 0xF065, 0x1204])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x300))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x204

    def test_register_breakpoints(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x7001, 0x1200])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.REGISTER_VALUE, value=3, register_name="V0"))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().v[0] == 3

        debugger.remove_breakpoint(debugger.get_breakpoints()[0])
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.REGISTER_CHANGE, register_name="PC"))
        assert debugger.run() == StopReason.BREAKPOINT

    def test_run_stops_on_key_wait(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x6001, 0xF20A, 0x1204])
        assert debugger.run() == StopReason.KEY_WAIT
        assert cpu.keypad.awaiting_register == 2

        # キー待ち中のWAITは履歴に積まれない
        history_length = len(debugger.get_history())
        debugger.step_instruction()
        assert len(debugger.get_history()) == history_length

    def test_errors_propagate(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x00EE])
        with pytest.raises(StackUnderflow):
            debugger.run()
        assert debugger.get_history() == []

    # @intent:test_case_step_back 1命令巻き戻すとレジスタとメモリが実行前の状態に戻ることを検証します。
    def test_step_back(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0xA300, 0x6042, 0xF055])
        bus.load(0x300, 0x11)

        debugger.step_instruction()
        debugger.step_instruction()
        debugger.step_instruction()
        assert bus.peek(0x300) == 0x42

        previous = debugger.step_back()
        assert bus.peek(0x300) == 0x11
        assert previous.state.pc == 0x204
        assert cpu.get_state().pc == 0x204
        assert cpu.get_state().v[0] == 0x42

        debugger.step_back()
        assert cpu.get_state().v[0] == 0
        assert debugger.step_back() is None
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().i == 0
        assert debugger.step_back() is None

    # @intent:test_case_step_back_key_wait Fx0Aを巻き戻すとキー待ちが解除され、再実行できることを検証します。
    def test_step_back_over_key_wait(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        write_program(bus, [0x6001, 0xF20A, 0x1204])
        assert debugger.run() == StopReason.KEY_WAIT
        assert cpu.run_state == RunState.AWAITING_KEY

        debugger.step_back()
        assert cpu.run_state == RunState.RUNNING
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v[1] == 0x01

        # 巻き戻した命令を再実行すると再びキー待ちになる
        snapshot = debugger.step_instruction()
        assert snapshot.operation.mnemonic == "LD"
        assert cpu.keypad.awaiting_register == 2

def test_register_value():
    state = Chip8CpuState()
    state.v[0xC] = 0x12
    state.delay_timer = 4
    assert register_value(state, "VC") == 0x12
    assert register_value(state, "vc") == 0x12
    assert register_value(state, "DT") == 4
    assert register_value(state, "PC") == 0x200
    assert register_value(state, "XYZ") is None

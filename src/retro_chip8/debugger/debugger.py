# retro_chip8/debugger/debugger.py
"""
デバッガモジュール。

CPUの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。実行履歴を保持し、1命令ずつ巻き戻すこともできます。
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.transport.bus import BusAccessType

logger = logging.getLogger(__name__)

_V_REGISTER = re.compile(r"^V([0-9A-F])$", re.IGNORECASE)

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility run()が停止した理由を定義します。
class StopReason(Enum):
    BREAKPOINT = "BREAKPOINT"
    KEY_WAIT = "KEY_WAIT"
    STEP_LIMIT = "STEP_LIMIT"
    STOPPED = "STOPPED"

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用 ("V0"-"VF", "I", "PC", "DT", "ST")
    enabled: bool = True

# @intent:utility_function レジスタ名から状態の値を取り出します。
def register_value(state: Chip8CpuState, name: str) -> Optional[int]:
    match = _V_REGISTER.match(name)
    if match:
        return state.v[int(match.group(1), 16)]
    aliases = {"DT": "delay_timer", "ST": "sound_timer"}
    attr = aliases.get(name.upper(), name.lower())
    value = getattr(state, attr, None)
    return value if isinstance(value, int) else None

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    def __init__(self, cpu: Chip8Cpu):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: Chip8CpuState = cpu.get_state().copy()
        self._last_snapshot: Optional[Snapshot] = None
        self._history: List[Snapshot] = []
        # 履歴が尽きた時に戻るための初期状態
        self._initial_state: Chip8CpuState = cpu.get_state().copy()

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    # @intent:responsibility PC_MATCH以外の条件が直前の命令で成立したかを判定します。
    def _matches(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        kind = bp.condition_type
        if kind == BreakpointConditionType.MEMORY_READ:
            return any(a.address == bp.address for a in snapshot.accesses(BusAccessType.READ))
        if kind == BreakpointConditionType.MEMORY_WRITE:
            return any(a.address == bp.address for a in snapshot.accesses(BusAccessType.WRITE))
        if not bp.register_name:
            return False
        after = register_value(snapshot.state, bp.register_name)
        if kind == BreakpointConditionType.REGISTER_VALUE:
            return after == bp.value
        if kind == BreakpointConditionType.REGISTER_CHANGE:
            return after != register_value(self._previous_state, bp.register_name)
        return False

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        return any(bp.enabled and self._matches(bp, snapshot) for bp in self._breakpoints)

    # @intent:responsibility CPUを1命令分実行し、その結果のSnapshotを履歴に追加して返します。
    # @intent:post-condition CPUのエラーは履歴を変更せずにそのまま送出されます。
    def step_instruction(self) -> Snapshot:
        self._previous_state = self._cpu.get_state().copy()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        if snapshot.operation.length:
            self._history.append(snapshot)
        return snapshot

    # @intent:responsibility 実行履歴を1つ戻り、CPUレジスタとメモリの状態を復元します。
    # @intent:post-condition Fx0Aを巻き戻した場合、キー待ちラッチは解除されます。
    # 注: フレームバッファとキーの押下状態は復元されない
    def step_back(self) -> Optional[Snapshot]:
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # 書き込みを逆順に取り消す
        bus = self._cpu.bus
        for access in reversed(snapshot_to_revert.accesses(BusAccessType.WRITE)):
            if access.previous_data is not None:
                bus.load(access.address, access.previous_data)

        if snapshot_to_revert.operation.opcode & 0xF0FF == 0xF00A:
            self._cpu.keypad.cancel_wait()

        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state.copy())
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        self._cpu.restore_state(self._initial_state.copy())
        self._last_snapshot = None
        return None

    # @intent:responsibility ブレークポイント、キー待ち、またはステップ上限まで実行を継続します。
    def run(self, max_steps: int = 100_000) -> StopReason:
        self._running = True
        steps = 0

        # 現在のPCにブレークポイントがある場合は、まず1命令進める
        if self._pc_breakpoint_hit(self._cpu.get_state().pc):
            self.step_instruction()
            steps += 1

        while self._running:
            if steps >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT

            current_pc = self._cpu.get_state().pc
            if self._pc_breakpoint_hit(current_pc):
                self._running = False
                logger.info("Breakpoint hit at PC: %#05x", current_pc)
                return StopReason.BREAKPOINT

            snapshot = self.step_instruction()
            steps += 1

            if snapshot.operation.mnemonic == "WAIT" or self._cpu.keypad.is_awaiting:
                self._running = False
                return StopReason.KEY_WAIT

            if self._check_other_breakpoints(snapshot):
                self._running = False
                logger.info("Breakpoint hit at PC: %#05x", snapshot.state.pc)
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False

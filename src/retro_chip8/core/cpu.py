# retro_chip8/core/cpu.py
"""
Core Layer (抽象CPU)

命令サイクル（フェッチ → デコード → PC更新 → 実行）の骨格と、
UI/デバッガが参照する状態アクセスのインターフェースを定義します。
命令ごとの振る舞いはアーキテクチャ側の命令モジュールが担います。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import SymbolMap, RegisterLayoutInfo

# @intent:responsibility 命令サイクルのテンプレートと状態管理を提供する抽象CPU。
class AbstractCpu(ABC):
    # @intent:pre-condition `bus` には少なくともプログラム領域がマップされている必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count = 0
        self._labels: Dict[int, str] = {}
        self._symbol_map: SymbolMap = {}

    @property
    def bus(self) -> Bus:
        return self._bus

    # 実行済み命令の累計
    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility ラベル名 -> アドレスの対応を登録し、トレース表示に使います。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        self._symbol_map = dict(symbol_map)
        self._labels = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return dict(self._symbol_map)

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility レジスタを電源投入時の値に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility デバッガの履歴から取り出した状態に置き換えます。
    def restore_state(self, state: CpuState) -> None:
        self._state = state

    @abstractmethod
    def _fetch(self) -> int:
        """PCが指す命令ワードを読み込みます。"""

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        """命令ワードをOperationへ変換します。該当がなければ例外を送出します。"""

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態とバスアクセスを記録したSnapshotを返します。
    # 流れ: ログ破棄 → 停止判定 → フェッチ → デコード → PC更新 → 実行 → Snapshot
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        pc = self._state.pc

        halted = self._handle_halt(pc)
        if halted is not None:
            return halted

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)
        return self._create_snapshot(pc, operation)

    # @intent:return 命令を実行できない状態であればそのSnapshot、実行できればNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _snapshot_state(self) -> CpuState:
        return self._state

    def _describe(self, pc: int, operation: Operation) -> str:
        text = operation.mnemonic
        if operation.operands:
            text += " " + ", ".join(operation.operands)
        label = self._labels.get(pc)
        return f"{label}: {text}" if label else text

    def _create_snapshot(self, pc: int, operation: Operation) -> Snapshot:
        activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=self._snapshot_state(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=self._describe(pc, operation)),
            bus_activity=activity,
        )

    # --- UI/デバッガ向けの問い合わせ ---

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """(アドレス, 命令ワードHEX, ニーモニック) のリストを返します。"""

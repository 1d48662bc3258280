# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義（レジスタファイルとコールスタック）。
"""
from dataclasses import dataclass, field, replace
from typing import List

from retro_chip8.core.state import CpuState
from retro_chip8.core.errors import StackOverflow, StackUnderflow

# @intent:constant プログラムの開始アドレスとレジスタ構成。
PROGRAM_START = 0x200
REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF

# @intent:responsibility サブルーチン呼び出しの戻りアドレスを保持する有界スタック。
class CallStack:
    """
    最大 `depth` 段の戻りアドレススタック。
    満杯へのpushと空からのpopは、スタックを変更せずに例外を送出します。
    """
    def __init__(self, depth: int = STACK_DEPTH):
        self.depth = depth
        self._frames: List[int] = []

    def push(self, address: int) -> None:
        if len(self._frames) >= self.depth:
            raise StackOverflow(f"Call stack overflow (depth {self.depth})")
        self._frames.append(address)

    def pop(self) -> int:
        if not self._frames:
            raise StackUnderflow("Return with an empty call stack")
        return self._frames.pop()

    def peek(self) -> int:
        if not self._frames:
            raise StackUnderflow("Call stack is empty")
        return self._frames[-1]

    def frames(self) -> List[int]:
        return list(self._frames)

    def copy(self) -> "CallStack":
        clone = CallStack(self.depth)
        clone._frames = list(self._frames)
        return clone

    def __len__(self) -> int:
        return len(self._frames)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallStack):
            return NotImplemented
        return self.depth == other.depth and self._frames == other._frames

    def __repr__(self) -> str:
        return f"CallStack({[f'{a:#05x}' for a in self._frames]})"

# @intent:responsibility CHIP-8の全てのレジスタ（V0-VF, I, PC, タイマー）とコールスタックを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFは汎用レジスタであると同時にキャリー/ボロー/衝突フラグの出力先でもあります。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000         # Index Register
    delay_timer: int = 0
    sound_timer: int = 0
    stack: CallStack = field(default_factory=CallStack)

    # @intent:accessor フラグレジスタ(VF)へのアクセスを提供します。v[0xF] と同一のフィールドです。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:accessor 現在のスタック深さ。
    @property
    def sp(self) -> int:
        return len(self.stack)

    # @intent:responsibility スナップショット・履歴用に独立したコピーを返します。
    def copy(self) -> "Chip8CpuState":
        return replace(self, v=list(self.v), stack=self.stack.copy())

# src/retro_chip8/arch/chip8/keypad.py
"""
16キーの16進キーパッドと、キー入力待ちラッチ。

キー待ちはスレッドやコルーチンの停止ではなく、単なるデータ（ラッチ）として表現されます。
ラッチが設定されている間、CPUは命令実行とタイマー減算を停止します。
"""
from enum import Enum
from typing import List, Optional

KEY_COUNT = 16

# @intent:responsibility マシンの実行状態（通常実行 / キー待ち）を定義します。
class RunState(Enum):
    RUNNING = "RUNNING"
    AWAITING_KEY = "AWAITING_KEY"

# @intent:responsibility キーの押下状態とキー待ちラッチを保持します。
class Keypad:
    def __init__(self):
        self._down: List[bool] = [False] * KEY_COUNT
        self._awaiting_register: Optional[int] = None

    @staticmethod
    def _check_key(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key!r} is not a hex keypad code (0x0-0xF).")

    def is_down(self, key: int) -> bool:
        self._check_key(key)
        return self._down[key]

    def pressed_keys(self) -> List[int]:
        return [k for k, down in enumerate(self._down) if down]

    @property
    def awaiting_register(self) -> Optional[int]:
        return self._awaiting_register

    @property
    def run_state(self) -> RunState:
        if self._awaiting_register is None:
            return RunState.RUNNING
        return RunState.AWAITING_KEY

    @property
    def is_awaiting(self) -> bool:
        return self._awaiting_register is not None

    # @intent:responsibility RUNNING -> AWAITING_KEY(register) へ遷移します。
    def wait_for_key(self, register: int) -> None:
        if not 0 <= register < KEY_COUNT:
            raise ValueError(f"Register index {register} out of range.")
        self._awaiting_register = register

    # @intent:responsibility キー押下を記録し、キー待ちを解除した場合は待っていたレジスタ番号を返します。
    # @intent:post-condition 戻り値がNoneでない場合、ラッチは既に解除されています。
    def press(self, key: int) -> Optional[int]:
        self._check_key(key)
        self._down[key] = True
        register = self._awaiting_register
        self._awaiting_register = None
        return register

    # @intent:responsibility キーを押さずにキー待ちを解除します（AWAITING_KEY -> RUNNING）。
    def cancel_wait(self) -> None:
        self._awaiting_register = None

    def release(self, key: int) -> None:
        self._check_key(key)
        self._down[key] = False

    def reset(self) -> None:
        self._down = [False] * KEY_COUNT
        self._awaiting_register = None

# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール（フェッチ・デコード・実行のディスパッチャ）。
"""
import random
from typing import Dict, List, Optional, Tuple

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.errors import Chip8Error, UnknownOpcode
from retro_chip8.core.snapshot import Operation, Metadata, Snapshot
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, PROGRAM_START, REGISTER_COUNT
from retro_chip8.arch.chip8.framebuffer import Framebuffer
from retro_chip8.arch.chip8.keypad import Keypad, RunState
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction, UNKNOWN
from retro_chip8.arch.chip8.instructions.base import Peripherals, read_word, reg
from retro_chip8.arch.chip8 import disassembler

# @intent:responsibility CHIP-8の具体的なエミュレーションロジック（フェッチ、デコード、実行、タイマー、キー入力）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    `step()`（別名 `tick()`）は1命令を実行します。キー待ち中は何も変更しない
    WAITスナップショットを返します。コアのエラーは全て `Chip8Error` として
    呼び出し元へ送出され、その場合PCはエラーを起こした命令を指したままになります。
    """
    def __init__(self, bus: Bus, framebuffer: Optional[Framebuffer] = None,
                 keypad: Optional[Keypad] = None, rng: Optional[random.Random] = None):
        self._hw = Peripherals(
            framebuffer=framebuffer or Framebuffer(),
            keypad=keypad or Keypad(),
            rng=rng or random.Random(),
        )
        self._instruction_pc = PROGRAM_START
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    @property
    def framebuffer(self) -> Framebuffer:
        return self._hw.framebuffer

    @property
    def keypad(self) -> Keypad:
        return self._hw.keypad

    @property
    def run_state(self) -> RunState:
        return self._hw.keypad.run_state

    # @intent:responsibility レジスタ、スタック、画面、キー状態、キー待ちラッチを初期化します。メモリは保持されます。
    def reset(self) -> None:
        super().reset()
        self._hw.framebuffer.clear()
        self._hw.keypad.reset()
        self._instruction_pc = PROGRAM_START

    # @intent:responsibility キー待ち中は命令を実行せず、状態を変えないWAITスナップショットを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        register = self._hw.keypad.awaiting_register
        if register is None:
            return None
        operation = Operation("0000", "WAIT", [reg(register)], [], 0, 0)
        return Snapshot(
            state=self._snapshot_state(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=f"WAIT {reg(register)}"),
        )

    # @intent:responsibility PCが指す2バイトをビッグエンディアンの命令ワードとして読み込みます。
    def _fetch(self) -> int:
        self._instruction_pc = self._state.pc
        return read_word(self._bus, self._state.pc)

    # @intent:post-condition 未定義の命令ワードはUnknownOpcodeとなり、状態は一切変更されません。
    def _decode(self, opcode: int) -> Operation:
        operation = decode_opcode(opcode)
        if operation.mnemonic == UNKNOWN:
            raise UnknownOpcode(opcode, self._state.pc)
        return operation

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._hw)

    def _snapshot_state(self) -> Chip8CpuState:
        return self._state.copy()

    # @intent:responsibility 1命令を実行します。エラー時はPCを実行前の命令アドレスへ戻して送出します。
    def step(self) -> Snapshot:
        try:
            return super().step()
        except Chip8Error as error:
            if error.pc is None:
                error.pc = self._instruction_pc
            self._state.pc = self._instruction_pc
            raise

    # @intent:responsibility ドライバから呼ばれる1命令実行の別名。
    def tick(self) -> Snapshot:
        return self.step()

    # @intent:responsibility 60Hzフレームごとに遅延/サウンドタイマーを1ずつ減算します。キー待ち中は何もしません。
    def advance_timers(self) -> None:
        if self._hw.keypad.is_awaiting:
            return
        state = self._state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    # @intent:responsibility サウンドタイマーが非ゼロかどうか（トーンを鳴らすべきか）を返します。
    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer != 0

    # @intent:responsibility キー押下イベントを取り込みます。キー待ち中であれば、待っていたレジスタにキーコードを書き込み実行を再開します。
    def key_down(self, key: int) -> None:
        register = self._hw.keypad.press(key)
        if register is not None:
            self._state.v[register] = key

    def key_up(self, key: int) -> None:
        self._hw.keypad.release(key)

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [RegisterInfo("DT", 8), RegisterInfo("ST", 8)]),
        ]

    # @intent:responsibility UI表示用に、VFと実行状態に由来するフラグを提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {
            "VF": self._state.vf != 0,
            "WAIT": self._hw.keypad.is_awaiting,
            "SOUND": self.sound_active,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)

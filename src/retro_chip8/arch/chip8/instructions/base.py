# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import List, NamedTuple

from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.framebuffer import Framebuffer
from retro_chip8.arch.chip8.keypad import Keypad

# @intent:data_structure 命令ワードから取り出したオペランドフィールド。
class Fields(NamedTuple):
    x: int    # bits 8-11
    y: int    # bits 4-7
    n: int    # bits 0-3
    kk: int   # bits 0-7
    nnn: int  # bits 0-11

# @intent:data_structure 命令実行時にCPU状態とバス以外で必要となる周辺機器。
@dataclass
class Peripherals:
    framebuffer: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)

# @intent:utility_function 16bit命令ワードからオペランドフィールドを抽出します。
def split_fields(opcode: int) -> Fields:
    return Fields(
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        kk=opcode & 0xFF,
        nnn=opcode & 0xFFF,
    )

# @intent:utility_function Operationからオペランドフィールドを抽出します。
def fields_of(op: Operation) -> Fields:
    return split_fields(op.opcode)

# @intent:utility_function デコード結果のOperationを生成します。
def make_operation(opcode: int, mnemonic: str, operands: List[str]) -> Operation:
    return Operation(f"{opcode:04X}", mnemonic, operands, [opcode >> 8, opcode & 0xFF], 1, 2)

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)

# 表示用のオペランド書式
def reg(index: int) -> str:
    return f"V{index:X}"

def imm8(value: int) -> str:
    return f"#${value:02X}"

def addr12(value: int) -> str:
    return f"${value:03X}"

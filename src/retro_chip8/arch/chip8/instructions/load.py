# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックス、タイマー、メモリ）の実装。

メモリアクセスは全てバス経由で行われ、範囲外アクセスはOutOfBoundsMemoryAccessとなります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.glyphs import glyph_address
from .base import Peripherals, fields_of, make_operation, split_fields, reg, imm8, addr12

# --- LD Vx, byte (6xkk) ---
def decode_ld_byte(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "LD", [reg(f.x), imm8(f.kk)])

def execute_ld_byte(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] = f.kk

# --- LD Vx, Vy (8xy0) ---
def decode_ld_reg(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "LD", [reg(f.x), reg(f.y)])

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] = state.v[f.y]

# --- LD I, addr (Annn) ---
def decode_ld_i(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["I", addr12(opcode & 0xFFF)])

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.i = fields_of(op).nnn

# --- LD Vx, DT (Fx07) ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    return make_operation(opcode, "LD", [reg(split_fields(opcode).x), "DT"])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.v[fields_of(op).x] = state.delay_timer

# --- LD DT, Vx (Fx15) ---
def decode_ld_dt(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["DT", reg(split_fields(opcode).x)])

def execute_ld_dt(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.delay_timer = state.v[fields_of(op).x]

# --- LD ST, Vx (Fx18) ---
def decode_ld_st(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["ST", reg(split_fields(opcode).x)])

def execute_ld_st(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.sound_timer = state.v[fields_of(op).x]

# --- LD F, Vx (Fx29) ---
def decode_ld_f(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["F", reg(split_fields(opcode).x)])

# @intent:responsibility IをVxの数字グリフのアドレス（Vx * 5）に設定します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.i = glyph_address(state.v[fields_of(op).x])

# --- LD B, Vx (Fx33) ---
def decode_ld_bcd(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["B", reg(split_fields(opcode).x)])

# @intent:responsibility VxのBCD表現（百の位、十の位、一の位）をI, I+1, I+2へ格納します。
def execute_ld_bcd(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    value = state.v[fields_of(op).x]
    digits = (value // 100, (value // 10) % 10, value % 10)
    _check_range(bus, state.i, len(digits))
    for offset, digit in enumerate(digits):
        bus.write(state.i + offset, digit)

# --- LD [I], Vx (Fx55) ---
def decode_store(opcode: int) -> Operation:
    return make_operation(opcode, "LD", ["[I]", reg(split_fields(opcode).x)])

# @intent:responsibility V0..Vxをメモリ[I..I+x]へ格納します。Iは変更しません。
def execute_store(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    x = fields_of(op).x
    _check_range(bus, state.i, x + 1)
    for index in range(x + 1):
        bus.write(state.i + index, state.v[index])

# --- LD Vx, [I] (Fx65) ---
def decode_load(opcode: int) -> Operation:
    return make_operation(opcode, "LD", [reg(split_fields(opcode).x), "[I]"])

# @intent:responsibility メモリ[I..I+x]からV0..Vxを読み込みます。Iは変更しません。
def execute_load(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    x = fields_of(op).x
    _check_range(bus, state.i, x + 1)
    for index in range(x + 1):
        state.v[index] = bus.read(state.i + index)

# @intent:utility_function 複数バイトアクセスの先頭と末尾を検証します。範囲外なら何も書き込まれません。
def _check_range(bus: Bus, start: int, length: int) -> None:
    bus.peek(start)
    bus.peek(start + length - 1)

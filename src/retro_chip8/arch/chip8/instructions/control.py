# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行関数が呼ばれる時点で、PCは既に次の命令を指しています。
スキップはそこからさらに2バイト進めることで表現します。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, fields_of, make_operation, split_fields, reg, imm8, addr12

def _skip(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# --- RET (00EE) ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, "RET", [])

# @intent:responsibility 戻りアドレスをポップしてPCに設定します。空スタックはStackUnderflow。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.pc = state.stack.pop()

# --- JP addr (1nnn) ---
def decode_jp(opcode: int) -> Operation:
    return make_operation(opcode, "JP", [addr12(opcode & 0xFFF)])

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.pc = fields_of(op).nnn

# --- CALL addr (2nnn) ---
def decode_call(opcode: int) -> Operation:
    return make_operation(opcode, "CALL", [addr12(opcode & 0xFFF)])

# @intent:responsibility 次の命令のアドレスをプッシュしてからジャンプします。スタック満杯時は呼び出しを拒否します。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    # state.pc is already the return address
    state.stack.push(state.pc)
    state.pc = fields_of(op).nnn

# --- SE Vx, byte (3xkk) ---
def decode_se_byte(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "SE", [reg(f.x), imm8(f.kk)])

def execute_se_byte(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    if state.v[f.x] == f.kk:
        _skip(state)

# --- SNE Vx, byte (4xkk) ---
def decode_sne_byte(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "SNE", [reg(f.x), imm8(f.kk)])

def execute_sne_byte(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    if state.v[f.x] != f.kk:
        _skip(state)

# --- SE Vx, Vy (5xy0) ---
def decode_se_reg(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "SE", [reg(f.x), reg(f.y)])

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    if state.v[f.x] == state.v[f.y]:
        _skip(state)

# --- SNE Vx, Vy (9xy0) ---
def decode_sne_reg(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "SNE", [reg(f.x), reg(f.y)])

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    if state.v[f.x] != state.v[f.y]:
        _skip(state)

# --- JP V0, addr (Bnnn) ---
def decode_jp_v0(opcode: int) -> Operation:
    return make_operation(opcode, "JP", ["V0", addr12(opcode & 0xFFF)])

def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.pc = fields_of(op).nnn + state.v[0]

# --- SKP Vx (Ex9E) ---
def decode_skp(opcode: int) -> Operation:
    return make_operation(opcode, "SKP", [reg(split_fields(opcode).x)])

# @intent:responsibility Vxの下位4ビットが示すキーが押されていればスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    if hw.keypad.is_down(state.v[fields_of(op).x] & 0xF):
        _skip(state)

# --- SKNP Vx (ExA1) ---
def decode_sknp(opcode: int) -> Operation:
    return make_operation(opcode, "SKNP", [reg(split_fields(opcode).x)])

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    if not hw.keypad.is_down(state.v[fields_of(op).x] & 0xF):
        _skip(state)

# --- LD Vx, K (Fx0A) ---
def decode_wait_key(opcode: int) -> Operation:
    return make_operation(opcode, "LD", [reg(split_fields(opcode).x), "K"])

# @intent:responsibility キー待ち状態へ遷移します。解除はキー押下イベントで行われます。
def execute_wait_key(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    hw.keypad.wait_for_key(fields_of(op).x)

# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

8bitレジスタ演算は全て256を法として折り返します（オーバーフローはエラーではありません）。
VFへのフラグ書き込みは常に上書きで、結果より先に書き込みます。
そのため x == F の場合は演算結果がVFに残ります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, fields_of, make_operation, split_fields, reg, imm8

def _decode_xy(mnemonic: str):
    def decode(opcode: int) -> Operation:
        f = split_fields(opcode)
        return make_operation(opcode, mnemonic, [reg(f.x), reg(f.y)])
    decode.__name__ = f"decode_{mnemonic.lower()}"
    return decode

# --- ADD Vx, byte (7xkk) ---
def decode_add_byte(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "ADD", [reg(f.x), imm8(f.kk)])

# @intent:responsibility Vxに即値を加算します。VFは変更しません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] = (state.v[f.x] + f.kk) & 0xFF

# --- OR / AND / XOR (8xy1, 8xy2, 8xy3) ---
decode_or = _decode_xy("OR")
decode_and = _decode_xy("AND")
decode_xor = _decode_xy("XOR")

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] |= state.v[f.y]

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] &= state.v[f.y]

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] ^= state.v[f.y]

# --- ADD Vx, Vy (8xy4) ---
decode_add_reg = _decode_xy("ADD")

# @intent:responsibility Vx+Vyを計算し、VFにキャリーを設定します。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    res = state.v[f.x] + state.v[f.y]
    state.vf = 1 if res > 0xFF else 0
    state.v[f.x] = res & 0xFF

# --- SUB Vx, Vy (8xy5) ---
decode_sub = _decode_xy("SUB")

# @intent:responsibility Vx-Vyを計算し、VFにNOT borrow（Vx > Vy）を設定します。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    vx, vy = state.v[f.x], state.v[f.y]
    state.vf = 1 if vx > vy else 0
    state.v[f.x] = (vx - vy) & 0xFF

# --- SHR Vx (8xy6) ---
def decode_shr(opcode: int) -> Operation:
    return make_operation(opcode, "SHR", [reg(split_fields(opcode).x)])

# @intent:responsibility Vxを1ビット右シフトし、押し出されたビット0をVFに設定します。Vyは使用しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    vx = state.v[f.x]
    state.vf = vx & 0x01
    state.v[f.x] = vx >> 1

# --- SUBN Vx, Vy (8xy7) ---
decode_subn = _decode_xy("SUBN")

def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    vx, vy = state.v[f.x], state.v[f.y]
    state.vf = 1 if vy > vx else 0
    state.v[f.x] = (vy - vx) & 0xFF

# --- SHL Vx (8xyE) ---
def decode_shl(opcode: int) -> Operation:
    return make_operation(opcode, "SHL", [reg(split_fields(opcode).x)])

# @intent:responsibility Vxを1ビット左シフトし、押し出されたビット7をVFに設定します。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    vx = state.v[f.x]
    state.vf = (vx >> 7) & 0x01
    state.v[f.x] = (vx << 1) & 0xFF

# --- RND Vx, byte (Cxkk) ---
def decode_rnd(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "RND", [reg(f.x), imm8(f.kk)])

def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    state.v[f.x] = hw.rng.randrange(0x100) & f.kk

# --- ADD I, Vx (Fx1E) ---
def decode_add_i(opcode: int) -> Operation:
    return make_operation(opcode, "ADD", ["I", reg(split_fields(opcode).x)])

# @intent:responsibility IにVxを加算します（16bitで折り返し、VFは変更しません）。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    state.i = (state.i + state.v[fields_of(op).x]) & 0xFFFF

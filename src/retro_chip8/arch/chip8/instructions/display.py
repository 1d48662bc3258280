# src/retro_chip8/arch/chip8/instructions/display.py
"""
表示命令（画面消去、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, fields_of, make_operation, split_fields, reg

# --- CLS (00E0) ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, "CLS", [])

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    hw.framebuffer.clear()

# --- DRW Vx, Vy, nibble (Dxyn) ---
def decode_drw(opcode: int) -> Operation:
    f = split_fields(opcode)
    return make_operation(opcode, "DRW", [reg(f.x), reg(f.y), f"{f.n}"])

# @intent:responsibility メモリ[I..I+n]のnバイトスプライトを(Vx, Vy)にXOR描画し、衝突の有無をVFに設定します。
# @intent:post-condition 範囲外アクセス時はフレームバッファもVFも変更されません。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, hw: Peripherals) -> None:
    f = fields_of(op)
    sprite = [bus.read(state.i + row) for row in range(f.n)]
    collision = hw.framebuffer.draw_sprite(state.v[f.x], state.v[f.y], sprite)
    state.vf = 1 if collision else 0

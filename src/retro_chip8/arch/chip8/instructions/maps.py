# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードパターンと命令実装のマッピング定義。

CHIP-8の命令は上位ニブルのグループと、グループごとに異なる下位フィールドで識別されます。
`opcode_key()` で命令ワードをパターンキーへ正規化し、そのキーで表を引きます。
"""
from . import load
from . import alu
from . import control
from . import display

# @intent:map 上位ニブルごとの、識別に使うビットマスク。
KEY_MASKS = {
    0x0: 0xFFFF,  # 00E0, 00EE
    0x1: 0xF000, 0x2: 0xF000, 0x3: 0xF000, 0x4: 0xF000,
    0x5: 0xF00F,  # 5xy0
    0x6: 0xF000, 0x7: 0xF000,
    0x8: 0xF00F,  # 8xy0 - 8xyE
    0x9: 0xF00F,  # 9xy0
    0xA: 0xF000, 0xB: 0xF000, 0xC: 0xF000, 0xD: 0xF000,
    0xE: 0xF0FF,  # Ex9E, ExA1
    0xF: 0xF0FF,  # Fx07 - Fx65
}

# @intent:utility_function 命令ワードをDECODE_MAP/EXECUTE_MAPのキーへ正規化します。
def opcode_key(opcode: int) -> int:
    return opcode & KEY_MASKS[(opcode >> 12) & 0xF]

# @intent:map パターンキーからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Display
    0x00E0: display.decode_cls,
    0xD000: display.decode_drw,

    # Control
    0x00EE: control.decode_ret,
    0x1000: control.decode_jp,
    0x2000: control.decode_call,
    0x3000: control.decode_se_byte,
    0x4000: control.decode_sne_byte,
    0x5000: control.decode_se_reg,
    0x9000: control.decode_sne_reg,
    0xB000: control.decode_jp_v0,
    0xE09E: control.decode_skp,
    0xE0A1: control.decode_sknp,
    0xF00A: control.decode_wait_key,

    # Load/Store
    0x6000: load.decode_ld_byte,
    0x8000: load.decode_ld_reg,
    0xA000: load.decode_ld_i,
    0xF007: load.decode_ld_vx_dt,
    0xF015: load.decode_ld_dt,
    0xF018: load.decode_ld_st,
    0xF029: load.decode_ld_f,
    0xF033: load.decode_ld_bcd,
    0xF055: load.decode_store,
    0xF065: load.decode_load,

    # ALU
    0x7000: alu.decode_add_byte,
    0x8001: alu.decode_or,
    0x8002: alu.decode_and,
    0x8003: alu.decode_xor,
    0x8004: alu.decode_add_reg,
    0x8005: alu.decode_sub,
    0x8006: alu.decode_shr,
    0x8007: alu.decode_subn,
    0x800E: alu.decode_shl,
    0xC000: alu.decode_rnd,
    0xF01E: alu.decode_add_i,
}

# @intent:map パターンキーから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Display
    0x00E0: display.execute_cls,
    0xD000: display.execute_drw,

    # Control
    0x00EE: control.execute_ret,
    0x1000: control.execute_jp,
    0x2000: control.execute_call,
    0x3000: control.execute_se_byte,
    0x4000: control.execute_sne_byte,
    0x5000: control.execute_se_reg,
    0x9000: control.execute_sne_reg,
    0xB000: control.execute_jp_v0,
    0xE09E: control.execute_skp,
    0xE0A1: control.execute_sknp,
    0xF00A: control.execute_wait_key,

    # Load/Store
    0x6000: load.execute_ld_byte,
    0x8000: load.execute_ld_reg,
    0xA000: load.execute_ld_i,
    0xF007: load.execute_ld_vx_dt,
    0xF015: load.execute_ld_dt,
    0xF018: load.execute_ld_st,
    0xF029: load.execute_ld_f,
    0xF033: load.execute_ld_bcd,
    0xF055: load.execute_store,
    0xF065: load.execute_load,

    # ALU
    0x7000: alu.execute_add_byte,
    0x8001: alu.execute_or,
    0x8002: alu.execute_and,
    0x8003: alu.execute_xor,
    0x8004: alu.execute_add_reg,
    0x8005: alu.execute_sub,
    0x8006: alu.execute_shr,
    0x8007: alu.execute_subn,
    0x800E: alu.execute_shl,
    0xC000: alu.execute_rnd,
    0xF01E: alu.execute_add_i,
}

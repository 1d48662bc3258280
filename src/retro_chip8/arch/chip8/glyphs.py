# src/retro_chip8/arch/chip8/glyphs.py
"""
組み込みの16進数字グリフテーブル。
"""
from retro_chip8.transport.bus import Bus

GLYPH_BASE = 0x000
GLYPH_HEIGHT = 5

# @intent:constant 0-Fの数字スプライト。各5バイト、上位4ビットのみ有効。
GLYPHS = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# @intent:responsibility 数字に対応するグリフの先頭アドレスを返します。
def glyph_address(digit: int) -> int:
    return GLYPH_BASE + digit * GLYPH_HEIGHT

# @intent:responsibility グリフテーブルをバスへ書き込みます（ログなし）。
def load_glyphs(bus: Bus) -> None:
    for offset, byte in enumerate(GLYPHS):
        bus.load(GLYPH_BASE + offset, byte)

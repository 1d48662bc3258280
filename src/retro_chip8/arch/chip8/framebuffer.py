# src/retro_chip8/arch/chip8/framebuffer.py
"""
モノクロ64x32ピクセルのフレームバッファ。

描画はXORトグルで行われ、座標はピクセル単位で画面サイズを法として折り返します（クリップしません）。
"""
from typing import Iterable, Tuple

WIDTH = 64
HEIGHT = 32

# @intent:responsibility ピクセルグリッドとXORスプライト描画・衝突検出を提供します。
class Framebuffer:
    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        # 変更ごとに増加する世代番号
        self.version = 0

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self.version += 1

    def _index(self, x: int, y: int) -> int:
        return (y % self.height) * self.width + (x % self.width)

    def get_pixel(self, x: int, y: int) -> bool:
        return self._pixels[self._index(x, y)] != 0

    # @intent:responsibility 1ピクセルを反転し、点灯していたピクセルが消えた場合にTrueを返します。
    def toggle(self, x: int, y: int) -> bool:
        idx = self._index(x, y)
        erased = self._pixels[idx] != 0
        self._pixels[idx] ^= 1
        self.version += 1
        return erased

    # @intent:responsibility スプライトをXOR描画し、スプライト全体での衝突の有無を返します。
    # @intent:pre-condition `rows` の各要素は8bit値で、MSBが左端のピクセルです。
    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        collision = False
        for row, bits in enumerate(rows):
            for col in range(8):
                if bits & (0x80 >> col):
                    # 衝突は全ピクセルの論理和
                    if self.toggle(x + col, y + row):
                        collision = True
        return collision

    # @intent:responsibility 表示用の読み取り専用ビューを返します。
    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        w = self.width
        return tuple(
            tuple(p != 0 for p in self._pixels[r * w:(r + 1) * w])
            for r in range(self.height)
        )

    def lit_count(self) -> int:
        return sum(self._pixels)

    def is_clear(self) -> bool:
        return not any(self._pixels)

    # @intent:responsibility デバッグ用のテキスト表現（'#' が点灯ピクセル）。
    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if p else off for p in row) for row in self.rows())

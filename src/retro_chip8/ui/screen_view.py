# src/retro_chip8/ui/screen_view.py
"""
フレームバッファ表示ウィジェット。

コアが公開する読み取り専用の64x32グリッドを、設定された倍率と色で描画します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPainter, QColor, QImage

from retro_chip8.arch.chip8.framebuffer import Framebuffer

# @intent:responsibility フレームバッファを拡大描画するウィジェットを提供します。
class ScreenView(QWidget):
    def __init__(self, framebuffer: Framebuffer, scale: int = 10,
                 on_color: str = "#000000", off_color: str = "#FFFFFF", parent=None):
        super().__init__(parent)
        self._framebuffer = framebuffer
        self._scale = scale
        self._on = QColor(on_color)
        self._off = QColor(off_color)
        self._drawn_version: Optional[int] = None
        self.setFixedSize(self.sizeHint())
        self.setFocusPolicy(Qt.StrongFocus)

    def sizeHint(self) -> QSize:
        return QSize(self._framebuffer.width * self._scale, self._framebuffer.height * self._scale)

    # @intent:responsibility フレームバッファをドット単位のQImageへ変換します。
    def render_image(self) -> QImage:
        fb = self._framebuffer
        image = QImage(fb.width, fb.height, QImage.Format_RGB32)
        on, off = self._on.rgb(), self._off.rgb()
        for y, row in enumerate(fb.rows()):
            for x, lit in enumerate(row):
                image.setPixel(x, y, on if lit else off)
        return image

    # @intent:responsibility 前回の描画以降にフレームバッファが変化していれば再描画を要求します。
    def refresh(self) -> bool:
        if self._framebuffer.version == self._drawn_version:
            return False
        self.update()
        return True

    def paintEvent(self, event):
        painter = QPainter(self)
        image = self.render_image()
        painter.drawImage(self.rect(), image)
        painter.end()
        self._drawn_version = self._framebuffer.version

# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
画面ウィジェットとレジスタ表示を保持し、タイマーでフレームドライバを駆動します。
"""

from PySide6.QtWidgets import QMainWindow, QDockWidget, QLabel
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, QElapsedTimer

from retro_chip8.config.models import SystemConfig
from retro_chip8.system.driver import Chip8System
from .screen_view import ScreenView
from .register_view import RegisterView
from .keymap import KeyTranslator
from .fonts import get_monospace_font

# @intent:responsibility アプリケーションのメインウィンドウを定義し、入力・表示・実行ループを結び付けます。
class MainWindow(QMainWindow):
    def __init__(self, system: Chip8System, config: SystemConfig, title: str = "CHIP8EMU", parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.system = system
        self._translator = KeyTranslator(config.keymap)

        self.screen_view = ScreenView(
            system.cpu.framebuffer,
            scale=config.display.scale,
            on_color=config.display.on_color,
            off_color=config.display.off_color,
        )
        self.setCentralWidget(self.screen_view)

        self._create_register_dock()
        self._create_menus()

        self._status_label = QLabel("")
        self._status_label.setFont(get_monospace_font(9))
        self.statusBar().addWidget(self._status_label)

        # 進めるフレーム数は経過時間で決まる。タイマー間隔は目安
        self._elapsed = QElapsedTimer()
        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(1000 / system.clock.hz)))
        self._timer.timeout.connect(self._on_timer)

    def _create_register_dock(self):
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.system.cpu)
        self.register_dock = QDockWidget("Registers", self)
        self.register_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, self.register_dock)
        self.register_dock.hide()

    def _create_menus(self):
        machine_menu = self.menuBar().addMenu("Machine")

        self.reset_action = QAction("Reset", self)
        self.reset_action.setShortcut("Ctrl+R")
        self.reset_action.triggered.connect(self._reset_machine)
        machine_menu.addAction(self.reset_action)

        machine_menu.addAction(self.register_dock.toggleViewAction())

    def start(self) -> None:
        self._elapsed.start()
        self._timer.start()

    def _on_timer(self) -> None:
        elapsed = self._elapsed.restart() / 1000.0
        frames = self.system.update(elapsed)
        if frames:
            self.screen_view.refresh()
            if self.register_dock.isVisible():
                self.register_view.update_registers()
        if self.system.halted and self.system.last_error is not None:
            self._status_label.setText(f"Halted: {self.system.last_error}")

    def _reset_machine(self) -> None:
        self.system.reset()
        self._status_label.setText("")
        self.screen_view.refresh()

    # @intent:responsibility Escapeでウィンドウを閉じ、マップされたキーをキーパッドイベントとして転送します。
    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key_Escape:
            self.close()
            return
        code = self._translator.translate(event.key())
        if code is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.system.key_down(code)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        code = self._translator.translate(event.key())
        if code is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.system.key_up(code)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._timer.stop()
        self.system.audio.stop()
        event.accept()

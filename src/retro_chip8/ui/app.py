# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。
ROMファイルのパスを受け取り、マシンを構築してウィンドウ（またはヘッドレス実行）を起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from retro_chip8.core.errors import Chip8Error, ConfigError, RomLoadFailure
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.loader.loader import RomLoader
from retro_chip8.system.driver import Chip8System

logger = logging.getLogger("retro_chip8")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", help="path to a raw CHIP-8 program image")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--speed", type=int, help="instructions executed per 60 Hz frame")
    parser.add_argument("--scale", type=int, help="display scale factor")
    parser.add_argument("--headless", action="store_true", help="run without a window")
    parser.add_argument("--frames", type=int, default=600, help="frames to run in headless mode")
    parser.add_argument("--trace", action="store_true", help="log every executed instruction")
    return parser

# @intent:responsibility コマンドライン引数を設定へ反映します。
def load_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.speed is not None:
        if args.speed <= 0:
            raise ConfigError(f"--speed must be positive: {args.speed}")
        config.machine.speed = args.speed
    if args.scale is not None:
        if args.scale <= 0:
            raise ConfigError(f"--scale must be positive: {args.scale}")
        config.display.scale = args.scale
    return config

# @intent:responsibility ウィンドウなしで指定フレーム数だけ実行し、最終画面をログに出力します。
def run_headless(system: Chip8System, frames: int) -> int:
    for _ in range(frames):
        system.run_frame()
        if system.halted:
            break
    logger.info("Ran %d frames\n%s", system.frame_count, system.cpu.framebuffer.render_text())
    return 1 if system.halted else 0

def run_window(system: Chip8System, config: SystemConfig) -> int:
    from PySide6.QtWidgets import QApplication
    from .main_window import MainWindow
    from .audio import ToneAudio

    app = QApplication.instance() or QApplication(sys.argv[:1])
    tone = None
    if config.audio.enabled:
        tone = ToneAudio(config.audio.frequency, config.audio.volume)
        system.audio = tone
    main_win = MainWindow(system, config)
    main_win.show()
    main_win.start()
    try:
        return app.exec()
    finally:
        if tone is not None:
            tone.close()

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.trace else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args)
        # キーマップ名はウィンドウ生成前に検証する
        if not args.headless:
            from .keymap import KeyTranslator
            KeyTranslator(config.keymap)
    except (OSError, Chip8Error) as e:
        print(f"retro-chip8: {e}", file=sys.stderr)
        return 1

    cpu, bus = SystemBuilder().build_system(config)
    try:
        RomLoader().load_rom(args.rom, bus)
    except RomLoadFailure as e:
        print(f"retro-chip8: {e}", file=sys.stderr)
        return 1

    system = Chip8System(
        cpu,
        speed=config.machine.speed,
        on_error=config.machine.on_error,
        timer_hz=config.machine.timer_hz,
        trace=args.trace,
    )
    if args.headless:
        return run_headless(system, args.frames)
    return run_window(system, config)

if __name__ == '__main__':
    sys.exit(main())

# retro_chip8/system/driver.py
"""
フレームドライバ。

固定レート（既定60Hz）のフレームごとに、
  1. キューに溜まったキーイベントを適用し、
  2. `speed` 回だけ命令を実行し、
  3. タイマーを1回進め、
  4. サウンドタイマーの状態に応じて音声を開始/停止します。
コアのエラーは値として扱い、設定された方針（halt / skip）に従って処理します。
"""
import logging
from collections import deque
from typing import Deque, Optional, Tuple

from retro_chip8.core.clock import FixedTimestep
from retro_chip8.core.errors import Chip8Error
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from .audio import AudioSink, NullAudio

logger = logging.getLogger(__name__)

def _check_key(key: int) -> None:
    if not 0 <= key <= 0xF:
        raise ValueError(f"Key {key!r} is not a hex keypad code (0x0-0xF).")

# @intent:responsibility CPUを固定レートのフレーム単位で駆動し、入力・音声コラボレータと同期します。
class Chip8System:
    def __init__(self, cpu: Chip8Cpu, audio: Optional[AudioSink] = None, speed: int = 10,
                 on_error: str = "halt", timer_hz: float = 60.0, trace: bool = False):
        if speed <= 0:
            raise ValueError("speed must be positive")
        if on_error not in ("halt", "skip"):
            raise ValueError(f"Unknown error policy: {on_error}")
        self.cpu = cpu
        self.audio = audio or NullAudio()
        self.speed = speed
        self.on_error = on_error
        self.trace = trace
        self.clock = FixedTimestep(timer_hz)
        self.frame_count = 0
        self.last_error: Optional[Chip8Error] = None
        self._halted = False
        self._sound_on = False
        self._key_events: Deque[Tuple[int, bool]] = deque()

    @property
    def halted(self) -> bool:
        return self._halted

    # @intent:responsibility キー押下/解放イベントを次のフレームの先頭で適用するためにキューへ積みます。
    def key_down(self, key: int) -> None:
        _check_key(key)
        self._key_events.append((key, True))

    def key_up(self, key: int) -> None:
        _check_key(key)
        self._key_events.append((key, False))

    def _apply_key_events(self) -> None:
        while self._key_events:
            key, down = self._key_events.popleft()
            if down:
                self.cpu.key_down(key)
            else:
                self.cpu.key_up(key)

    # @intent:responsibility 1フレーム分の処理（キー適用 → 命令実行 → タイマー → 音声同期）を行います。
    def run_frame(self) -> None:
        self._apply_key_events()
        if not self._halted:
            for _ in range(self.speed):
                if not self._tick():
                    break
            self.cpu.advance_timers()
        self._sync_audio()
        self.frame_count += 1

    # @intent:return 実行を継続できる場合True。
    def _tick(self) -> bool:
        pc = self.cpu.get_state().pc
        try:
            snapshot = self.cpu.tick()
        except Chip8Error as error:
            return self._handle_error(error)
        if self.trace and snapshot.operation.length:
            logger.debug("%03X: %s", pc, snapshot.metadata.symbol_info)
        return True

    def _handle_error(self, error: Chip8Error) -> bool:
        self.last_error = error
        if self.on_error == "skip":
            logger.warning("Skipping faulting instruction: %s", error)
            state = self.cpu.get_state()
            state.pc = (state.pc + 2) & 0xFFFF
            return True
        logger.error("Machine halted: %s", error)
        self._halted = True
        return False

    # @intent:responsibility 毎フレーム、サウンドタイマーの状態に応じてplay()/stop()を呼び出します。
    def _sync_audio(self) -> None:
        self._sound_on = self.cpu.sound_active and not self._halted
        if self._sound_on:
            self.audio.play()
        else:
            self.audio.stop()

    @property
    def sound_on(self) -> bool:
        return self._sound_on

    # @intent:responsibility 経過した実時間（秒）を受け取り、必要な数のフレームを実行します。
    def update(self, elapsed: float) -> int:
        frames = self.clock.advance(elapsed)
        for _ in range(frames):
            self.run_frame()
        return frames

    # @intent:responsibility 停止状態を解除し、マシンをリセットします（メモリ内容は保持）。
    def reset(self) -> None:
        self.cpu.reset()
        self.clock.reset()
        self._key_events.clear()
        self._halted = False
        self.last_error = None
        self._sync_audio()

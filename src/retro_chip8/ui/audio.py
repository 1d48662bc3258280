# src/retro_chip8/ui/audio.py
"""
サイン波トーンによる音声出力。

サウンドタイマーが非ゼロの間に鳴らす単一周波数のトーンを、
生成したWAVをQSoundEffectでループ再生することで実現します。
"""
import io
import logging
import math
import struct
import tempfile
import wave
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

from retro_chip8.system.audio import AudioSink

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# @intent:utility_function 整数周期分のサイン波を16bitモノラルWAVとして生成します（ループ再生時に継ぎ目なし）。
def make_tone_wav(frequency: float, volume: float, sample_rate: int = SAMPLE_RATE, duration: float = 0.5) -> bytes:
    if frequency <= 0:
        raise ValueError("Tone frequency must be positive.")
    cycles = max(1, round(frequency * duration))
    frame_count = int(round(sample_rate * cycles / frequency))
    amplitude = int(32767 * max(0.0, min(volume, 1.0)))
    samples = (
        int(amplitude * math.sin(2 * math.pi * frequency * n / sample_rate))
        for n in range(frame_count)
    )
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(b"".join(struct.pack("<h", s) for s in samples))
    return buffer.getvalue()

# @intent:responsibility サウンドタイマー連動のトーン出力を行うAudioSink。
class ToneAudio(AudioSink):
    def __init__(self, frequency: float = 440.0, volume: float = 0.3):
        self._dir = tempfile.TemporaryDirectory(prefix="retro_chip8_")
        path = Path(self._dir.name) / "tone.wav"
        path.write_bytes(make_tone_wav(frequency, volume))
        self._effect = QSoundEffect()
        self._effect.setSource(QUrl.fromLocalFile(str(path)))
        self._effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
        self._effect.setVolume(1.0)
        logger.debug("Tone prepared: %.1f Hz, volume %.2f", frequency, volume)

    def play(self) -> None:
        if not self._effect.isPlaying():
            self._effect.play()

    def stop(self) -> None:
        if self._effect.isPlaying():
            self._effect.stop()

    def close(self) -> None:
        self._effect.stop()
        self._dir.cleanup()

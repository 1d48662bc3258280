# retro_chip8/system/audio.py
"""
音声コラボレータのインターフェース。

コアはサウンドタイマーが非ゼロかどうかを公開するだけで、トーン生成は行いません。
ドライバが毎フレームその状態に応じて `play()` / `stop()` を呼び出します。
"""
from abc import ABC, abstractmethod

# @intent:responsibility トーン出力の開始/停止インターフェースを定義します。
class AudioSink(ABC):
    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

# @intent:responsibility 音を出さないAudioSink。ヘッドレス実行とテストで使用します。
class NullAudio(AudioSink):
    def __init__(self):
        self.playing = False

    def play(self) -> None:
        self.playing = True

    def stop(self) -> None:
        self.playing = False

# retro_chip8/core/clock.py
"""
固定タイムステップ・アキュムレータ。

経過した実時間を蓄積し、固定長のフレーム単位で取り出します。
何フレーム進めるかだけを返し、実際の処理は呼び出し側が行います。
"""

# @intent:responsibility 経過時間を蓄積し、進めるべき固定レートのフレーム数を算出します。
class FixedTimestep:
    """
    `hz` で指定された固定レートのフレームを、蓄積した経過時間から取り出します。
    長時間の停止後に大量のフレームを一度に処理しないよう、1回の更新で
    返すフレーム数は `max_frames` で上限が設けられます。
    """
    def __init__(self, hz: float = 60.0, max_frames: int = 5):
        if hz <= 0:
            raise ValueError("Frame rate must be positive.")
        self.hz = hz
        self.frame_time = 1.0 / hz
        self.max_frames = max_frames
        self._accumulator = 0.0

    @property
    def pending(self) -> float:
        return self._accumulator

    # @intent:responsibility 経過時間（秒）を加算し、消化したフレーム数を返します。
    # @intent:post-condition 上限を超えた分の時間は破棄されます。
    def advance(self, elapsed: float) -> int:
        if elapsed < 0:
            raise ValueError("Elapsed time must not be negative.")
        self._accumulator += elapsed
        frames = 0
        while self._accumulator >= self.frame_time:
            self._accumulator -= self.frame_time
            frames += 1
            if frames == self.max_frames:
                self._accumulator %= self.frame_time
                break
        return frames

    def reset(self) -> None:
        self._accumulator = 0.0

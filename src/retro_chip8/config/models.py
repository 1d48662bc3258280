from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:constant 物理キー（キーボード上の文字）から16進キーパッドへの既定の対応表。
#                  1 2 3 4 / Q W E R / A S D F / Z X C V -> 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

ERROR_POLICIES = ("halt", "skip")

@dataclass
class MachineConfig:
    speed: int = 10          # 1フレームあたりの命令実行数
    timer_hz: float = 60.0
    seed: Optional[int] = None
    on_error: str = "halt"   # "halt", "skip"

@dataclass
class DisplayConfig:
    scale: int = 10
    on_color: str = "#000000"
    off_color: str = "#FFFFFF"

@dataclass
class AudioConfig:
    frequency: float = 440.0
    volume: float = 0.3
    enabled: bool = True

@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))

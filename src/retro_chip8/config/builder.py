import random
from typing import Tuple

from retro_chip8.transport.bus import Bus, RAM, MEMORY_SIZE
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.framebuffer import Framebuffer
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.glyphs import load_glyphs
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、周辺機器、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
        load_glyphs(bus)

        cpu = Chip8Cpu(
            bus,
            framebuffer=Framebuffer(),
            keypad=Keypad(),
            rng=random.Random(config.machine.seed),
        )
        return cpu, bus

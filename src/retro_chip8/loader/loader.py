# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
ヘッダーや長さ情報を持たない生バイナリのプログラムイメージを、
プログラム領域（0x200以降）へそのままロードします。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.core.errors import RomLoadFailure
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import PROGRAM_START

logger = logging.getLogger(__name__)

class RomLoader:
    """
    生バイナリのROMイメージを解析せずにバスへロードするローダー。
    """
    # @intent:responsibility ファイルからROMを読み込み、バスへロードしてロードしたバイト数を返します。
    # @intent:post-condition 読み込みに失敗した場合、メモリは変更されずRomLoadFailureが送出されます。
    def load_rom(self, file_path: Union[str, Path], bus: Bus, base: int = PROGRAM_START) -> int:
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise RomLoadFailure(f"Cannot read ROM '{file_path}': {e}") from e
        size = self.load_bytes(data, bus, base)
        logger.info("Loaded ROM %s (%d bytes) at %#05x", file_path, size, base)
        return size

    # @intent:responsibility バイト列をバスへロードします。
    def load_bytes(self, data: bytes, bus: Bus, base: int = PROGRAM_START) -> int:
        capacity = bus.get_size() - base
        if len(data) > capacity:
            raise RomLoadFailure(
                f"ROM image is {len(data)} bytes but only {capacity} bytes fit at {base:#05x}"
            )
        for offset, byte in enumerate(data):
            bus.load(base + offset, byte)
        return len(data)

# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

4KBのアドレス空間をデバイスへ振り分け、CPUからの読み書きを記録します。
全てのアクセスは境界チェックされ、範囲外はOutOfBoundsMemoryAccessとして報告されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from retro_chip8.core.errors import OutOfBoundsMemoryAccess

# @intent:constant CHIP-8のアドレス空間サイズ（4KB）。
MEMORY_SIZE = 0x1000

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 1回のバスアクセスを記録します。書き込みでは書き込み前の値も保持します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType
    previous_data: Optional[int] = None

# @intent:responsibility バスに接続されるデバイスのインターフェース。アドレスはデバイス内オフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    @abstractmethod
    def get_size(self) -> int:
        pass

# @intent:responsibility バイト配列によるRAM。
class RAM(Device):
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._memory):
            raise OutOfBoundsMemoryAccess(
                address, f"Address {address:#06x} out of bounds for RAM of size {len(self._memory)}."
            )

    def read(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    # @intent:pre-condition dataは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return len(self._memory)

# @intent:responsibility アドレスをデバイスへ振り分け、CPUのアクセスをログに記録する共通バス。
# @intent:post-condition read/writeは全てアクティビティログに記録されます。peek/loadは記録されません。
class Bus:
    def __init__(self):
        # (開始アドレス, 終了アドレス, デバイス)
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility 範囲 [start_address, end_address] にデバイスを割り当てます。
    # @intent:pre-condition 範囲の長さはデバイスのサイズと一致する必要があります。
    # 注: アドレス範囲の重複はチェックしない
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not 0 <= start_address <= end_address:
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        span = end_address - start_address + 1
        if device.get_size() != span:
            raise ValueError(
                f"{type(device).__name__} size ({device.get_size()} bytes) does not match "
                f"the address range size ({span} bytes)."
            )
        self._memory_map.append((start_address, end_address, device))

    # @intent:responsibility マップされた最大アドレス+1を返します。
    def get_size(self) -> int:
        return max((end + 1 for _, end, _ in self._memory_map), default=0)

    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise OutOfBoundsMemoryAccess(address, f"Address {address:#06x} not mapped to any device.")

    # @intent:responsibility 記録されたアクセスを取り出し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log, self._activity = self._activity, []
        return log

    def read(self, address: int) -> int:
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        previous = device.read(offset)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE, previous))

    # @intent:responsibility ログを残さない読み込み。逆アセンブラや範囲検証に使います。
    def peek(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.read(offset)

    # @intent:responsibility ログを残さない書き込み。ROM/グリフのロードと履歴の巻き戻しに使います。
    def load(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)

    def dump(self, address: int, length: int) -> bytes:
        return bytes(self.peek(address + i) for i in range(length))

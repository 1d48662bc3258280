# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.errors import UnknownOpcode
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation
from .maps import DECODE_MAP, EXECUTE_MAP, opcode_key

UNKNOWN = "UNKNOWN"

# @intent:responsibility CHIP-8の命令ワードをデコードします。
# @intent:post-condition 一致するパターンがない場合、ニーモニック "UNKNOWN" のOperationを返します。
def decode_opcode(opcode: int) -> Operation:
    decoder = DECODE_MAP.get(opcode_key(opcode))
    if decoder:
        return decoder(opcode)
    return make_operation(opcode, UNKNOWN, [f"${opcode:04X}"])

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, hw: Peripherals) -> None:
    executor = EXECUTE_MAP.get(opcode_key(operation.opcode))
    if executor is None:
        raise UnknownOpcode(operation.opcode)
    executor(state, bus, operation, hw)

# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないよう
peek（ログなし読み込み）のみを使用します。
"""
from typing import List, Tuple
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    end_addr = min(start_addr + length, bus.get_size() - 1)

    for current_addr in range(start_addr, end_addr, 2):
        opcode = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(opcode)

        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)

        result.append((current_addr, operation.opcode_hex, mnemonic_str))

    return result

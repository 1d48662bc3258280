# retro_chip8/core/errors.py
"""
Core Layer (エラー分類)

コアが報告する全ての異常を型付きの例外として定義します。
どの例外もプロセスを終了させず、ドライバ側が捕捉して方針（停止/スキップ）を決定します。
"""
from typing import Optional


# @intent:responsibility CHIP-8マシンが報告する全てのエラーの基底クラス。
class Chip8Error(Exception):
    """
    コアから報告される回復可能なエラーの基底クラス。
    `pc` にはエラーが発生した命令のアドレスが入ります（不明な場合はNone）。
    """
    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.pc = pc


# @intent:responsibility どの命令パターンにも一致しないオペコードを報告します。
class UnknownOpcode(Chip8Error):
    def __init__(self, opcode: int, pc: Optional[int] = None):
        location = f" at {pc:#05x}" if pc is not None else ""
        super().__init__(f"Unknown opcode {opcode:#06x}{location}", pc)
        self.opcode = opcode


# @intent:responsibility コールスタックの容量超過を報告します。呼び出しは拒否されます。
class StackOverflow(Chip8Error):
    pass


# @intent:responsibility 空のコールスタックからのリターンを報告します。
# @intent:post-condition スタックとPCは変更されません。
class StackUnderflow(Chip8Error):
    pass


# @intent:responsibility メモリ容量を超えるアドレスへのアクセスを報告します。
class OutOfBoundsMemoryAccess(Chip8Error, IndexError):
    def __init__(self, address: int, message: Optional[str] = None):
        super().__init__(message or f"Address {address:#06x} is outside of memory")
        self.address = address


# @intent:responsibility ROMイメージの読み込み失敗（I/Oエラー、サイズ超過）を報告します。
class RomLoadFailure(Chip8Error):
    pass


# @intent:responsibility 設定ファイルの不正な値を報告します。
class ConfigError(Chip8Error, ValueError):
    pass

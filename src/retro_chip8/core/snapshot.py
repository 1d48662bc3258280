# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、CPUとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType, BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "8124"
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V1", "V2"]
    operand_bytes: List[int] = field(default_factory=list) # 命令ワードの生バイト
    cycle_count: int = 1 # 実行した命令数としてカウントする
    length: int = 2 # 命令のバイト長

    # @intent:accessor 命令ワードを整数として返します。
    @property
    def opcode(self) -> int:
        return int(self.opcode_hex, 16)

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "main_loop: JP $0200"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    `state` は生成時点のコピーであり、以降の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:accessor 指定した種類のバスアクセスのみを返します。
    def accesses(self, access_type: BusAccessType) -> List[BusAccess]:
        return [a for a in self.bus_activity if a.access_type == access_type]

"""
共通の型定義を提供するモジュール。
CPU、デバッガ、UIなど複数のレイヤーで使用される型エイリアスを定義します。
"""
from typing import Dict, List, NamedTuple

# @intent:data_structure シンボル名とアドレスをマッピングする辞書の型エイリアス。
SymbolMap = Dict[str, int]

# @intent:data_structure 単一のレジスタの表示定義。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Timers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

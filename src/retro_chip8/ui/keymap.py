# src/retro_chip8/ui/keymap.py
"""
物理キー（Qtのキーコード）から16進キーパッドコードへの変換。

コアは物理キーを一切扱わず、ここで変換された0x0-0xFのコードだけを受け取ります。
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt

from retro_chip8.core.errors import ConfigError

# @intent:utility_function Qtのキー列挙値またはintを整数へ正規化します。
def key_value(key) -> int:
    return int(getattr(key, "value", key))

# @intent:constant "Key_"を除いたQtキー名（大文字）→ Qt.Key。"SPACE", "LEFT", "RETURN" なども引けます。
_QT_KEYS = {
    name[4:].upper(): member
    for name, member in Qt.Key.__members__.items()
    if name.startswith("Key_")
}

# @intent:responsibility キー名（"1", "Q" など）で定義されたキーマップをQtキーコードの対応表へ変換します。
class KeyTranslator:
    def __init__(self, keymap: Dict[str, int]):
        self._table: Dict[int, int] = {}
        for name, code in keymap.items():
            qt_key = _QT_KEYS.get(str(name).upper())
            if qt_key is None:
                raise ConfigError(f"Unknown key name in keymap: {name}")
            self._table[key_value(qt_key)] = code

    # @intent:return 対応するキーパッドコード。マップされていないキーはNone。
    def translate(self, key) -> Optional[int]:
        return self._table.get(key_value(key))

    def __len__(self) -> int:
        return len(self._table)

"""
UIフォント管理モジュール。

レジスタ表示やステータス行で使う等幅フォントを選択します。
"""
from functools import lru_cache

from PySide6.QtGui import QFont, QFontDatabase

PREFERRED_FAMILIES = ("Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 利用可能な等幅フォントファミリー名を返します。
# @intent:pre-condition QGuiApplicationが生成済みである必要があります。
@lru_cache(maxsize=1)
def get_monospace_font_family() -> str:
    available = set(QFontDatabase.families())
    for family in PREFERRED_FAMILIES:
        if family in available:
            return family
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    font = QFont(get_monospace_font_family(), size)
    font.setStyleHint(QFont.Monospace)
    return font

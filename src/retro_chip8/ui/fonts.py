"""
UIフォント管理モジュール。
"""
from typing import Sequence

from PySide6.QtGui import QFontDatabase

PREFERRED_MONOSPACE = ("Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 利用可能な等幅フォントのうち、優先順位の最も高いファミリー名を返します。
def get_monospace_font_family(preferred: Sequence[str] = PREFERRED_MONOSPACE) -> str:
    available = set(QFontDatabase.families())
    for family in preferred:
        if family in available:
            return family
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

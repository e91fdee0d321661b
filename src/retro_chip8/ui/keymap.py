# src/retro_chip8/ui/keymap.py
"""
ホストキーボードからCHIP-8キーパッドへの対応表。

    CHIP-8        Keyboard
    1 2 3 C       1 2 3 4
    4 5 6 D       Q W E R
    7 8 9 E       A S D F
    A 0 B F       Z X C V
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt

# @intent:map Qtのキーコードからキーパッド番号へのマッピングテーブル。
KEY_MAP: Dict[int, int] = {
    Qt.Key_1: 0x1, Qt.Key_2: 0x2, Qt.Key_3: 0x3, Qt.Key_4: 0xC,
    Qt.Key_Q: 0x4, Qt.Key_W: 0x5, Qt.Key_E: 0x6, Qt.Key_R: 0xD,
    Qt.Key_A: 0x7, Qt.Key_S: 0x8, Qt.Key_D: 0x9, Qt.Key_F: 0xE,
    Qt.Key_Z: 0xA, Qt.Key_X: 0x0, Qt.Key_C: 0xB, Qt.Key_V: 0xF,
}

# @intent:responsibility Qtのキーコードに対応するキーパッド番号を返します。対応がなければNone。
def key_for(qt_key: int) -> Optional[int]:
    return KEY_MAP.get(qt_key)

# src/retro_chip8/arch/chip8/keypad.py
"""
CHIP-8 16キー16進キーパッド。
"""
from typing import List, Optional

KEY_COUNT = 16

# @intent:responsibility 16個のキー押下状態を保持します。インタプリタからは読み取り専用です。
class Keypad:
    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT

    @staticmethod
    def _check(key: int) -> None:
        if not isinstance(key, int) or isinstance(key, bool) or not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key!r} is out of range (0x0-0xF).")

    # @intent:responsibility ホストのキー押下イベントを反映します。
    def press(self, key: int) -> None:
        self._check(key)
        self._keys[key] = True

    # @intent:responsibility ホストのキー解放イベントを反映します。
    def release(self, key: int) -> None:
        self._check(key)
        self._keys[key] = False

    def is_pressed(self, key: int) -> bool:
        return self._keys[key & 0x0F]

    # @intent:responsibility 押下中のキーのうち最も小さい番号を返します。何も押されていなければNone。
    def lowest_pressed(self) -> Optional[int]:
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def pressed_keys(self) -> List[int]:
        return [key for key, pressed in enumerate(self._keys) if pressed]

# src/retro_chip8/arch/chip8/font.py
"""
CHIP-8 組み込み16進フォント。
"""
from typing import List

from retro_chip8.transport.bus import Bus

# @intent:constant フォントの設置先アドレスと1グリフあたりのバイト数。
FONT_BASE = 0x50
GLYPH_SIZE = 5

# @intent:constant 0-9, A-F の4x5ピクセルグリフ（各行の上位4bitのみ使用）。
FONT_SET: List[int] = [
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80, # F
]

# @intent:responsibility 指定された16進数字のグリフ先頭アドレスを返します。
def glyph_address(digit: int) -> int:
    return FONT_BASE + (digit & 0x0F) * GLYPH_SIZE

# @intent:responsibility フォントセットをメモリに設置します。
def install_font(bus: Bus) -> None:
    bus.load(FONT_BASE, FONT_SET)

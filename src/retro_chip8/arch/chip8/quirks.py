# src/retro_chip8/arch/chip8/quirks.py
"""
CHIP-8 派生実装間で挙動が分かれる命令（Quirk）の設定。
"""
from dataclasses import dataclass
from enum import Enum

# @intent:responsibility 8XY6 / 8XYE でシフト前に VY を VX へコピーするかを選択します。
class ShiftQuirk(Enum):
    LEGACY = "legacy"  # COSMAC VIP: VX = VY してからシフト
    MODERN = "modern"  # CHIP-48 / SUPER-CHIP 以降: VX をそのままシフト

# @intent:responsibility BNNN のオフセットに使用するレジスタを選択します。
class JumpQuirk(Enum):
    ORIGINAL = "original"    # PC = NNN + V0
    SUPERCHIP = "superchip"  # PC = XNN + VX

# @intent:responsibility 実行時に参照される全てのQuirk設定をまとめます。
@dataclass(frozen=True)
class QuirkConfig:
    shift: ShiftQuirk = ShiftQuirk.MODERN
    jump: JumpQuirk = JumpQuirk.ORIGINAL
    # FX55 / FX65 の後に I を X+1 進めるか
    increment_index: bool = False

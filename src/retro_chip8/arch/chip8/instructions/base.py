# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import Callable, List

from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.quirks import QuirkConfig
from retro_chip8.arch.chip8.timers import TimerScheduler

# @intent:data_structure 0-255の乱数バイトを返す関数の型エイリアス。
RandomByte = Callable[[], int]

# @intent:responsibility 命令実行時に状態以外で必要となる依存（Quirk設定、タイマ、乱数源）をまとめます。
# @intent:rationale 命令関数の引数を (state, bus, op, ctx) に固定し、隠れたグローバル状態を持たないようにします。
@dataclass
class ExecutionContext:
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    timers: TimerScheduler = field(default_factory=TimerScheduler)
    random_byte: RandomByte = lambda: random.randint(0, 0xFF)

# --- フィールド抽出 ---
# @intent:utility_function 命令ワードから各オペランドフィールドを取り出します。

def get_family(word: int) -> int:
    return (word & 0xF000) >> 12

def get_x(word: int) -> int:
    return (word & 0x0F00) >> 8

def get_y(word: int) -> int:
    return (word & 0x00F0) >> 4

def get_n(word: int) -> int:
    return word & 0x000F

def get_nn(word: int) -> int:
    return word & 0x00FF

def get_nnn(word: int) -> int:
    return word & 0x0FFF

# @intent:utility_function 命令ワードとニーモニックからOperationを生成します。フィールドは全て埋められます。
def make_operation(word: int, mnemonic: str, operands: List[str], address: int) -> Operation:
    return Operation(
        opcode=word,
        mnemonic=mnemonic,
        operands=operands,
        family=get_family(word),
        x=get_x(word),
        y=get_y(word),
        n=get_n(word),
        nn=get_nn(word),
        nnn=get_nnn(word),
        address=address,
    )

# --- オペランド表記 ---

def reg(index: int) -> str:
    return f"V{index:X}"

def imm8(value: int) -> str:
    return f"#{value:02X}"

def addr12(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function 命令ワードを、命令テーブルのキーとなるビットパターンに正規化します。
# @intent:rationale 上位ニブルでファミリーを選択した後、0x0/0xE/0xFは下位バイト、0x5/0x8/0x9は下位ニブルで命令を特定します。
def pattern_key(word: int) -> int:
    family = word & 0xF000
    if family == 0x0000:
        return word
    if family in (0xE000, 0xF000):
        return word & 0xF0FF
    if family in (0x5000, 0x8000, 0x9000):
        return word & 0xF00F
    return family

# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.keypad import Keypad

# @intent:constant アドレス空間、プログラム開始位置、スタック容量、フラグレジスタ番号。
MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0x0FFF
PROGRAM_START = 0x200
STACK_SIZE = 16
FLAG_REGISTER = 0xF

# @intent:responsibility CHIP-8 CPUの全ての状態（レジスタ、スタック、タイマ、キーパッド、表示バッファ）を保持します。
# @intent:rationale メモリはBus上のRAMが保持し、それ以外の状態はこの単一の集約が排他的に所有します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUの状態を保持するデータクラス。

    pc は 0x200 から開始し、sp はコールスタックに積まれている戻り先アドレスの数を表します。
    """
    v: List[int] = field(default_factory=lambda: [0] * 16) # V0-VF
    i: int = 0x000 # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    delay_timer: int = 0
    sound_timer: int = 0
    # 各タイマが最後に設定または減算された時刻（TimerSchedulerの時計による秒）
    delay_reference: float = 0.0
    sound_reference: float = 0.0
    keypad: Keypad = field(default_factory=Keypad)
    display: DisplayBuffer = field(default_factory=DisplayBuffer)

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility 戻り先アドレスをコールスタックに積みます。
    # @intent:pre-condition 呼び出し側でスタック溢れを確認済みである必要があります。
    def push(self, address: int) -> None:
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self) -> int:
        self.sp -= 1
        address = self.stack[self.sp]
        self.stack[self.sp] = 0
        return address

# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import time
from typing import Callable, Dict, List, Optional, Tuple

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.errors import FetchError, RomLoadError
from retro_chip8.core.snapshot import Operation, Snapshot
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK, MEMORY_SIZE, PROGRAM_START
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.font import install_font
from retro_chip8.arch.chip8.quirks import QuirkConfig
from retro_chip8.arch.chip8.timers import TimerScheduler
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction, ExecutionContext
from retro_chip8.arch.chip8.instructions.base import RandomByte, pattern_key
from retro_chip8.arch.chip8 import disassembler

DEFAULT_CYCLE_HZ = 700
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行、タイマ駆動）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 インタプリタ。

    ホストは1サイクルごとに run_cycle()（= step() + tick_timers()）を呼び出し、
    stall() で目標の命令周波数に近づけます。表示バッファとキーパッドへのアクセスは
    サイクルの合間にのみ行われる前提です。
    """
    def __init__(self, bus: Bus, timers: Optional[TimerScheduler] = None,
                 quirks: Optional[QuirkConfig] = None, cycle_hz: float = DEFAULT_CYCLE_HZ,
                 random_byte: Optional[RandomByte] = None):
        if cycle_hz <= 0:
            raise ValueError(f"Cycle frequency must be positive: {cycle_hz}")
        self._cycle_hz = cycle_hz
        self._context = ExecutionContext(quirks=quirks or QuirkConfig(), timers=timers or TimerScheduler())
        if random_byte is not None:
            self._context.random_byte = random_byte
        self._fetch_address = 0
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    @property
    def quirks(self) -> QuirkConfig:
        return self._context.quirks

    @property
    def timers(self) -> TimerScheduler:
        return self._context.timers

    @property
    def cycle_hz(self) -> float:
        return self._cycle_hz

    @property
    def cycle_period(self) -> float:
        return 1.0 / self._cycle_hz

    # --- プログラムの配置と開始 ---

    # @intent:responsibility プログラムイメージを0x200からメモリへそのまま配置します。
    # @intent:pre-condition イメージはヘッダを持たない生のバイト列である必要があります。
    def load_program(self, image: bytes) -> None:
        if len(image) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"Program image is {len(image)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit at {PROGRAM_START:#05x}."
            )
        self._bus.load(PROGRAM_START, image)

    # @intent:responsibility フォントを設置し、PCをプログラム開始位置に設定します。
    def start(self) -> None:
        install_font(self._bus)
        self._state.pc = PROGRAM_START
        now = self.timers.now()
        self._state.delay_reference = now
        self._state.sound_reference = now

    # --- 命令サイクル ---

    # @intent:responsibility PCからビッグエンディアンの16bit命令ワードを読み出し、解釈の前にPCを2進めます。
    # @intent:post-condition PCまたはPC+1が12bitアドレス空間の外にある場合はFetchErrorを送出します。
    def fetch(self) -> int:
        pc = self._state.pc
        if not 0 <= pc < ADDRESS_MASK or not self._bus.is_mapped(pc + 1):
            raise FetchError(pc)
        self._fetch_address = pc
        word = self._bus.read_word(pc)
        self._state.pc = (pc + 2) & ADDRESS_MASK
        return word

    def decode(self, word: int) -> Operation:
        return decode_opcode(word, self._fetch_address)

    def execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._context)

    def _fetch(self) -> int:
        return self.fetch()

    def _decode(self, opcode: int) -> Operation:
        return self.decode(opcode)

    def _execute(self, operation: Operation) -> None:
        self.execute(operation)

    # @intent:responsibility FX0Aがキー入力待ちでPCを巻き戻した場合にTrueを返します。
    def _is_waiting(self, operation: Operation) -> bool:
        return pattern_key(operation.opcode) == 0xF00A and self._state.pc == operation.address

    # @intent:responsibility 経過時間に応じてタイマを減算します。命令の実行速度とは独立です。
    def tick_timers(self) -> None:
        self.timers.tick(self._state)

    # @intent:responsibility 1サイクル（命令1つの実行とタイマ確認）を進めます。
    def run_cycle(self) -> Snapshot:
        snapshot = self.step()
        self.tick_timers()
        return snapshot

    # @intent:responsibility 目標の命令周波数に近づけるため、1サイクル分の時間だけ待機します。
    def stall(self, sleep: Callable[[float], None] = time.sleep) -> None:
        sleep(self.cycle_period)

    # --- ホストとのインターフェース ---

    def press_key(self, key: int) -> None:
        self._state.keypad.press(key)

    def release_key(self, key: int) -> None:
        self._state.keypad.release(key)

    # @intent:responsibility 外部レンダラ向けに表示バッファを返します。読み取り専用として扱うこと。
    def get_display(self) -> DisplayBuffer:
        return self._state.display

    def get_stack(self) -> List[int]:
        return list(self._state.stack[:self._state.sp])

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": value for index, value in enumerate(s.v)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(16)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility UI表示用に、フラグレジスタとサウンド出力の状態を返します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {"VF": s.vf != 0, "SOUND": s.sound_timer > 0}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)

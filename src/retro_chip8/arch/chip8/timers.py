# src/retro_chip8/arch/chip8/timers.py
"""
ディレイタイマとサウンドタイマの実時間駆動。

タイマは命令の実行速度とは無関係に、壁時計に基づいて一定周波数（既定60Hz）で減算されます。
時計は注入可能で、テストでは経過時間を決定的にシミュレートできます。
"""
import time

from retro_chip8.common.types import Clock
from retro_chip8.arch.chip8.state import Chip8CpuState

DEFAULT_TIMER_HZ = 60

# @intent:responsibility 各タイマの最終減算時刻を基準に、周期が経過していれば1だけ減算します。
class TimerScheduler:
    """
    delay / sound タイマの減算タイミングを管理するクラス。

    状態（タイマ値と基準時刻）はChip8CpuStateが保持し、このクラスは時計と周期のみを持ちます。
    """
    def __init__(self, frequency_hz: float = DEFAULT_TIMER_HZ, clock: Clock = time.monotonic):
        if frequency_hz <= 0:
            raise ValueError(f"Timer frequency must be positive: {frequency_hz}")
        self._frequency_hz = frequency_hz
        self._period = 1.0 / frequency_hz
        self._clock = clock

    @property
    def frequency_hz(self) -> float:
        return self._frequency_hz

    @property
    def period(self) -> float:
        return self._period

    def now(self) -> float:
        return self._clock()

    # @intent:responsibility ディレイタイマを設定し、基準時刻をリセットします。
    def set_delay(self, state: Chip8CpuState, value: int) -> None:
        state.delay_timer = value & 0xFF
        state.delay_reference = self.now()

    # @intent:responsibility サウンドタイマを設定し、基準時刻をリセットします。
    def set_sound(self, state: Chip8CpuState, value: int) -> None:
        state.sound_timer = value & 0xFF
        state.sound_reference = self.now()

    # @intent:responsibility 両タイマの期限を確認し、必要であれば減算します。
    # @intent:post-condition タイマは0未満にならず、1回の呼び出しで各タイマは高々1だけ減算されます。
    def tick(self, state: Chip8CpuState) -> None:
        now = self.now()
        if state.delay_timer > 0 and now - state.delay_reference >= self._period:
            state.delay_timer -= 1
            state.delay_reference = now
        if state.sound_timer > 0 and now - state.sound_reference >= self._period:
            state.sound_timer -= 1
            state.sound_reference = now

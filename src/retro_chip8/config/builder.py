from typing import Optional, Tuple

from retro_chip8.common.types import Clock
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from retro_chip8.arch.chip8.timers import TimerScheduler
from retro_chip8.arch.chip8.instructions.base import RandomByte
from retro_chip8.loader.loader import RomLoader
from .models import MachineConfig

# @intent:responsibility マシン構成（Config）に基づいて、Bus、RAM、タイマ、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: MachineConfig, clock: Optional[Clock] = None,
                     random_byte: Optional[RandomByte] = None) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        timers = TimerScheduler(config.timing.timer_hz, clock) if clock else TimerScheduler(config.timing.timer_hz)
        cpu = Chip8Cpu(
            bus,
            timers=timers,
            quirks=config.quirks,
            cycle_hz=config.timing.cycle_hz,
            random_byte=random_byte,
        )
        return cpu, bus

    # @intent:responsibility システムを構築し、ConfigにROMが指定されていればロードしてから実行を開始します。
    def build_and_start(self, config: MachineConfig, clock: Optional[Clock] = None,
                        random_byte: Optional[RandomByte] = None) -> Tuple[Chip8Cpu, Bus]:
        cpu, bus = self.build_system(config, clock, random_byte)
        if config.rom:
            RomLoader().load_rom(config.rom, cpu)
        cpu.start()
        return cpu, bus

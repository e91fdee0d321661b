from dataclasses import dataclass, field
from typing import Optional

from retro_chip8.arch.chip8.quirks import QuirkConfig

@dataclass
class TimingConfig:
    cycle_hz: float = 700  # 命令の実行周波数
    timer_hz: float = 60   # ディレイ/サウンドタイマの減算周波数

@dataclass
class DisplayConfig:
    scale: int = 10  # 1ピクセルあたりの表示サイズ
    foreground: str = "#E0E0E0"
    background: str = "#101010"

@dataclass
class MachineConfig:
    rom: Optional[str] = None
    timing: TimingConfig = field(default_factory=TimingConfig)
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

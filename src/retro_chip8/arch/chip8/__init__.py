# src/retro_chip8/arch/chip8/__init__.py
"""
CHIP-8 Architecture Package
"""
from .cpu import Chip8Cpu
from .state import Chip8CpuState
from .quirks import QuirkConfig, ShiftQuirk, JumpQuirk
from .timers import TimerScheduler

import yaml
from typing import Dict, Any, Type, TypeVar
from enum import Enum

from retro_chip8.arch.chip8.quirks import QuirkConfig, ShiftQuirk, JumpQuirk
from .models import MachineConfig, TimingConfig, DisplayConfig

E = TypeVar("E", bound=Enum)

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self.parse(yaml.safe_load(text) or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Machine config must be a mapping, got {type(data).__name__}")

        timing_data = data.get("timing", {}) or {}
        timing = TimingConfig(
            cycle_hz=self._parse_frequency(timing_data.get("cycle_hz", TimingConfig.cycle_hz), "cycle_hz"),
            timer_hz=self._parse_frequency(timing_data.get("timer_hz", TimingConfig.timer_hz), "timer_hz"),
        )

        quirks_data = data.get("quirks", {}) or {}
        quirks = QuirkConfig(
            shift=self._parse_enum(ShiftQuirk, quirks_data.get("shift", QuirkConfig.shift.value)),
            jump=self._parse_enum(JumpQuirk, quirks_data.get("jump", QuirkConfig.jump.value)),
            increment_index=self._parse_bool(quirks_data.get("increment_index", QuirkConfig.increment_index), "increment_index"),
        )

        display_data = data.get("display", {}) or {}
        scale = self._parse_int(display_data.get("scale", DisplayConfig.scale))
        if scale <= 0:
            raise ValueError(f"Display scale must be positive: {scale}")
        display = DisplayConfig(
            scale=scale,
            foreground=display_data.get("foreground", DisplayConfig.foreground),
            background=display_data.get("background", DisplayConfig.background),
        )

        return MachineConfig(
            rom=data.get("rom"),
            timing=timing,
            quirks=quirks,
            display=display,
        )

    def _parse_enum(self, enum_type: Type[E], value: Any) -> E:
        try:
            return enum_type(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in enum_type)
            raise ValueError(f"Invalid {enum_type.__name__} '{value}' (expected one of: {choices})")

    def _parse_frequency(self, value: Any, name: str) -> float:
        if isinstance(value, str):
            value = self._parse_int(value)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"{name} must be a positive number: {value}")
        return value

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_bool(self, value: Any, name: str) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("true", "yes", "on"):
                return True
            if text in ("false", "no", "off"):
                return False
        raise ValueError(f"{name} must be a boolean (true/false): {value!r}")

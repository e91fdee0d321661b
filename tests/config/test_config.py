# tests/config/test_config.py
"""
retro_chip8.configパッケージ（YAMLローダーとSystemBuilder）の単体テスト。
"""
import pytest
from pathlib import Path

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import MachineConfig, TimingConfig
from retro_chip8.arch.chip8.quirks import QuirkConfig, ShiftQuirk, JumpQuirk

FULL_CONFIG = """
rom: roms/test.ch8
timing:
  cycle_hz: 1000
  timer_hz: 60
quirks:
  shift: legacy
  jump: SuperChip
  increment_index: true
display:
  scale: 8
  foreground: "#33FF33"
"""

# @intent:test_suite 構成ファイルの解析と、構成に基づくシステム構築を検証します。

class TestConfigLoader:
    def test_full_config(self):
        config = ConfigLoader().load_from_string(FULL_CONFIG)
        assert config.rom == "roms/test.ch8"
        assert config.timing.cycle_hz == 1000
        assert config.timing.timer_hz == 60
        assert config.quirks == QuirkConfig(ShiftQuirk.LEGACY, JumpQuirk.SUPERCHIP, True)
        assert config.display.scale == 8
        assert config.display.foreground == "#33FF33"
        assert config.display.background == "#101010"

    def test_empty_config_uses_defaults(self):
        config = ConfigLoader().load_from_string("")
        assert config == MachineConfig()
        assert config.timing == TimingConfig(cycle_hz=700, timer_hz=60)
        assert config.quirks.shift is ShiftQuirk.MODERN
        assert config.quirks.jump is JumpQuirk.ORIGINAL
        assert config.quirks.increment_index is False

    def test_hex_string_values(self):
        config = ConfigLoader().load_from_string('timing:\n  cycle_hz: "0x2BC"\ndisplay:\n  scale: "0x4"\n')
        assert config.timing.cycle_hz == 700
        assert config.display.scale == 4

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "machine.yaml"
        path.write_text(FULL_CONFIG)
        assert ConfigLoader().load_from_file(str(path)).timing.cycle_hz == 1000

    # @intent:test_case_bool increment_indexは文字列表記の真偽値を解釈し、"false"が有効にならないことを検証します。
    @pytest.mark.parametrize("value, expected", [
        ("false", False), ("'false'", False), ("'no'", False), ("'off'", False),
        ("true", True), ("'yes'", True), ("'On'", True),
    ])
    def test_increment_index_boolean_forms(self, value, expected):
        config = ConfigLoader().load_from_string(f"quirks:\n  increment_index: {value}\n")
        assert config.quirks.increment_index is expected

    @pytest.mark.parametrize("value", ["maybe", "1", "0"])
    def test_increment_index_rejects_non_boolean(self, value):
        with pytest.raises(ValueError, match="increment_index must be a boolean"):
            ConfigLoader().load_from_string(f"quirks:\n  increment_index: {value}\n")

    def test_unknown_quirk_name(self):
        with pytest.raises(ValueError, match="expected one of: legacy, modern"):
            ConfigLoader().load_from_string("quirks:\n  shift: sideways\n")

    @pytest.mark.parametrize("text", ["timing:\n  cycle_hz: 0\n", "timing:\n  timer_hz: -60\n"])
    def test_non_positive_frequency(self, text):
        with pytest.raises(ValueError, match="must be a positive number"):
            ConfigLoader().load_from_string(text)

    def test_non_positive_scale(self):
        with pytest.raises(ValueError, match="Display scale must be positive"):
            ConfigLoader().load_from_string("display:\n  scale: 0\n")

    def test_non_mapping_document(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            ConfigLoader().load_from_string("- 1\n- 2\n")

class TestSystemBuilder:
    def test_build_system(self):
        config = ConfigLoader().load_from_string(FULL_CONFIG)
        cpu, bus = SystemBuilder().build_system(config, clock=lambda: 0.0, random_byte=lambda: 0x5A)

        assert bus.is_mapped(0x000) and bus.is_mapped(0xFFF)
        assert not bus.is_mapped(0x1000)
        assert cpu.get_bus() is bus
        assert cpu.cycle_hz == 1000
        assert cpu.timers.frequency_hz == 60
        assert cpu.timers.now() == 0.0
        assert cpu.quirks.jump is JumpQuirk.SUPERCHIP

    def test_build_and_start_loads_rom(self, tmp_path):
        rom = tmp_path / "prog.ch8"
        rom.write_bytes(bytes([0x60, 0x2A]))
        config = MachineConfig(rom=str(rom))

        cpu, bus = SystemBuilder().build_and_start(config)
        assert cpu.get_state().pc == 0x200
        assert bus.peek(0x200) == 0x60
        assert bus.peek(0x50) == 0xF0
        cpu.run_cycle()
        assert cpu.get_state().v[0] == 0x2A

def test_bundled_default_config_matches_defaults():
    path = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"
    config = ConfigLoader().load_from_file(str(path))
    assert config == MachineConfig()

# tests/loader/test_loader.py
"""
retro_chip8.loader.loaderモジュールの単体テスト。
生のCHIP-8プログラムイメージのロードとエラー処理を検証します。
"""
import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.errors import RomLoadError
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.loader.loader import RomLoader

# @intent:test_suite ROMローダーの検証。

class TestRomLoader:
    @pytest.fixture
    def setup_loader(self, tmp_path):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus)
        return RomLoader(), cpu, bus, tmp_path

    def test_load_rom_places_image_at_0x200(self, setup_loader):
        loader, cpu, bus, tmp_path = setup_loader
        rom = tmp_path / "logo.ch8"
        rom.write_bytes(bytes([0x00, 0xE0, 0xA2, 0x2A]))

        assert loader.load_rom(rom, cpu) == 4
        assert [bus.peek(0x200 + k) for k in range(4)] == [0x00, 0xE0, 0xA2, 0x2A]
        assert bus.peek(0x1FF) == 0x00

    def test_load_rom_accepts_str_path(self, setup_loader):
        loader, cpu, bus, tmp_path = setup_loader
        rom = tmp_path / "one.ch8"
        rom.write_bytes(b"\x12\x00")
        loader.load_rom(str(rom), cpu)
        assert bus.peek(0x200) == 0x12

    def test_missing_file(self, setup_loader):
        loader, cpu, _, tmp_path = setup_loader
        with pytest.raises(RomLoadError, match="Failed to read ROM file"):
            loader.load_rom(tmp_path / "missing.ch8", cpu)

    # @intent:test_case_empty 空のファイルは0バイトのプログラムとしてロードされ、メモリは変更されないことを検証します。
    def test_empty_file_loads_nothing(self, setup_loader):
        loader, cpu, bus, tmp_path = setup_loader
        rom = tmp_path / "empty.ch8"
        rom.write_bytes(b"")
        assert loader.read_rom(rom) == b""
        assert loader.load_rom(rom, cpu) == 0
        assert bus.peek(0x200) == 0x00

    def test_oversized_image(self, setup_loader):
        loader, cpu, _, tmp_path = setup_loader
        rom = tmp_path / "huge.ch8"
        rom.write_bytes(bytes(0x1000 - 0x200 + 1))
        with pytest.raises(RomLoadError):
            loader.load_rom(rom, cpu)

# tests/arch/chip8/test_chip8_cpu.py
"""
retro_chip8.arch.chip8.cpuモジュールの単体テストと、短いプログラムによる結合テスト。
"""
import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.errors import FetchError, RomLoadError
from retro_chip8.arch.chip8.cpu import Chip8Cpu, MAX_PROGRAM_SIZE
from retro_chip8.arch.chip8.timers import TimerScheduler

class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

def program(*words):
    image = bytearray()
    for word in words:
        image += bytes([word >> 8, word & 0xFF])
    return bytes(image)

# @intent:test_suite CHIP-8 CPUのライフサイクル（ロード、開始、フェッチ、サイクル実行）とUI向けAPIを検証します。

class TestChip8Cpu:
    @pytest.fixture
    def setup_cpu(self):
        clock = FakeClock()
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus, timers=TimerScheduler(60, clock), cycle_hz=500)
        return cpu, bus, clock

    def test_invalid_cycle_frequency(self):
        bus = Bus()
        with pytest.raises(ValueError, match="Cycle frequency must be positive"):
            Chip8Cpu(bus, cycle_hz=0)

    def test_initial_state_is_zero(self, setup_cpu):
        cpu, _, _ = setup_cpu
        state = cpu.get_state()
        assert state.pc == 0
        assert state.v == [0] * 16
        assert state.i == 0
        assert state.sp == 0
        assert cpu.cycle_hz == 500
        assert cpu.cycle_period == pytest.approx(0.002)

    # @intent:test_case_start start()でフォントが設置され、PCが0x200になることを検証します。
    def test_start_installs_font(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        cpu.start()
        assert cpu.get_state().pc == 0x200
        assert [bus.peek(0x50 + k) for k in range(5)] == [0xF0, 0x90, 0x90, 0x90, 0xF0]

    def test_load_program(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        cpu.load_program(program(0x00E0, 0x1200))
        assert [bus.peek(0x200 + k) for k in range(4)] == [0x00, 0xE0, 0x12, 0x00]
        assert bus.get_and_clear_activity_log() == []

    def test_load_program_too_large(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.load_program(bytes(MAX_PROGRAM_SIZE))
        with pytest.raises(RomLoadError):
            cpu.load_program(bytes(MAX_PROGRAM_SIZE + 1))

    # @intent:test_case_fetch ビッグエンディアンで読み出し、PCを2進めることを検証します。
    def test_fetch_big_endian(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.load_program(bytes([0xA2, 0x2A]))
        cpu.start()
        assert cpu.fetch() == 0xA22A
        assert cpu.get_state().pc == 0x202

    def test_fetch_past_end_of_memory(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.start()
        cpu.get_state().pc = 0xFFF
        with pytest.raises(FetchError) as excinfo:
            cpu.step()
        assert excinfo.value.pc == 0xFFF
        assert excinfo.value.opcode is None
        assert "PC=0xfff" in str(excinfo.value)

    def test_fetch_last_word(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        cpu.start()
        bus.write(0xFFE, 0x00)
        bus.write(0xFFF, 0xE0)
        cpu.get_state().pc = 0xFFE
        snapshot = cpu.step()
        assert snapshot.operation.mnemonic == "CLS"
        assert cpu.get_state().pc == 0x000

    # @intent:test_case_cycle run_cycle()が命令の実行とタイマの減算を行うことを検証します。
    def test_run_cycle_ticks_timers(self, setup_cpu):
        cpu, _, clock = setup_cpu
        # LD V0, #05 / LD DT, V0 / JP $204
        cpu.load_program(program(0x6005, 0xF015, 0x1204))
        cpu.start()
        cpu.run_cycle()
        cpu.run_cycle()
        assert cpu.get_state().delay_timer == 5

        clock.now += 1 / 60
        cpu.run_cycle()
        assert cpu.get_state().delay_timer == 4
        assert cpu.get_state().pc == 0x204

    def test_stall_sleeps_for_cycle_period(self, setup_cpu):
        cpu, _, _ = setup_cpu
        slept = []
        cpu.stall(slept.append)
        assert slept == [pytest.approx(0.002)]

    # @intent:test_case_program 短いプログラム（加算とBCD変換）を実行し、結果のメモリ内容を検証します。
    def test_program_runs_to_completion(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        cpu.load_program(program(
            0x6005,  # LD V0, #05
            0x6103,  # LD V1, #03
            0x8014,  # ADD V0, V1
            0xA300,  # LD I, $300
            0xF033,  # LD B, V0
            0x120A,  # JP $20A
        ))
        cpu.start()
        for _ in range(7):
            cpu.run_cycle()
        assert [bus.peek(0x300 + k) for k in range(3)] == [0, 0, 8]
        assert cpu.get_state().pc == 0x20A

    def test_key_wait_resumes_after_press(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.load_program(program(0xF50A, 0x1202))
        cpu.start()
        for _ in range(3):
            assert cpu.run_cycle().metadata.waiting_for_key
        assert cpu.get_state().pc == 0x200

        cpu.press_key(0xC)
        assert not cpu.run_cycle().metadata.waiting_for_key
        assert cpu.get_state().v[5] == 0xC
        assert cpu.get_state().pc == 0x202

    def test_press_key_out_of_range(self, setup_cpu):
        cpu, _, _ = setup_cpu
        with pytest.raises(ValueError):
            cpu.press_key(0x10)

    def test_reset_keeps_memory(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        cpu.load_program(program(0x6042))
        cpu.start()
        cpu.run_cycle()
        cpu.reset()
        assert cpu.get_state().v[0] == 0
        assert cpu.get_state().pc == 0
        assert bus.peek(0x200) == 0x60

    # @intent:test_case_ui UI向けのレジスタマップ、レイアウト、フラグ、逆アセンブルを検証します。
    def test_ui_api(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.load_program(program(0x00E0, 0xA22A))
        cpu.start()
        state = cpu.get_state()
        state.v[0xA] = 0x12
        state.i = 0x345
        state.sound_timer = 3

        registers = cpu.get_register_map()
        assert registers["VA"] == 0x12
        assert registers["I"] == 0x345
        assert registers["PC"] == 0x200
        assert registers["ST"] == 3
        assert len(registers) == 16 + 5

        layout = cpu.get_register_layout()
        assert [group.group_name for group in layout] == ["General", "Index/Pointers", "Timers"]
        names = [reg.name for group in layout for reg in group.registers]
        assert set(names) == set(registers)

        assert cpu.get_flag_state() == {"VF": False, "SOUND": True}
        assert cpu.disassemble(0x200, 4) == [(0x200, "00E0", "CLS"), (0x202, "A22A", "LD I, $22A")]
        assert cpu.get_display() is state.display

# tests/debugger/test_debugger.py
"""
retro_chip8.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および条件チェック機能を検証します。
"""
import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.errors import StackUnderflowError
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType

PROGRAM = bytes([
    0x60, 0x01,  # 0x200: LD V0, #01
    0x61, 0x02,  # 0x202: LD V1, #02
    0xA3, 0x00,  # 0x204: LD I, $300
    0xF0, 0x55,  # 0x206: LD [I], V0
    0x12, 0x08,  # 0x208: JP $208
])

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

class TestDebugger:
    """
    Debuggerの単体テスト。
    """
    @pytest.fixture
    def setup_debugger(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus, cycle_hz=1000)
        cpu.load_program(PROGRAM)
        cpu.start()
        stalls = []
        debugger = Debugger(cpu, stall=stalls.append)
        return debugger, cpu, bus, stalls

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1) # 重複追加は無視される
        assert debugger.get_breakpoints() == [bp1, bp2]

        debugger.remove_breakpoint(bp1)
        debugger.remove_breakpoint(bp1) # 存在しないブレークポイントの削除はエラーにならない
        assert debugger.get_breakpoints() == [bp2]

    # @intent:test_case_step step_instruction()が1サイクルを実行し、最後のSnapshotを保持することを検証します。
    def test_step_instruction(self, setup_debugger):
        debugger, cpu, _, _ = setup_debugger
        assert debugger.get_last_snapshot() is None
        snapshot = debugger.step_instruction()
        assert snapshot.operation.text() == "LD V0, #01"
        assert debugger.get_last_snapshot() is snapshot
        assert cpu.get_state().pc == 0x202

    # @intent:test_case_max_cycles max_cyclesに達すると停止し、各サイクル後に周期分待機することを検証します。
    def test_run_max_cycles_and_stall(self, setup_debugger):
        debugger, cpu, _, stalls = setup_debugger
        assert debugger.run(max_cycles=3) == 3
        assert cpu.get_state().pc == 0x206
        assert stalls == [pytest.approx(0.001)] * 3
        assert not debugger.is_running()

    # @intent:test_case_pc_breakpoint PC一致ブレークポイントで、その命令の実行前に停止することを検証します。
    def test_pc_breakpoint(self, setup_debugger, capsys):
        debugger, cpu, _, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))

        assert debugger.run() == 2
        assert cpu.get_state().pc == 0x204
        assert "Breakpoint hit at PC: 0x204" in capsys.readouterr().out

        # 再開時は現在位置のブレークポイントで止まらない
        assert debugger.run(max_cycles=2) == 2
        assert cpu.get_state().pc == 0x208

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, cpu, _, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204, enabled=False))
        assert debugger.run(max_cycles=4) == 4
        assert cpu.get_state().pc == 0x208

    # @intent:test_case_memory_breakpoint 指定アドレスへの書き込み直後に停止することを検証します。
    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, bus, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300))
        assert debugger.run(max_cycles=100) == 4
        assert cpu.get_state().pc == 0x208
        assert bus.peek(0x300) == 0x01

    # @intent:test_case_register_breakpoint レジスタが指定値になった直後に停止することを検証します。
    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu, _, _ = setup_debugger
        debugger.add_breakpoint(
            BreakpointCondition(BreakpointConditionType.REGISTER_VALUE, value=0x300, register_name="i")
        )
        assert debugger.run(max_cycles=100) == 3
        assert cpu.get_state().pc == 0x206

    def test_stop(self, setup_debugger):
        debugger, _, _, _ = setup_debugger
        debugger.stop()
        assert not debugger.is_running()

    # @intent:test_case_fatal 致命的な実行エラーは呼び出し元へ伝播することを検証します。
    def test_execution_error_propagates(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        cpu = Chip8Cpu(bus)
        cpu.load_program(bytes([0x00, 0xEE]))
        cpu.start()
        debugger = Debugger(cpu, stall=lambda _seconds: None)
        with pytest.raises(StackUnderflowError):
            debugger.run()

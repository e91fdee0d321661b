# retro_chip8/debugger/debugger.py
"""
デバッガモジュール。

ホストループ（1サイクル = 命令実行 + タイマ確認 + 待機）を駆動し、ユーザーが指定した条件
（ブレークポイント）で実行を中断させる責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import time

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.transport.bus import BusAccessType

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUEで使用 (例: "V3", "I", "DT")
    enabled: bool = True

# @intent:responsibility ホストループの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUのサイクル実行を制御し、ブレークポイントの管理を行うクラス。
    致命的なExecutionErrorは捕捉せず、呼び出し元へ伝播させます。
    """
    def __init__(self, cpu: Chip8Cpu, stall: Callable[[float], None] = time.sleep):
        self._cpu = cpu
        self._stall = stall
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._last_snapshot: Optional[Snapshot] = None

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def is_running(self) -> bool:
        return self._running

    def _hits_pc_breakpoint(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    # @intent:responsibility Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        registers = self._cpu.get_register_map()

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and registers.get(bp.register_name.upper()) == bp.value:
                    return True
        return False

    # @intent:responsibility 1サイクル（命令1つとタイマ確認）を実行し、その結果のSnapshotを返します。
    def step_instruction(self) -> Snapshot:
        snapshot = self._cpu.run_cycle()
        self._last_snapshot = snapshot
        return snapshot

    # @intent:responsibility ブレークポイント、stop()、またはmax_cyclesに達するまでサイクルを継続します。
    # @intent:return 実行したサイクル数。
    def run(self, max_cycles: Optional[int] = None) -> int:
        self._running = True
        executed = 0

        # 現在のPCにあるブレークポイントで即座に止まらないよう、最初の1命令は無条件に実行する
        skip_pc_check = self._hits_pc_breakpoint(self._cpu.get_state().pc)

        while self._running:
            if max_cycles is not None and executed >= max_cycles:
                self._running = False
                break

            current_pc = self._cpu.get_state().pc
            if not skip_pc_check and self._hits_pc_breakpoint(current_pc):
                self._running = False
                print(f"Breakpoint hit at PC: {current_pc:#05x}")
                break
            skip_pc_check = False

            snapshot = self.step_instruction()
            executed += 1

            if self._check_other_breakpoints(snapshot):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#05x}")
                break

            self._stall(self._cpu.cycle_period)

        return executed

    def stop(self) -> None:
        self._running = False

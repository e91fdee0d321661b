# retro_chip8/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ・デコード・実行の順序と、1サイクルごとのSnapshot生成を定めます。
命令セットの中身はアーキテクチャ側のサブクラスが提供します。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import RegisterLayoutInfo

# @intent:responsibility 命令サイクルの骨格と、UIが参照する検査用インターフェースを定義します。
class AbstractCpu(ABC):
    """
    状態はサブクラスが生成し、このクラスを通じてのみ変更されます。
    外部からはget_state()で参照します。
    """
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility 状態をゼロ状態へ戻します。メモリはBusが保持するため変更されません。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    def get_bus(self) -> Bus:
        return self._bus

    # @intent:post-condition 戻り値を返す時点で、PCは次の命令を指していること。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態とその命令によるバスアクセスをSnapshotにまとめます。
    def step(self) -> Snapshot:
        # サイクル外で発生したアクセスは含めない
        self._bus.get_and_clear_activity_log()
        fetched_at = self._state.pc

        operation = self._decode(self._fetch())
        self._execute(operation)

        self._cycle_count += operation.cycle_count
        return Snapshot(
            state=self._state,
            operation=operation,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                symbol_info=f"{fetched_at:#06x}: {operation.text()}",
                waiting_for_key=self._is_waiting(operation),
            ),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # @intent:responsibility 直前の命令が入力待ちのため同じ位置で再実行されるかを返します。既定はFalse。
    def _is_waiting(self, operation: Operation) -> bool:
        return False

    # --- UI向けの検査用API ---

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """レジスタ名から現在値への辞書。"""

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """レジスタの表示グループとビット幅。"""

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """(アドレス, 命令ワードの16進表記, ニーモニック) のリスト。"""

# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッガのブレークポイント判定に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccess


# @intent:responsibility デコードされた命令の詳細（命令ワードと各オペランドフィールド）を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令を表すデータクラス。

    CHIP-8の命令は全て16bit固定長で、上位ニブルが命令ファミリーを選択し、
    残りのビットが X / Y / N / NN / NNN の各フィールドとして解釈されます。
    """
    opcode: int # 16bit命令ワード 例: 0xD015
    mnemonic: str # 例: "DRW"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "V1", "5"]
    family: int = 0 # 上位ニブル (0x0-0xF)
    x: int = 0
    y: int = 0
    n: int = 0
    nn: int = 0
    nnn: int = 0
    address: int = 0 # この命令をフェッチしたアドレス
    cycle_count: int = 1
    length: int = 2

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:responsibility ニーモニックとオペランドを表示用の一行に整形します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、逆アセンブル表記、キー待ち状態）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "0x0200: CLS"
    # @intent:rationale FX0Aがキー入力を待ってPCを巻き戻した場合にTrue。ホストループはブロックせずに次のサイクルへ進む。
    waiting_for_key: bool = False

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令サイクル後のCPUとバスの状態を記録したデータ構造。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

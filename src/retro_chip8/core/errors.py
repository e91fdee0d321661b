# retro_chip8/core/errors.py
"""
エミュレーション中に発生する致命的エラーの定義。

CHIP-8の実機ではスタック溢れや未定義命令の挙動は未定義であるため、
これらは全て回復不能なエラーとして扱い、実行を即座に停止させます。
"""
from typing import Optional


class Chip8Error(Exception):
    """全てのCHIP-8エラーの基底クラス。"""


# @intent:responsibility 命令の実行中に発生した致命的エラーを、失敗した命令とPCと共に表現します。
class ExecutionError(Chip8Error):
    """
    命令サイクル中に発生した回復不能なエラー。

    Attributes:
        pc: 失敗した命令の先頭アドレス
        opcode: 失敗した命令ワード（フェッチ失敗時はNone）
    """
    reason = "execution error"

    def __init__(self, pc: int, opcode: Optional[int] = None, detail: str = ""):
        self.pc = pc
        self.opcode = opcode
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"{self.reason} at PC={self.pc:#05x}"
        if self.opcode is not None:
            message += f" (opcode {self.opcode:04X})"
        if self.detail:
            message += f": {self.detail}"
        return message


class StackOverflowError(ExecutionError):
    reason = "stack overflow"


class StackUnderflowError(ExecutionError):
    reason = "stack underflow"


class FetchError(ExecutionError):
    reason = "fetch address out of range"


class UnimplementedOpcodeError(ExecutionError):
    reason = "unimplemented opcode"


# @intent:responsibility プログラムイメージの読み込み失敗を表現します。サイクル開始前に発生します。
class RomLoadError(Chip8Error):
    """ROMファイルの読み込みまたはメモリへの配置に失敗した。"""

# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.errors import UnimplementedOpcodeError
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, pattern_key
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 16bit命令ワードをデコードします。副作用はなく、常に成功します。
# @intent:pre-condition `address`はこの命令をフェッチしたアドレス（表示とエラー報告に使用）。
def decode_opcode(word: int, address: int = 0) -> Operation:
    """
    CHIP-8の命令ワードをデコードし、Operationオブジェクトを返します。
    未知のビットパターンの場合は"UNKNOWN"を返します（実行時にエラーとなります）。
    """
    word &= 0xFFFF
    decoder = DECODE_MAP.get(pattern_key(word))
    if decoder:
        return decoder(word, address)
    return make_operation(word, "UNKNOWN", [f"${word:04X}"], address)

# @intent:responsibility デコードされた命令を実行し、CPUの状態を変更します。
# @intent:post-condition 未実装の命令パターンの場合はUnimplementedOpcodeErrorを送出します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, ctx: ExecutionContext) -> None:
    executor = EXECUTE_MAP.get(pattern_key(operation.opcode))
    if executor is None:
        raise UnimplementedOpcodeError(operation.address, operation.opcode)
    executor(state, bus, operation, ctx)

__all__ = ["decode_opcode", "execute_instruction", "ExecutionContext"]

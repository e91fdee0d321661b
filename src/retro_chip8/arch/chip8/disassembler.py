# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないようにpeekで読み込みます。
"""
from typing import List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        # 命令ワードの2バイト目までマップされていなければ終了
        if not bus.is_mapped(current_addr + 1):
            break

        word = bus.peek_word(current_addr)
        operation = decode_opcode(word, current_addr)
        result.append((current_addr, operation.opcode_hex, operation.text()))
        current_addr += operation.length

    return result

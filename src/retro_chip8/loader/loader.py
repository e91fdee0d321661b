# retro_chip8/loader/loader.py
"""
コードローダーモジュール。
ヘッダを持たない生のCHIP-8プログラムイメージ（.ch8）のロードをサポートします。
"""
from pathlib import Path
from typing import Union

from retro_chip8.core.errors import RomLoadError
from retro_chip8.arch.chip8.cpu import Chip8Cpu

class RomLoader:
    """
    ROMファイルを読み込み、0x200からメモリへ配置するローダー。
    読み込みに失敗した場合はサイクル開始前にRomLoadErrorを送出します。
    空のファイルは0バイトのプログラムとして扱います。
    """
    def read_rom(self, file_path: Union[str, Path]) -> bytes:
        try:
            with open(file_path, 'rb') as f:
                image = f.read()
        except OSError as e:
            raise RomLoadError(f"Failed to read ROM file {file_path}: {e}") from e
        return image

    # @intent:responsibility ROMファイルを読み込んでCPUのメモリに配置し、配置したバイト数を返します。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        image = self.read_rom(file_path)
        cpu.load_program(image)
        return len(image)

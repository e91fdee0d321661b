# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の12bitアドレス空間（0x000-0xFFF）をデバイス領域に割り当て、
バイト単位の読み書きと、命令ワード（ビッグエンディアン16bit）の読み出しを仲介します。
命令実行によるアクセスのみが記録され、ROMの配置やインスペクタからの参照は記録されません。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple

# @intent:responsibility 記録されたアクセスの種類。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 命令実行中に発生した1バイトのアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスに接続される記憶装置のインターフェース。アドレスは領域先頭からのオフセット。
class Device(ABC):
    @abstractmethod
    def size(self) -> int:
        """デバイスが占有するバイト数。"""

    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, value: int) -> None:
        pass

# @intent:responsibility ゼロ初期化されたバイト配列としてのRAM。
class RAM(Device):
    """
    CHIP-8のメインメモリ。フォント、プログラム、作業領域が同居します。
    """
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._cells = bytearray(size)

    def size(self) -> int:
        return len(self._cells)

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset < len(self._cells):
            raise IndexError(f"Offset {offset:#05x} is outside RAM of {len(self._cells)} bytes.")

    def read(self, offset: int) -> int:
        self._check_offset(offset)
        return self._cells[offset]

    def write(self, offset: int, value: int) -> None:
        self._check_offset(offset)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Value {value!r} does not fit in one byte.")
        self._cells[offset] = value

# @intent:data_structure バス上の1つの割り当て領域（両端を含む）。
class Region(NamedTuple):
    start: int
    end: int
    device: Device

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end

# @intent:responsibility アドレスを領域へ振り分け、命令実行中のアクセスを記録します。
# @intent:rationale 記録されたアクセスはSnapshotに含まれ、デバッガのメモリ書き込みブレークポイントに使われます。
class Bus:
    def __init__(self):
        self._regions: List[Region] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility [start, end] の範囲にデバイスを割り当てます。範囲の長さはデバイスのサイズと一致する必要があります。
    def register_device(self, start: int, end: int, device: Device) -> None:
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a bus Device.")
        if start < 0 or end < start:
            raise ValueError(f"Invalid address range {start:#05x}-{end:#05x}.")
        span = end - start + 1
        if device.size() != span:
            raise ValueError(
                f"{type(device).__name__} holds {device.size()} bytes but the range "
                f"{start:#05x}-{end:#05x} spans {span} bytes."
            )
        self._regions.append(Region(start, end, device))

    def _locate(self, address: int) -> Region:
        for region in self._regions:
            if region.contains(address):
                return region
        raise IndexError(f"Address {address:#05x} is not mapped.")

    def is_mapped(self, address: int) -> bool:
        return any(region.contains(address) for region in self._regions)

    # @intent:responsibility 記録済みのアクセスを取り出し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    # --- 命令実行からのアクセス（記録される） ---

    def read(self, address: int) -> int:
        region = self._locate(address)
        value = region.device.read(address - region.start)
        self._activity.append(BusAccess(address, value, BusAccessType.READ))
        return value

    def write(self, address: int, value: int) -> None:
        region = self._locate(address)
        region.device.write(address - region.start, value)
        self._activity.append(BusAccess(address, value, BusAccessType.WRITE))

    # @intent:responsibility address, address+1 の2バイトをビッグエンディアンの命令ワードとして読み出します。
    def read_word(self, address: int) -> int:
        return (self.read(address) << 8) | self.read(address + 1)

    # --- インスペクタとローダーからのアクセス（記録されない） ---

    def peek(self, address: int) -> int:
        region = self._locate(address)
        return region.device.read(address - region.start)

    def peek_word(self, address: int) -> int:
        return (self.peek(address) << 8) | self.peek(address + 1)

    def load(self, address: int, data: Iterable[int]) -> None:
        """
        dataを address から順に書き込みます。プログラムイメージやフォントの配置に使用します。
        """
        for offset, value in enumerate(data):
            region = self._locate(address + offset)
            region.device.write(address + offset - region.start, value)

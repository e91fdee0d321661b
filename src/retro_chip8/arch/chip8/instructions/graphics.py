# src/retro_chip8/arch/chip8/instructions/graphics.py
"""
表示命令（画面クリア、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK
from .base import ExecutionContext, make_operation, reg, get_x, get_y, get_n

# --- CLS (00E0) ---
def decode_cls(word: int, address: int) -> Operation:
    return make_operation(word, "CLS", [], address)

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.display.clear()

# --- DRW Vx, Vy, nibble (DXYN) ---
def decode_drw(word: int, address: int) -> Operation:
    return make_operation(word, "DRW", [reg(get_x(word)), reg(get_y(word)), str(get_n(word))], address)

# @intent:responsibility Iから読んだNバイトのスプライトを (VX mod 64, VY mod 32) にXOR描画し、衝突をVFに報告します。
# @intent:rationale 開始座標のみ画面サイズで剰余を取り、以降の行・列は画面端でクリップします。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    display = state.display
    x = state.v[op.x] % display.width
    y = state.v[op.y] % display.height
    state.vf = 0

    # 画面下端より下の行はメモリから読み出さない
    visible_rows = min(op.n, display.height - y)
    sprite = [bus.read((state.i + row) & ADDRESS_MASK) for row in range(visible_rows)]

    if display.draw_sprite(x, y, sprite):
        state.vf = 1

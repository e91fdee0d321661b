# src/retro_chip8/arch/chip8/instructions/load.py
"""
転送命令（インデックスレジスタ、タイマ、キー入力、メモリブロック転送）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK
from retro_chip8.arch.chip8.font import glyph_address
from .base import ExecutionContext, make_operation, reg, addr12, get_x, get_nnn

# --- LD I, addr (ANNN) ---
def decode_ld_i(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["I", addr12(get_nnn(word))], address)

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.i = op.nnn

# --- LD Vx, DT (FX07) ---
def decode_ld_vx_dt(word: int, address: int) -> Operation:
    return make_operation(word, "LD", [reg(get_x(word)), "DT"], address)

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.delay_timer

# --- LD Vx, K (FX0A) ---
def decode_ld_vx_k(word: int, address: int) -> Operation:
    return make_operation(word, "LD", [reg(get_x(word)), "K"], address)

# @intent:responsibility 押下中の最小番号のキーをVXに格納します。
# @intent:rationale キーが押されていない場合はPCを巻き戻し、同じ命令を次のサイクルで再実行します（スレッドはブロックしない）。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    key = state.keypad.lowest_pressed()
    if key is None:
        state.pc = (state.pc - 2) & ADDRESS_MASK
        return
    state.v[op.x] = key

# --- LD DT, Vx (FX15) ---
def decode_ld_dt(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["DT", reg(get_x(word))], address)

def execute_ld_dt(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    ctx.timers.set_delay(state, state.v[op.x])

# --- LD ST, Vx (FX18) ---
def decode_ld_st(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["ST", reg(get_x(word))], address)

def execute_ld_st(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    ctx.timers.set_sound(state, state.v[op.x])

# --- ADD I, Vx (FX1E) ---
def decode_add_i(word: int, address: int) -> Operation:
    return make_operation(word, "ADD", ["I", reg(get_x(word))], address)

# @intent:responsibility IにVXを加算します。VFは変更しません。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# --- LD F, Vx (FX29) ---
def decode_ld_f(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["F", reg(get_x(word))], address)

# @intent:responsibility VXの下位ニブルに対応するフォントグリフのアドレスをIに設定します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.i = glyph_address(state.v[op.x])

# --- LD B, Vx (FX33) ---
def decode_ld_b(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["B", reg(get_x(word))], address)

# @intent:responsibility VXを百・十・一の位に分解し、I, I+1, I+2 に格納します。
def execute_ld_b(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    value = state.v[op.x]
    digits = (value // 100, (value // 10) % 10, value % 10)
    for offset, digit in enumerate(digits):
        bus.write((state.i + offset) & ADDRESS_MASK, digit)

# --- LD [I], Vx (FX55) ---
def decode_store(word: int, address: int) -> Operation:
    return make_operation(word, "LD", ["[I]", reg(get_x(word))], address)

# @intent:responsibility V0..VX（両端含む）をIから始まるメモリに格納します。
def execute_store(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    for index in range(op.x + 1):
        bus.write((state.i + index) & ADDRESS_MASK, state.v[index])
    if ctx.quirks.increment_index:
        state.i = (state.i + op.x + 1) & 0xFFFF

# --- LD Vx, [I] (FX65) ---
def decode_load(word: int, address: int) -> Operation:
    return make_operation(word, "LD", [reg(get_x(word)), "[I]"], address)

# @intent:responsibility Iから始まるメモリをV0..VX（両端含む）に読み込みます。
def execute_load(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    for index in range(op.x + 1):
        state.v[index] = bus.read((state.i + index) & ADDRESS_MASK)
    if ctx.quirks.increment_index:
        state.i = (state.i + op.x + 1) & 0xFFFF

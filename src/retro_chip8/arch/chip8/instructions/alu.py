# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VF（フラグレジスタ）は結果の書き込み後に設定されるため、X=F の場合はフラグ値が残ります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.quirks import ShiftQuirk
from .base import ExecutionContext, make_operation, reg, imm8, get_x, get_y, get_nn

def _xy(word: int):
    return [reg(get_x(word)), reg(get_y(word))]

# --- LD Vx, byte (6XNN) ---
def decode_ld_imm(word: int, address: int) -> Operation:
    return make_operation(word, "LD", [reg(get_x(word)), imm8(get_nn(word))], address)

def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = op.nn

# --- ADD Vx, byte (7XNN) ---
def decode_add_imm(word: int, address: int) -> Operation:
    return make_operation(word, "ADD", [reg(get_x(word)), imm8(get_nn(word))], address)

# @intent:responsibility 即値を8bitラップアラウンドで加算します。VFは変更しません。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = (state.v[op.x] + op.nn) & 0xFF

# --- LD Vx, Vy (8XY0) ---
def decode_ld_reg(word: int, address: int) -> Operation:
    return make_operation(word, "LD", _xy(word), address)

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.v[op.y]

# --- OR / AND / XOR (8XY1 / 8XY2 / 8XY3) ---
def decode_or(word: int, address: int) -> Operation:
    return make_operation(word, "OR", _xy(word), address)

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] |= state.v[op.y]

def decode_and(word: int, address: int) -> Operation:
    return make_operation(word, "AND", _xy(word), address)

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] &= state.v[op.y]

def decode_xor(word: int, address: int) -> Operation:
    return make_operation(word, "XOR", _xy(word), address)

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] ^= state.v[op.y]

# --- ADD Vx, Vy (8XY4) ---
def decode_add_reg(word: int, address: int) -> Operation:
    return make_operation(word, "ADD", _xy(word), address)

# @intent:responsibility 8bit加算を行い、符号なしオーバーフロー時にVF=1とします。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    total = state.v[op.x] + state.v[op.y]
    state.v[op.x] = total & 0xFF
    state.vf = 1 if total > 0xFF else 0

# --- SUB Vx, Vy (8XY5) ---
def decode_sub(word: int, address: int) -> Operation:
    return make_operation(word, "SUB", _xy(word), address)

# @intent:responsibility VX = VX - VY。ボローが発生しない（VX >= VY）場合にVF=1とします。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vx - vy) & 0xFF
    state.vf = 1 if vx >= vy else 0

# --- SHR Vx {, Vy} (8XY6) ---
def decode_shr(word: int, address: int) -> Operation:
    return make_operation(word, "SHR", _xy(word), address)

# @intent:responsibility 右シフトし、押し出されたbit0をVFに設定します。LEGACYではVYを先にコピーします。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if ctx.quirks.shift is ShiftQuirk.LEGACY:
        state.v[op.x] = state.v[op.y]
    value = state.v[op.x]
    state.v[op.x] = value >> 1
    state.vf = value & 0x01

# --- SUBN Vx, Vy (8XY7) ---
def decode_subn(word: int, address: int) -> Operation:
    return make_operation(word, "SUBN", _xy(word), address)

# @intent:responsibility VX = VY - VX。ボローが発生しない（VY >= VX）場合にVF=1とします。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vy - vx) & 0xFF
    state.vf = 1 if vy >= vx else 0

# --- SHL Vx {, Vy} (8XYE) ---
def decode_shl(word: int, address: int) -> Operation:
    return make_operation(word, "SHL", _xy(word), address)

# @intent:responsibility 左シフトし、押し出されたbit7をVFに設定します。LEGACYではVYを先にコピーします。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if ctx.quirks.shift is ShiftQuirk.LEGACY:
        state.v[op.x] = state.v[op.y]
    value = state.v[op.x]
    state.v[op.x] = (value << 1) & 0xFF
    state.vf = (value >> 7) & 0x01

# --- RND Vx, byte (CXNN) ---
def decode_rnd(word: int, address: int) -> Operation:
    return make_operation(word, "RND", [reg(get_x(word)), imm8(get_nn(word))], address)

def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = (ctx.random_byte() & 0xFF) & op.nn

# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.errors import StackOverflowError, StackUnderflowError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK, STACK_SIZE
from retro_chip8.arch.chip8.quirks import JumpQuirk
from .base import ExecutionContext, make_operation, reg, imm8, addr12, get_x, get_y, get_nn, get_nnn

# @intent:utility_function 次の命令を読み飛ばします。PCはフェッチ時点で既に次の命令を指しています。
def _skip(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & ADDRESS_MASK

# --- RET (00EE) ---
def decode_ret(word: int, address: int) -> Operation:
    return make_operation(word, "RET", [], address)

# @intent:responsibility コールスタックから戻り先アドレスを取り出してPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.sp == 0:
        raise StackUnderflowError(op.address, op.opcode, "return with an empty call stack")
    state.pc = state.pop()

# --- JP addr (1NNN) ---
def decode_jp(word: int, address: int) -> Operation:
    return make_operation(word, "JP", [addr12(get_nnn(word))], address)

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    state.pc = op.nnn

# --- CALL addr (2NNN) ---
def decode_call(word: int, address: int) -> Operation:
    return make_operation(word, "CALL", [addr12(get_nnn(word))], address)

# @intent:responsibility 現在のPC（次の命令）をスタックに積んでからサブルーチンへジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.sp >= STACK_SIZE:
        raise StackOverflowError(op.address, op.opcode, f"call depth exceeds {STACK_SIZE}")
    state.push(state.pc)
    state.pc = op.nnn

# --- SE Vx, byte (3XNN) ---
def decode_se_imm(word: int, address: int) -> Operation:
    return make_operation(word, "SE", [reg(get_x(word)), imm8(get_nn(word))], address)

def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == op.nn:
        _skip(state)

# --- SNE Vx, byte (4XNN) ---
def decode_sne_imm(word: int, address: int) -> Operation:
    return make_operation(word, "SNE", [reg(get_x(word)), imm8(get_nn(word))], address)

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != op.nn:
        _skip(state)

# --- SE Vx, Vy (5XY0) ---
def decode_se_reg(word: int, address: int) -> Operation:
    return make_operation(word, "SE", [reg(get_x(word)), reg(get_y(word))], address)

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == state.v[op.y]:
        _skip(state)

# --- SNE Vx, Vy (9XY0) ---
def decode_sne_reg(word: int, address: int) -> Operation:
    return make_operation(word, "SNE", [reg(get_x(word)), reg(get_y(word))], address)

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != state.v[op.y]:
        _skip(state)

# --- JP V0, addr (BNNN) ---
def decode_jp_offset(word: int, address: int) -> Operation:
    return make_operation(word, "JP", ["V0", addr12(get_nnn(word))], address)

# @intent:responsibility オフセット付きジャンプ。オフセットに使うレジスタはJumpQuirkで選択されます。
def execute_jp_offset(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    offset_reg = op.x if ctx.quirks.jump is JumpQuirk.SUPERCHIP else 0
    state.pc = (op.nnn + state.v[offset_reg]) & ADDRESS_MASK

# --- SKP Vx (EX9E) ---
def decode_skp(word: int, address: int) -> Operation:
    return make_operation(word, "SKP", [reg(get_x(word))], address)

def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if state.keypad.is_pressed(state.v[op.x] & 0x0F):
        _skip(state)

# --- SKNP Vx (EXA1) ---
def decode_sknp(word: int, address: int) -> Operation:
    return make_operation(word, "SKNP", [reg(get_x(word))], address)

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, ctx: ExecutionContext) -> None:
    if not state.keypad.is_pressed(state.v[op.x] & 0x0F):
        _skip(state)

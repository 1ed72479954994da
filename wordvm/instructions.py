"""Instruction execution for the word-width CPU emulator.

Executors never mutate the CPU. Each one resolves its operands, runs the
ALU and returns an :class:`Effect`; ``CPU.execute`` commits the effect only
after the executor returned without raising.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional
from .errors import DivisionByZero
from .parser import DecodedInstruction, Opcode
from .word import AluResult

if TYPE_CHECKING:
    from .cpu import CPU


@dataclass
class Effect:
    """Pending state change for one instruction."""
    register: Optional[str] = None
    register_value: Optional[int] = None
    memory_addr: Optional[int] = None
    memory_value: Optional[int] = None
    flags: dict[str, bool] = field(default_factory=dict)


def _alu_effect(register: str, result: AluResult, cpu: "CPU") -> Effect:
    """Register write plus ZERO/SIGN, and CARRY/OVERFLOW when defined."""
    flags = {
        "ZERO": result.zero,
        "SIGN": cpu.alu.is_negative(result.value),
    }
    if result.carry is not None:
        flags["CARRY"] = result.carry
    if result.overflow is not None:
        flags["OVERFLOW"] = result.overflow
    return Effect(register=register, register_value=result.value, flags=flags)


def _binary_operands(instr: DecodedInstruction, cpu: "CPU") -> tuple[str, int, int]:
    """Resolve 'OP Rd src' into (Rd name, Rd value, src value)."""
    dest = cpu.resolve_register(instr.operands[0])
    src = cpu.get_value(instr.operands[1])
    return dest, cpu.registers[dest], src


# Instruction executor type
InstructionExecutor = Callable[[DecodedInstruction, "CPU"], Effect]


def execute_mov(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """MOV Rd src: Rd := src"""
    dest = cpu.resolve_register(instr.operands[0])
    value = cpu.get_value(instr.operands[1])
    return Effect(register=dest, register_value=value & cpu.alu.mask)


def execute_add(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """ADD Rd src: Rd := Rd + src"""
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.add(a, b), cpu)


def execute_sub(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """SUB Rd src: Rd := Rd - src, CARRY holds the borrow"""
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.sub(a, b), cpu)


def execute_mul(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """MUL Rd src: Rd := Rd * src (wrapping)"""
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.mul(a, b), cpu)


def execute_div(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """DIV Rd src: Rd := Rd / src (unsigned, truncating)"""
    dest, a, b = _binary_operands(instr, cpu)
    if b == 0:
        raise DivisionByZero("Division by zero")
    return _alu_effect(dest, cpu.alu.div(a, b), cpu)


def execute_and(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.bitwise(a, b, "AND"), cpu)


def execute_or(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.bitwise(a, b, "OR"), cpu)


def execute_xor(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    dest, a, b = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.bitwise(a, b, "XOR"), cpu)


def execute_not(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """NOT Rd: Rd := ~Rd"""
    dest = cpu.resolve_register(instr.operands[0])
    return _alu_effect(dest, cpu.alu.bitwise(cpu.registers[dest], 0, "NOT"), cpu)


def execute_shl(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """SHL Rd n: logical shift left."""
    dest, a, amount = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.shift_left(a, amount), cpu)


def execute_shr(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """SHR Rd n: logical shift right."""
    dest, a, amount = _binary_operands(instr, cpu)
    return _alu_effect(dest, cpu.alu.shift_right(a, amount), cpu)


def execute_load(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """LOAD Rd a: Rd := MEM[a]"""
    dest = cpu.resolve_register(instr.operands[0])
    addr = cpu.get_value(instr.operands[1])
    return Effect(register=dest, register_value=cpu.memory.read(addr))


def execute_store(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """STORE Rs a: MEM[a] := Rs"""
    src = cpu.resolve_register(instr.operands[0])
    addr = cpu.get_value(instr.operands[1])
    cpu.memory.check_bounds(addr)
    return Effect(memory_addr=addr, memory_value=cpu.registers[src])


# Instruction dispatch table
INSTRUCTION_EXECUTORS: dict[Opcode, InstructionExecutor] = {
    Opcode.MOV: execute_mov,
    Opcode.ADD: execute_add,
    Opcode.SUB: execute_sub,
    Opcode.MUL: execute_mul,
    Opcode.DIV: execute_div,
    Opcode.AND: execute_and,
    Opcode.OR: execute_or,
    Opcode.XOR: execute_xor,
    Opcode.NOT: execute_not,
    Opcode.SHL: execute_shl,
    Opcode.SHR: execute_shr,
    Opcode.LOAD: execute_load,
    Opcode.STORE: execute_store,
}


def execute_instruction(instr: DecodedInstruction, cpu: "CPU") -> Effect:
    """Compute the effect of a decoded instruction without applying it."""
    executor = INSTRUCTION_EXECUTORS.get(instr.opcode)
    if executor is None:
        raise ValueError(f"No executor for opcode: {instr.opcode}")
    return executor(instr, cpu)

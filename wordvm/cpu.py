"""CPU state model and execution engine for the word-width CPU emulator."""

import logging
from dataclasses import dataclass
from typing import Optional
from .errors import ConfigurationError, ExecutionError, InvalidOperand, UnknownRegister
from .instructions import Effect, execute_instruction
from .memory import Memory
from .parser import decode, is_register_like, parse_literal
from .word import ALU, to_binary, to_hex, to_signed

logger = logging.getLogger(__name__)

FLAG_NAMES = ("ZERO", "CARRY", "OVERFLOW", "SIGN")

# Common widths; any positive width is accepted
WIDTH_PRESETS = (8, 16, 32, 64, 128, 256, 512, 1024)


@dataclass
class CPUConfig:
    """Construction parameters for a CPU."""
    width: int = 8
    register_count: int = 8
    memory_size: int = 256

    def validate(self) -> None:
        if self.width < 1:
            raise ConfigurationError(f"Width must be at least 1 bit, got {self.width}")
        if self.register_count < 1:
            raise ConfigurationError(
                f"Register count must be at least 1, got {self.register_count}"
            )
        if self.memory_size < 0:
            raise ConfigurationError(
                f"Memory size cannot be negative, got {self.memory_size}"
            )


class CPU:
    """Register file, flags, memory and program counter at a fixed width."""

    def __init__(self, width: int = 8, register_count: int = 8, memory_size: int = 256):
        CPUConfig(width, register_count, memory_size).validate()

        self.width = width
        self.register_count = register_count
        self.alu = ALU(width)
        self.memory = Memory(size=memory_size, word_bits=width)

        self.registers: dict[str, int] = {
            f"R{i}": 0 for i in range(1, register_count + 1)
        }
        self.flags: dict[str, bool] = {name: False for name in FLAG_NAMES}
        # Reserved: no instruction reads or advances it
        self.pc: int = 0

    @classmethod
    def from_config(cls, config: CPUConfig) -> "CPU":
        return cls(config.width, config.register_count, config.memory_size)

    def resolve_register(self, token: str) -> str:
        """Return the canonical register name for token."""
        name = token.upper()
        if name in self.registers:
            return name
        if is_register_like(token):
            raise UnknownRegister(f"Register {token} not found")
        raise InvalidOperand(f"Expected a register, got {token}")

    def get_value(self, token: str) -> int:
        """Resolve an operand token to a register value or raw literal."""
        if is_register_like(token):
            return self.registers[self.resolve_register(token)]
        return parse_literal(token)

    def execute(self, line: str) -> None:
        """Decode, validate and commit one instruction.

        Raises an ExecutionError subclass without touching any state if the
        instruction is rejected.
        """
        try:
            instr = decode(line)
            effect = execute_instruction(instr, self)
        except ExecutionError as e:
            logger.debug("Rejected %r: %s", line, e)
            raise
        self._commit(effect)
        logger.debug("Executed %s", instr.text)

    def _commit(self, effect: Effect) -> None:
        if effect.register is not None:
            self.registers[effect.register] = effect.register_value & self.alu.mask
        if effect.memory_addr is not None:
            self.memory.write(effect.memory_addr, effect.memory_value)
        self.flags.update(effect.flags)

    def signed(self, register: str) -> int:
        """Signed interpretation of a register."""
        return to_signed(self.registers[self.resolve_register(register)], self.width)

    def dump(self) -> dict:
        """Read-only snapshot of PC, registers and flags."""
        return {
            "width": self.width,
            "pc": self.pc,
            "registers": [
                {
                    "name": name,
                    "value": value,
                    "signed": to_signed(value, self.width),
                    "hex": to_hex(value, self.width),
                    "binary": to_binary(value, self.width),
                }
                for name, value in self.registers.items()
            ],
            "flags": dict(self.flags),
        }

    def memory_snapshot(self) -> list[int]:
        return self.memory.snapshot()

    def reset(self, pc: Optional[int] = None) -> None:
        """Zero registers, flags and memory."""
        for name in self.registers:
            self.registers[name] = 0
        for name in self.flags:
            self.flags[name] = False
        self.memory.clear()
        self.pc = (pc or 0) & self.alu.mask

"""Word-width CPU emulator core package."""

from .cpu import CPU, CPUConfig
from .runner import run_program, RunOptions, RunResult
from .errors import (
    WordVMError,
    ConfigurationError,
    ExecutionError,
    EmptyInstruction,
    UnknownInstruction,
    UnknownRegister,
    InvalidOperand,
    DivisionByZero,
    MemoryOutOfBounds,
)

__all__ = [
    "CPU",
    "CPUConfig",
    "run_program",
    "RunOptions",
    "RunResult",
    "WordVMError",
    "ConfigurationError",
    "ExecutionError",
    "EmptyInstruction",
    "UnknownInstruction",
    "UnknownRegister",
    "InvalidOperand",
    "DivisionByZero",
    "MemoryOutOfBounds",
]

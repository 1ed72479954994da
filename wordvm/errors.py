"""Custom exceptions for the word-width CPU emulator."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    source_line_no: Optional[int] = None
    source_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "source_line_no": self.source_line_no,
            "source_text": self.source_text,
        }


class WordVMError(Exception):
    """Base exception for all emulator errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        source_line_no: Optional[int] = None,
        source_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.source_line_no = source_line_no
        self.source_text = source_text

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            source_line_no=self.source_line_no,
            source_text=self.source_text,
        )


class ConfigurationError(WordVMError):
    """Invalid CPU construction parameters."""
    pass


class ExecutionError(WordVMError):
    """Instruction rejected; CPU state is unchanged."""
    pass


class EmptyInstruction(ExecutionError):
    """Instruction line has no tokens."""
    pass


class UnknownInstruction(ExecutionError):
    """Opcode token is not in the instruction set."""
    pass


class UnknownRegister(ExecutionError):
    """Operand names a register absent from the register file."""
    pass


class InvalidOperand(ExecutionError):
    """Operand is not a valid literal, or the operand count is wrong."""
    pass


class DivisionByZero(ExecutionError):
    """DIV with a zero divisor."""
    pass


class MemoryOutOfBounds(ExecutionError):
    """LOAD/STORE address outside configured memory."""
    pass

"""Instruction decoding for the word-width CPU emulator."""

import re
from dataclasses import dataclass
from enum import Enum
from .errors import EmptyInstruction, UnknownInstruction, InvalidOperand


class Opcode(Enum):
    """Closed instruction set."""
    MOV = "MOV"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NOT = "NOT"
    SHL = "SHL"
    SHR = "SHR"
    LOAD = "LOAD"
    STORE = "STORE"


# Number of operands each opcode takes
OPERAND_COUNTS: dict[Opcode, int] = {op: 2 for op in Opcode}
OPERAND_COUNTS[Opcode.NOT] = 1

_DECIMAL_LITERAL_RE = re.compile(r"^[0-9]+$")
_HEX_LITERAL_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_REGISTER_LIKE_RE = re.compile(r"^[Rr]")

# Digits converted per int() call, below the interpreter's str-to-int limit
_DECIMAL_CHUNK = 1000


@dataclass(frozen=True)
class DecodedInstruction:
    """Opcode plus raw operand tokens (trailing commas removed)."""
    opcode: Opcode
    operands: tuple[str, ...]
    text: str


def decode(text: str) -> DecodedInstruction:
    """Split an instruction line into opcode and operand tokens.

    Raises:
        EmptyInstruction: no tokens
        UnknownInstruction: opcode not in the instruction set
        InvalidOperand: wrong number of operands
    """
    parts = text.split()
    if not parts:
        raise EmptyInstruction("Empty instruction")

    mnemonic = parts[0].upper()
    try:
        opcode = Opcode(mnemonic)
    except ValueError:
        raise UnknownInstruction(f"Unknown instruction: {parts[0]}") from None

    operands = tuple(tok.rstrip(",") for tok in parts[1:])
    # "MOV R1 , 5" leaves a bare comma token
    operands = tuple(tok for tok in operands if tok)

    expected = OPERAND_COUNTS[opcode]
    if len(operands) != expected:
        raise InvalidOperand(
            f"{opcode.value} expects {expected} operand(s), got {len(operands)}"
        )

    return DecodedInstruction(opcode=opcode, operands=operands, text=" ".join(parts))


def is_register_like(token: str) -> bool:
    """True if the token is meant as a register name."""
    return bool(_REGISTER_LIKE_RE.match(token))


def parse_literal(token: str) -> int:
    """Parse decimal or 0x-prefixed hex literal, raising InvalidOperand."""
    if _HEX_LITERAL_RE.fullmatch(token):
        return int(token[2:], 16)
    if _DECIMAL_LITERAL_RE.fullmatch(token):
        return _parse_decimal(token)
    raise InvalidOperand(f"Invalid immediate value: {token}")


def strip_comment(line: str) -> str:
    """Remove comment from line."""
    idx = line.find(";")
    if idx >= 0:
        return line[:idx]
    return line


def _parse_decimal(digits: str) -> int:
    """int(digits) for any length, converted one chunk at a time."""
    value = 0
    for start in range(0, len(digits), _DECIMAL_CHUNK):
        chunk = digits[start:start + _DECIMAL_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return value

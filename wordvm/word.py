"""Width-parameterized word arithmetic.

Stored values are always unsigned magnitudes in ``[0, 2**width - 1]``.
Signed interpretation is computed on demand with :func:`to_signed` and is
never stored.

The :class:`ALU` binds a width and picks how carry and signed overflow are
detected: widths up to :data:`NATIVE_WORD_BITS` use the hardware rules
(carry-out bit, sign-bit comparison), wider words compare the unmasked
result against the mask boundary.
"""

from dataclasses import dataclass
from typing import Callable, Optional


# Widest word handled with the carry-out/sign-bit rules
NATIVE_WORD_BITS = 64


def mask(width: int) -> int:
    """Return 2**width - 1."""
    return (1 << width) - 1


def to_unsigned_masked(raw: int, width: int) -> int:
    """Truncate raw to its low width bits."""
    return raw & mask(width)


def to_signed(magnitude: int, width: int) -> int:
    """Decode a masked magnitude as a two's-complement integer."""
    if magnitude & (1 << (width - 1)):
        return magnitude - (1 << width)
    return magnitude


def sign_bit(value: int, width: int) -> bool:
    return bool((value >> (width - 1)) & 1)


def add(a: int, b: int, width: int) -> tuple[int, bool]:
    """Masked sum and carry (unmasked sum >= 2**width)."""
    total = to_unsigned_masked(a, width) + to_unsigned_masked(b, width)
    return total & mask(width), total > mask(width)


def sub(a: int, b: int, width: int) -> tuple[int, bool]:
    """Masked difference and borrow (a < b)."""
    a = to_unsigned_masked(a, width)
    b = to_unsigned_masked(b, width)
    return (a - b) & mask(width), a < b


def mul(a: int, b: int, width: int) -> int:
    """Wrapping multiply."""
    return (to_unsigned_masked(a, width) * to_unsigned_masked(b, width)) & mask(width)


def div(a: int, b: int, width: int) -> int:
    """Unsigned truncating division of the masked dividend by b.

    b is used as given, so an immediate wider than the word still divides.
    The caller rejects b == 0.
    """
    return to_unsigned_masked(a, width) // b


def bitwise(a: int, b: int, op: str, width: int) -> int:
    """AND/OR/XOR/NOT on masked operands. NOT ignores b."""
    m = mask(width)
    a &= m
    b &= m
    if op == "AND":
        return a & b
    if op == "OR":
        return a | b
    if op == "XOR":
        return a ^ b
    if op == "NOT":
        return ~a & m
    raise ValueError(f"Unknown bitwise op: {op}")


def shift_left(a: int, amount: int, width: int) -> int:
    """Logical shift left; amount >= width gives 0."""
    if amount >= width:
        return 0
    return (to_unsigned_masked(a, width) << amount) & mask(width)


def shift_right(a: int, amount: int, width: int) -> int:
    """Logical shift right; amount >= width gives 0."""
    if amount >= width:
        return 0
    return to_unsigned_masked(a, width) >> amount


def negate(a: int, width: int) -> int:
    """Two's-complement negation: ~a + 1, masked."""
    return (~to_unsigned_masked(a, width) + 1) & mask(width)


def to_binary(value: int, width: int) -> str:
    """Binary digits zero-padded to exactly width."""
    return format(to_unsigned_masked(value, width), f"0{width}b")


def to_hex(value: int, width: int) -> str:
    digits = (width + 3) // 4
    return "0x" + format(to_unsigned_masked(value, width), f"0{digits}X")


@dataclass(frozen=True)
class AluResult:
    """Masked result of one ALU operation.

    ``carry`` and ``overflow`` are None when the operation does not define
    that flag; such flags keep their previous value in the CPU.
    """
    value: int
    carry: Optional[bool] = None
    overflow: Optional[bool] = None

    @property
    def zero(self) -> bool:
        return self.value == 0


# Overflow detector signature: (a, b, result, width, subtract) -> overflow
OverflowDetector = Callable[[int, int, int, int, bool], bool]


def _native_overflow(a: int, b: int, result: int, width: int, subtract: bool) -> bool:
    """Sign-bit rule on masked operands and result."""
    sa = sign_bit(a, width)
    sb = sign_bit(b, width)
    sr = sign_bit(result, width)
    if subtract:
        return sa != sb and sr != sa
    return sa == sb and sr != sa


def _wide_overflow(a: int, b: int, result: int, width: int, subtract: bool) -> bool:
    """Compare the exact signed result against the representable range."""
    sa = to_signed(a, width)
    sb = to_signed(b, width)
    exact = sa - sb if subtract else sa + sb
    return not -(1 << (width - 1)) <= exact <= (1 << (width - 1)) - 1


class ALU:
    """Arithmetic unit bound to one word width."""

    def __init__(self, width: int):
        self.width = width
        self.mask = mask(width)
        self.wide = width > NATIVE_WORD_BITS
        self._overflow: OverflowDetector = _wide_overflow if self.wide else _native_overflow

    def _carry_out(self, unmasked: int) -> bool:
        if self.wide:
            # Pre/post mask comparison
            return (unmasked & self.mask) != unmasked
        return bool(unmasked >> self.width)

    def add(self, a: int, b: int) -> AluResult:
        a &= self.mask
        b &= self.mask
        total = a + b
        value = total & self.mask
        return AluResult(
            value=value,
            carry=self._carry_out(total),
            overflow=self._overflow(a, b, value, self.width, False),
        )

    def sub(self, a: int, b: int) -> AluResult:
        a &= self.mask
        b &= self.mask
        if self.wide:
            borrow = (a - b) < 0
        else:
            borrow = a < b
        value = (a - b) & self.mask
        return AluResult(
            value=value,
            carry=borrow,
            overflow=self._overflow(a, b, value, self.width, True),
        )

    def mul(self, a: int, b: int) -> AluResult:
        return AluResult(mul(a, b, self.width))

    def div(self, a: int, b: int) -> AluResult:
        return AluResult(div(a, b, self.width))

    def bitwise(self, a: int, b: int, op: str) -> AluResult:
        return AluResult(bitwise(a, b, op, self.width))

    def shift_left(self, a: int, amount: int) -> AluResult:
        return AluResult(shift_left(a, amount, self.width))

    def shift_right(self, a: int, amount: int) -> AluResult:
        return AluResult(shift_right(a, amount, self.width))

    def is_negative(self, value: int) -> bool:
        return sign_bit(value, self.width)

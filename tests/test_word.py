"""Tests for the word arithmetic module."""

import pytest
from wordvm.word import (
    ALU,
    AluResult,
    NATIVE_WORD_BITS,
    _native_overflow,
    _wide_overflow,
    add,
    bitwise,
    div,
    mask,
    mul,
    negate,
    shift_left,
    shift_right,
    sub,
    to_binary,
    to_hex,
    to_signed,
    to_unsigned_masked,
)


class TestMasking:
    """mask / to_unsigned_masked / to_signed."""

    def test_mask(self):
        assert mask(1) == 1
        assert mask(8) == 0xFF
        assert mask(32) == 0xFFFFFFFF
        assert mask(1024) == (1 << 1024) - 1

    def test_to_unsigned_masked(self):
        """Values are truncated to the low width bits."""
        assert to_unsigned_masked(260, 8) == 4
        assert to_unsigned_masked(255, 8) == 255
        assert to_unsigned_masked(-1, 8) == 255
        assert to_unsigned_masked(-1, 128) == (1 << 128) - 1

    def test_to_signed(self):
        assert to_signed(0, 8) == 0
        assert to_signed(127, 8) == 127
        assert to_signed(128, 8) == -128
        assert to_signed(255, 8) == -1
        assert to_signed(1, 1) == -1
        assert to_signed(1 << 1023, 1024) == -(1 << 1023)

    @pytest.mark.parametrize("width", [1, 3, 8])
    def test_signed_round_trip(self, width):
        """Re-masking a decoded magnitude yields the original magnitude."""
        for magnitude in range(1 << width):
            assert to_unsigned_masked(to_signed(magnitude, width), width) == magnitude


class TestArithmetic:
    """add / sub / mul / div."""

    def test_add_with_carry(self):
        assert add(10, 250, 8) == (4, True)
        assert add(255, 1, 8) == (0, True)

    def test_add_without_carry(self):
        assert add(1, 2, 8) == (3, False)
        assert add(127, 128, 8) == (255, False)

    def test_sub_with_borrow(self):
        assert sub(1, 2, 8) == (255, True)
        assert sub(0, 255, 8) == (1, True)

    def test_sub_without_borrow(self):
        assert sub(5, 5, 8) == (0, False)
        assert sub(200, 100, 8) == (100, False)

    def test_mul_wraps(self):
        assert mul(3, 5, 8) == 15
        assert mul(16, 16, 8) == 0
        assert mul(200, 2, 8) == 144

    def test_div_truncates(self):
        assert div(200, 3, 8) == 66
        assert div(7, 8, 8) == 0
        assert div(10, 256, 8) == 0

    def test_negate(self):
        assert negate(5, 8) == 251
        assert negate(0, 8) == 0
        assert negate(128, 8) == 128


class TestBitwise:
    """bitwise / shift_left / shift_right."""

    def test_bitwise_ops(self):
        assert bitwise(0b1100, 0b1010, "AND", 8) == 0b1000
        assert bitwise(0b1100, 0b0011, "OR", 8) == 0b1111
        assert bitwise(0b1100, 0b1010, "XOR", 8) == 0b0110

    def test_not_masks_result(self):
        assert bitwise(5, 0, "NOT", 8) == 250
        assert bitwise(0, 0, "NOT", 16) == 0xFFFF

    def test_unknown_bitwise_op(self):
        with pytest.raises(ValueError):
            bitwise(1, 1, "NAND", 8)

    def test_shift_left(self):
        assert shift_left(3, 2, 8) == 12
        assert shift_left(0x81, 1, 8) == 0x02

    def test_shift_right_is_logical(self):
        """Vacated high bits are filled with zero."""
        assert shift_right(0x80, 7, 8) == 1
        assert shift_right(0xFF, 4, 8) == 0x0F

    @pytest.mark.parametrize("amount", [8, 9, 64, 1000])
    def test_shift_by_width_or_more_is_zero(self, amount):
        assert shift_left(0xFF, amount, 8) == 0
        assert shift_right(0xFF, amount, 8) == 0


class TestRendering:
    """to_binary / to_hex."""

    def test_binary_is_zero_padded(self):
        assert to_binary(5, 8) == "00000101"
        assert to_binary(1, 1) == "1"
        assert len(to_binary(1, 1024)) == 1024

    def test_hex(self):
        assert to_hex(255, 8) == "0xFF"
        assert to_hex(10, 12) == "0x00A"
        assert to_hex(1, 1) == "0x1"


class TestALU:
    """Width-bound ALU and its carry/overflow strategies."""

    def test_path_selection(self):
        assert ALU(8).wide is False
        assert ALU(NATIVE_WORD_BITS).wide is False
        assert ALU(NATIVE_WORD_BITS + 1).wide is True
        assert ALU(1024).wide is True

    def test_add_signed_overflow(self):
        """127 + 1 overflows in 8-bit signed arithmetic."""
        result = ALU(8).add(127, 1)
        assert result == AluResult(value=128, carry=False, overflow=True)

    def test_add_carry_without_overflow(self):
        """-1 + 1 carries out but does not overflow."""
        result = ALU(8).add(255, 1)
        assert result == AluResult(value=0, carry=True, overflow=False)
        assert result.zero

    def test_add_carry_and_overflow(self):
        result = ALU(8).add(128, 128)
        assert result == AluResult(value=0, carry=True, overflow=True)

    def test_sub_overflow(self):
        assert ALU(8).sub(128, 1) == AluResult(value=127, carry=False, overflow=True)
        assert ALU(8).sub(0, 128) == AluResult(value=128, carry=True, overflow=True)

    def test_sub_borrow(self):
        assert ALU(8).sub(1, 2) == AluResult(value=255, carry=True, overflow=False)

    def test_wide_add_carry(self):
        width = 128
        result = ALU(width).add(mask(width), 1)
        assert result == AluResult(value=0, carry=True, overflow=False)

    def test_wide_add_overflow(self):
        width = 128
        result = ALU(width).add((1 << (width - 1)) - 1, 1)
        assert result.value == 1 << (width - 1)
        assert result.carry is False
        assert result.overflow is True

    def test_wide_sub_borrow(self):
        result = ALU(1024).sub(0, 1)
        assert result == AluResult(value=mask(1024), carry=True, overflow=False)

    def test_non_arithmetic_ops_leave_carry_undefined(self):
        alu = ALU(8)
        for result in (
            alu.mul(3, 4),
            alu.div(12, 4),
            alu.bitwise(1, 2, "OR"),
            alu.shift_left(1, 1),
            alu.shift_right(2, 1),
        ):
            assert result.carry is None
            assert result.overflow is None

    def test_operands_are_masked(self):
        assert ALU(8).add(256 + 1, 1).value == 2

    @pytest.mark.parametrize("subtract", [False, True])
    def test_overflow_strategies_agree(self, subtract):
        """Sign-bit rule and range comparison give identical flags."""
        width = 8
        for a in range(1 << width):
            for b in range(0, 1 << width, 3):
                exact = a - b if subtract else a + b
                result = exact & mask(width)
                assert _native_overflow(a, b, result, width, subtract) == _wide_overflow(
                    a, b, result, width, subtract
                )

    def test_is_negative(self):
        alu = ALU(8)
        assert alu.is_negative(0x80)
        assert not alu.is_negative(0x7F)

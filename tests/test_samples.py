"""Integration tests for sample scripts."""

from wordvm import run_program, RunOptions


def registers(result) -> dict:
    return {r["name"]: r["value"] for r in result.final_state["registers"]}


def test_sample_demo_8bit():
    """Overflowing add, shift, invert and mask on an 8-bit CPU."""
    code = (
        "; 8-bit demo\n"
        "MOV R1, 10\n"
        "MOV R2, 250\n"
        "ADD R1, R2   ; overflow\n"
        "SHL R1, 2\n"
        "NOT R2\n"
        "AND R1, R2\n"
    )
    result = run_program(code)
    assert result.status == "ok"
    regs = registers(result)
    assert regs["R1"] == 0
    assert regs["R2"] == 5
    assert result.final_state["flags"]["ZERO"] is True
    assert result.final_state["flags"]["CARRY"] is True


def test_sample_negative_number():
    """Build -42 by two's-complement negation and read it back signed."""
    code = "MOV R1 42\nNOT R1\nADD R1 1\nSTORE R1 0\nLOAD R2 0"
    result = run_program(code, options=RunOptions(width=16, memory_size=4))
    assert result.status == "ok"
    r2 = result.final_state["registers"][1]
    assert r2["value"] == 0xFFD6
    assert r2["signed"] == -42
    assert r2["hex"] == "0xFFD6"


def test_sample_1024bit_counter():
    """Wide registers wrap at 2**1024."""
    code = "MOV R1 1\nSHL R1 1023\nMOV R2 R1\nSUB R2 1\nADD R1 R2\nADD R1 1"
    result = run_program(code, options=RunOptions(width=1024, register_count=16, memory_size=1024))
    assert result.status == "ok"
    regs = registers(result)
    assert regs["R1"] == 0
    assert result.final_state["flags"]["CARRY"] is True
    assert len(result.final_state["registers"]) == 16


def test_sample_hex_masks():
    """Extract nibbles from a 32-bit word."""
    code = "MOV R1 0xDEADBEEF\nMOV R2 R1\nSHR R2 28\nAND R1 0xF"
    result = run_program(code, options=RunOptions(width=32))
    regs = registers(result)
    assert regs["R2"] == 0xD
    assert regs["R1"] == 0xF

"""Script runner with tracing for the word-width CPU emulator."""

import logging
from dataclasses import dataclass, field
from typing import Optional
from .cpu import CPU, CPUConfig
from .errors import WordVMError, ErrorInfo
from .parser import strip_comment

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Options for script execution."""
    width: int = 8
    register_count: int = 8
    memory_size: int = 256
    stop_on_error: bool = True
    trace: bool = True
    trace_watch: list[int] = field(default_factory=list)
    initial_registers: dict[str, int] = field(default_factory=dict)
    initial_memory: dict[int, int] = field(default_factory=dict)

    def cpu_config(self) -> CPUConfig:
        return CPUConfig(
            width=self.width,
            register_count=self.register_count,
            memory_size=self.memory_size,
        )


@dataclass
class TraceRow:
    """Single row of execution trace."""
    step: int
    line_no: int
    instr_text: str
    registers: dict[str, int]
    flags: dict[str, bool]
    mem: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "line_no": self.line_no,
            "instr_text": self.instr_text,
            "registers": self.registers,
            "flags": self.flags,
            "mem": self.mem,
        }


@dataclass
class RunResult:
    """Result of script execution."""
    status: str  # "ok" | "error"
    steps_executed: int
    final_state: dict
    memory: list[int]
    trace_watch: list[int]
    trace: list[dict]
    errors: list[ErrorInfo] = field(default_factory=list)

    @property
    def error(self) -> Optional[ErrorInfo]:
        """First error, if any."""
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "steps_executed": self.steps_executed,
            "final_state": self.final_state,
            "memory": self.memory,
            "trace_watch": self.trace_watch,
            "trace": self.trace,
        }
        if self.errors:
            result["error"] = self.errors[0].to_dict()
            result["errors"] = [e.to_dict() for e in self.errors]
        return result


def _setup_cpu(options: RunOptions) -> CPU:
    cpu = CPU.from_config(options.cpu_config())
    for name, value in options.initial_registers.items():
        reg = cpu.resolve_register(name)
        cpu.registers[reg] = value & cpu.alu.mask
    for addr, value in options.initial_memory.items():
        cpu.memory.write(addr, value)
    return cpu


def run_program(program_text: str, options: Optional[RunOptions] = None) -> RunResult:
    """Run an instruction script line by line.

    Args:
        program_text: One instruction per line, ';' starts a comment
        options: CPU configuration and tracing options

    Returns:
        RunResult with final CPU dump, memory, trace and any errors
    """
    if options is None:
        options = RunOptions()

    trace_rows: list[dict] = []
    errors: list[ErrorInfo] = []
    steps_executed = 0
    watch = sorted(set(options.trace_watch))

    try:
        cpu = _setup_cpu(options)
    except WordVMError as e:
        return RunResult(
            status="error",
            steps_executed=0,
            final_state={},
            memory=[],
            trace_watch=watch,
            trace=[],
            errors=[e.to_error_info()],
        )

    for line_no, line in enumerate(program_text.split("\n"), 1):
        text = strip_comment(line).strip()
        if not text:
            continue

        try:
            cpu.execute(text)
        except WordVMError as e:
            e.step = steps_executed + 1
            e.source_line_no = line_no
            e.source_text = line.strip()
            errors.append(e.to_error_info())
            if options.stop_on_error:
                break
            continue

        steps_executed += 1

        if options.trace:
            row = TraceRow(
                step=steps_executed,
                line_no=line_no,
                instr_text=text,
                registers=dict(cpu.registers),
                flags=dict(cpu.flags),
                mem=cpu.memory.get_watched(watch),
            )
            trace_rows.append(row.to_dict())

    logger.info(
        "Run finished: %d step(s), %d error(s), width=%d",
        steps_executed,
        len(errors),
        cpu.width,
    )

    return RunResult(
        status="ok" if not errors else "error",
        steps_executed=steps_executed,
        final_state=cpu.dump(),
        memory=cpu.memory_snapshot(),
        trace_watch=watch,
        trace=trace_rows,
        errors=errors,
    )

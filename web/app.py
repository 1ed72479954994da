"""FastAPI web adapter for the word-width CPU emulator."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wordvm import run_program, RunOptions


logger = logging.getLogger(__name__)

# Constants
MAX_PROGRAM_SIZE = 50 * 1024  # 50KB


# Request/Response models
class RunOptionsModel(BaseModel):
    width: int = Field(default=8, ge=1, le=4096)
    register_count: int = Field(default=8, ge=1, le=256)
    memory_size: int = Field(default=256, ge=0, le=65536)
    stop_on_error: bool = True
    trace: bool = True
    trace_watch: list[int] = Field(default_factory=list)
    initial_registers: dict[str, int] = Field(default_factory=dict)
    initial_memory: dict[str, int] = Field(default_factory=dict)


class RunRequest(BaseModel):
    program: str
    options: Optional[RunOptionsModel] = None


class RunResponse(BaseModel):
    status: str
    steps_executed: int
    final_state: dict
    memory: list[int]
    trace_watch: list[int]
    trace: list[dict]
    error: Optional[dict] = None
    errors: Optional[list[dict]] = None


# Create FastAPI app
app = FastAPI(
    title="Word CPU Emulator",
    description="Web API for executing configurable-width CPU instruction scripts",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    """Execute an instruction script on a fresh CPU.

    Args:
        request: Script text and CPU/tracing options

    Returns:
        Execution result with final dump, memory and trace
    """
    # Validate program size
    if len(request.program) > MAX_PROGRAM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Program size exceeds limit of {MAX_PROGRAM_SIZE} bytes",
        )

    opts = request.options or RunOptionsModel()

    # Convert initial_memory keys from string to int
    initial_memory = {}
    for k, v in opts.initial_memory.items():
        try:
            initial_memory[int(k)] = v
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid memory address key: {k}",
            )

    run_opts = RunOptions(
        width=opts.width,
        register_count=opts.register_count,
        memory_size=opts.memory_size,
        stop_on_error=opts.stop_on_error,
        trace=opts.trace,
        trace_watch=opts.trace_watch,
        initial_registers=opts.initial_registers,
        initial_memory=initial_memory,
    )

    result = run_program(request.program, options=run_opts)
    logger.info("POST /api/run -> %s (%d steps)", result.status, result.steps_executed)

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .cells import cell_for_width
from .program import Program
from .vm import VirtualMachine


@dataclass(frozen=True)
class RunOptions:
    tape_size: int = 0  # 0 selects the default of 30000 cells
    elastic: bool = False
    cell_width: int = 8

    def __post_init__(self) -> None:
        if self.tape_size < 0:
            raise ValueError(f"tape_size must not be negative, got {self.tape_size}")
        cell_for_width(self.cell_width)


@dataclass(frozen=True)
class RunResult:
    output: bytes
    pointer: int
    tape_length: int


def load_program(path: str | Path, *, encoding: str = "utf-8") -> Program:
    """Read and resolve a program file."""
    program = Program.from_file(path, encoding=encoding)
    program.check_syntax()
    return program


def make_vm(program: Program, options: Optional[RunOptions] = None) -> VirtualMachine:
    opts = options or RunOptions()
    return VirtualMachine(
        program,
        tape_size=opts.tape_size,
        elastic=opts.elastic,
        cell=cell_for_width(opts.cell_width),
    )


def run_program(program: Program, input: bytes = b"", *, options: Optional[RunOptions] = None) -> RunResult:
    if not program.is_resolved:
        program.check_syntax()
    vm = make_vm(program, options)
    out = io.BytesIO()
    vm.run(io.BytesIO(input), out)
    return RunResult(output=out.getvalue(), pointer=vm.pointer, tape_length=len(vm.tape))


def run_string(source: str, input: bytes = b"", *, options: Optional[RunOptions] = None) -> RunResult:
    return run_program(Program.from_source(source), input, options=options)


def run_file(path: str | Path, input: bytes = b"", *, options: Optional[RunOptions] = None, encoding: str = "utf-8") -> RunResult:
    return run_program(load_program(path, encoding=encoding), input, options=options)

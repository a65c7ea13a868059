"""Virtual machine that executes a resolved :class:`~bft.program.Program`.

The machine owns a tape of cells, a pointer into it and a program counter.
Each instruction handler returns the next program counter or raises a
:class:`~bft.errors.VMError`; the first error aborts the run.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Dict

import numpy as np

from .cells import U8, Cell
from .errors import BrokenHead, BrokenLoop, HeadOutOfMemory, VMIOError
from .program import Instruction, Program, RawInstruction

logger = logging.getLogger(__name__)

DEFAULT_TAPE_SIZE = 30000

Handler = Callable[[int, Instruction, BinaryIO, BinaryIO], int]


class VirtualMachine:
    def __init__(self, program: Program, tape_size: int = 0, elastic: bool = False, cell: Cell = U8):
        if tape_size < 0:
            raise ValueError(f"tape_size must not be negative, got {tape_size}")
        self.program = program
        self.cell = cell
        self.elastic = elastic
        self.tape_size = tape_size or DEFAULT_TAPE_SIZE
        self.tape = np.full(self.tape_size, cell.zero(), dtype=cell.dtype)
        self.pointer = 0
        self.pc = 0

        self._handlers: Dict[RawInstruction, Handler] = {
            RawInstruction.MOVE_LEFT: self._move_left,
            RawInstruction.MOVE_RIGHT: self._move_right,
            RawInstruction.INCREMENT: self._increment,
            RawInstruction.DECREMENT: self._decrement,
            RawInstruction.INPUT: self._input,
            RawInstruction.OUTPUT: self._output,
            RawInstruction.BEGIN_LOOP: self._begin_loop,
            RawInstruction.END_LOOP: self._end_loop,
        }

    def __repr__(self) -> str:
        return (
            f"VirtualMachine(tape={len(self.tape)}, pointer={self.pointer}, "
            f"pc={self.pc}, elastic={self.elastic}, cell={self.cell!r})"
        )

    @property
    def current_cell(self):
        return self.tape[self.pointer]

    def reset(self) -> None:
        """Zero the tape at its configured size and rewind pointer and pc."""
        self.tape = np.full(self.tape_size, self.cell.zero(), dtype=self.cell.dtype)
        self.pointer = 0
        self.pc = 0

    # ---------------- Execution ----------------
    def step(self, input: BinaryIO, output: BinaryIO) -> bool:
        """Execute one instruction. Returns False once the program is done."""
        instructions = self.program.instructions
        if self.pc >= len(instructions):
            return False
        inst = instructions[self.pc]
        self.pc = self._handlers[inst.raw](self.pc, inst, input, output)
        return self.pc < len(instructions)

    def run(self, input: BinaryIO, output: BinaryIO) -> None:
        """Run until the program counter passes the last instruction."""
        instructions = self.program.instructions
        handlers = self._handlers
        count = len(instructions)
        logger.debug("running %r on %r", self.program, self)
        while self.pc < count:
            inst = instructions[self.pc]
            self.pc = handlers[inst.raw](self.pc, inst, input, output)
        logger.debug("finished with pointer=%d tape=%d", self.pointer, len(self.tape))

    interpret = run

    # ---------------- Handlers ----------------
    def _move_left(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        if self.pointer == 0:
            raise HeadOutOfMemory(instruction=inst)
        self.pointer -= 1
        return pc + 1

    def _move_right(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        if self.pointer >= len(self.tape) - 1:
            if not self.elastic:
                raise HeadOutOfMemory(instruction=inst)
            grown = np.array([self.cell.zero()], dtype=self.cell.dtype)
            self.tape = np.concatenate((self.tape, grown))
            logger.debug("tape grew to %d cells", len(self.tape))
        self.pointer += 1
        return pc + 1

    def _check_head(self, inst: Instruction) -> None:
        if not 0 <= self.pointer < len(self.tape):
            raise BrokenHead(instruction=inst)

    def _increment(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        self._check_head(inst)
        self.tape[self.pointer] = self.cell.increment(self.tape[self.pointer])
        return pc + 1

    def _decrement(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        self._check_head(inst)
        self.tape[self.pointer] = self.cell.decrement(self.tape[self.pointer])
        return pc + 1

    def _input(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        self._check_head(inst)
        try:
            value = self.cell.read(input)
        except (OSError, EOFError) as exc:
            raise VMIOError(instruction=inst, cause=exc) from exc
        self.tape[self.pointer] = value
        return pc + 1

    def _output(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        self._check_head(inst)
        try:
            self.cell.write(output, self.tape[self.pointer])
            output.flush()
        except OSError as exc:
            raise VMIOError(instruction=inst, cause=exc) from exc
        return pc + 1

    def _jump_target(self, pc: int, inst: Instruction) -> int:
        target = self.program.matching_bracket(pc)
        if target is None:
            raise BrokenLoop(instruction=inst)
        return target

    def _begin_loop(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        target = self._jump_target(pc, inst)
        self._check_head(inst)
        if self.tape[self.pointer] == 0:
            # past the partner "]", which would otherwise bounce straight back here
            return target + 1
        return pc + 1

    def _end_loop(self, pc: int, inst: Instruction, input: BinaryIO, output: BinaryIO) -> int:
        return self._jump_target(pc, inst)

"""Program representation and loop-bracket resolution.

A program is the ordered list of instructions found in a source text. Any
character that is not one of the eight instruction symbols is a comment.
Before a program can be executed its loop brackets must be resolved with
:meth:`Program.check_syntax`, which records the partner of every ``[`` and
``]`` so that loop jumps are table lookups at run time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import UnclosedLoop, UnopenedLoop

logger = logging.getLogger(__name__)


class RawInstruction(Enum):
    MOVE_LEFT = '<'
    MOVE_RIGHT = '>'
    INCREMENT = '+'
    DECREMENT = '-'
    INPUT = ','
    OUTPUT = '.'
    BEGIN_LOOP = '['
    END_LOOP = ']'

    @classmethod
    def from_char(cls, ch: str) -> Optional[RawInstruction]:
        return _BY_SYMBOL.get(ch)


_BY_SYMBOL: Dict[str, RawInstruction] = {raw.value: raw for raw in RawInstruction}


@dataclass(frozen=True)
class Instruction:
    raw: RawInstruction
    row: int  # 1-based
    column: int  # 1-based

    def __str__(self) -> str:
        return self.raw.value


def extract_instructions(text: str) -> List[Instruction]:
    out: List[Instruction] = []
    for row, line in enumerate(text.split('\n'), start=1):
        for column, ch in enumerate(line, start=1):
            raw = RawInstruction.from_char(ch)
            if raw is not None:
                out.append(Instruction(raw, row, column))
    return out


class Program:
    def __init__(self, instructions: List[Instruction], filename: Optional[str | Path] = None):
        self._instructions: Tuple[Instruction, ...] = tuple(instructions)
        self._loop_gotos: Dict[int, int] = {}
        self._resolved = False
        self.filename = Path(filename) if filename is not None else None

    # ---------------- Construction ----------------
    extract_instructions = staticmethod(extract_instructions)

    @classmethod
    def from_source(cls, text: str, filename: Optional[str | Path] = None) -> Program:
        program = cls(extract_instructions(text), filename)
        logger.debug("loaded %d instructions from %s", len(program), filename or "<string>")
        return program

    @classmethod
    def from_file(cls, path: str | Path, *, encoding: str = "utf-8") -> Program:
        p = Path(path)
        return cls.from_source(p.read_text(encoding=encoding), p)

    # ---------------- Accessors ----------------
    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return self._instructions

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def __len__(self) -> int:
        return len(self._instructions)

    def __repr__(self) -> str:
        return f"Program(filename={self.filename!r}, instructions={len(self)}, resolved={self._resolved})"

    def matching_bracket(self, index: int) -> Optional[int]:
        """Return the index of the bracket paired with ``index``, if any."""
        return self._loop_gotos.get(index)

    # ---------------- Resolution ----------------
    def check_syntax(self) -> None:
        """Pair up loop brackets.

        Raises UnopenedLoop for a ``]`` with no pending ``[``, and UnclosedLoop
        for the innermost ``[`` still open at the end of the program. On
        failure the jump table is left empty.
        """
        self._loop_gotos = {}
        self._resolved = False

        gotos: Dict[int, int] = {}
        pending: List[int] = []
        for index, inst in enumerate(self._instructions):
            if inst.raw is RawInstruction.BEGIN_LOOP:
                pending.append(index)
            elif inst.raw is RawInstruction.END_LOOP:
                if not pending:
                    raise UnopenedLoop(instruction=inst)
                begin = pending.pop()
                gotos[begin] = index
                gotos[index] = begin

        if pending:
            raise UnclosedLoop(instruction=self._instructions[pending[-1]])

        self._loop_gotos = gotos
        self._resolved = True
        logger.debug("resolved %d loop(s) in %s", len(gotos) // 2, self.filename or "<string>")

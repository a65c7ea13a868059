from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .program import Instruction


def _build_context(lines: List[str], row: int, column: int, *, context: int = 2) -> str:
    if not lines:
        return ""
    idx = min(max(1, row), len(lines))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx and column >= 1:
            out.append(f"  {'':4s} | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(err: BFTError) -> Optional[str]:
    if isinstance(err, UnclosedLoop):
        return 'Every "[" needs a matching "]" later in the program.'
    if isinstance(err, UnopenedLoop):
        return 'Remove the extra "]" or add a "[" before it.'
    if isinstance(err, HeadOutOfMemory):
        return 'Use a larger tape (--cells) or an elastic tape (--extensible).'
    if isinstance(err, VMIOError) and isinstance(err.cause, EOFError):
        return 'The program read more input bytes than were provided.'
    return None


@dataclass
class BFTError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(kw_only=True)
class ProgramError(BFTError):
    """Syntax error found while resolving loop brackets."""

    instruction: Instruction

    def __str__(self) -> str:
        return f"{self.message} at row {self.instruction.row} column {self.instruction.column}"


@dataclass
class UnclosedLoop(ProgramError):
    message: str = "Found unclosed bracket"


@dataclass
class UnopenedLoop(ProgramError):
    message: str = "Couldn't find matching opening bracket for bracket"


@dataclass(kw_only=True)
class VMError(BFTError):
    """Runtime error raised while a virtual machine executes a program."""

    instruction: Instruction

    def __str__(self) -> str:
        return f"{self.message} at row {self.instruction.row} column {self.instruction.column}"


@dataclass
class HeadOutOfMemory(VMError):
    message: str = "Head moved out of memory"


@dataclass
class BrokenHead(VMError):
    message: str = "Head points outside of memory"


@dataclass
class BrokenLoop(VMError):
    message: str = "No matching bracket recorded for loop"


@dataclass
class VMIOError(VMError):
    message: str = "I/O error"
    cause: Optional[BaseException] = field(default=None)

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is None:
            return base
        detail = str(self.cause) or type(self.cause).__name__
        return f"{base}: {detail}"


def format_error(err: BFTError, source: Optional[str] = None) -> str:
    """Render ``err`` with a window of the offending source and a hint."""
    text = str(err)
    instruction = getattr(err, 'instruction', None)
    if source is not None and instruction is not None:
        ctx = _build_context(source.split('\n'), instruction.row, instruction.column)
        if ctx:
            text = f"{text}\n{ctx}"
    hint = _hint_for(err)
    if hint:
        text = f"{text}\nHint: {hint}"
    return text

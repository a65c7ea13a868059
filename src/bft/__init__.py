
from .program import Instruction, Program, RawInstruction, extract_instructions
from .vm import DEFAULT_TAPE_SIZE, VirtualMachine
from .cells import CELL_WIDTHS, U8, U16, U32, Cell, IntCell, cell_for_width
from .errors import (
    BFTError,
    BrokenHead,
    BrokenLoop,
    HeadOutOfMemory,
    ProgramError,
    UnclosedLoop,
    UnopenedLoop,
    VMError,
    VMIOError,
    format_error,
)
from .api import RunOptions, RunResult, load_program, make_vm, run_file, run_program, run_string

__all__ = [
    'Instruction',
    'Program',
    'RawInstruction',
    'extract_instructions',
    'DEFAULT_TAPE_SIZE',
    'VirtualMachine',
    'CELL_WIDTHS',
    'U8',
    'U16',
    'U32',
    'Cell',
    'IntCell',
    'cell_for_width',
    'BFTError',
    'BrokenHead',
    'BrokenLoop',
    'HeadOutOfMemory',
    'ProgramError',
    'UnclosedLoop',
    'UnopenedLoop',
    'VMError',
    'VMIOError',
    'format_error',
    'RunOptions',
    'RunResult',
    'load_program',
    'make_vm',
    'run_file',
    'run_program',
    'run_string',
]

from .assembler import AssemblyState, BlockAssembler, assemble_block
from .core import LcatApp, RunResult
from .processor import FileProcessor

__all__ = [
    "AssemblyState",
    "BlockAssembler",
    "FileProcessor",
    "LcatApp",
    "RunResult",
    "assemble_block",
]

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from lcat.spec import (
    ClassDoc,
    CommentBlock,
    Declaration,
    DeclarationKind,
    DocumentedFile,
    FunctionDoc,
)

from .assembler import BlockAssembler

log = logging.getLogger(__name__)

TABLE_KINDS = (DeclarationKind.TABLE, DeclarationKind.VARIABLE)


class FileProcessor:
    """
    Assembles every comment block of one file, in source order.

    Besides running the assembler it keeps the two pieces of state that span
    blocks: whether a standalone `@lcat nodoc` has ended the file's
    documentation, and which class each Lua table stands for, so that
    functions declared on the table are listed as that class's methods.
    """

    def __init__(self, assembler: Optional[BlockAssembler] = None):
        self.assembler = assembler or BlockAssembler()

    def process(self, blocks: List[CommentBlock], path: str) -> DocumentedFile:
        documented = DocumentedFile(path=path)
        table_classes: Dict[str, str] = {}

        for block in blocks:
            result = self.assembler.assemble(block)
            documented.diagnostics.extend(result.diagnostics)

            if result.suppress_rest:
                documented.suppressed_from = block.start_line
                log.debug(f"{path}: suppressed from line {block.start_line}")
                break

            declaration = block.declaration
            for entity in result.entities:
                if isinstance(entity, ClassDoc) and declaration is not None:
                    if declaration.kind in TABLE_KINDS:
                        table_classes[self._table_name(declaration)] = entity.name
                if isinstance(entity, FunctionDoc):
                    entity = self._bind(entity, table_classes)
                documented.entities.append(entity)

        return documented

    @staticmethod
    def _table_name(declaration: Declaration) -> str:
        if declaration.table:
            return f"{declaration.table}.{declaration.name}"
        return declaration.name

    @staticmethod
    def _bind(function: FunctionDoc, table_classes: Dict[str, str]) -> FunctionDoc:
        if function.table and function.table in table_classes:
            return replace(function, table=table_classes[function.table])
        return function

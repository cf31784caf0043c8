import logging
import re
from typing import List, Optional, Tuple

from lcat.spec import CommentBlock, Declaration, DeclarationKind

log = logging.getLogger(__name__)

DOC_LEADER = "---"
COMMENT_LEADER = "--"

_NAME = r"[A-Za-z_][\w]*(?:\.[A-Za-z_][\w]*)*"

FUNCTION_DECL_RE = re.compile(
    rf"^(?:local\s+)?function\s+({_NAME}(?::[A-Za-z_][\w]*)?)\s*\(([^)]*)\)"
)
FUNCTION_ASSIGN_RE = re.compile(
    rf"^(?:local\s+)?({_NAME})\s*=\s*function\s*\(([^)]*)\)"
)
TABLE_RE = re.compile(rf"^(?:local\s+)?({_NAME})\s*=\s*\{{")
VARIABLE_RE = re.compile(rf"^(?:local\s+)?({_NAME})\s*=")


def _split_params(params: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in params.split(",") if p.strip())


def _split_path(path: str) -> Tuple[Optional[str], str, bool]:
    if ":" in path:
        table, name = path.rsplit(":", 1)
        return table, name, True
    if "." in path:
        table, name = path.rsplit(".", 1)
        return table, name, False
    return None, path, False


def harvest_declaration(line: str, line_number: int = 0) -> Declaration:
    """
    Reads the name of the item a comment block documents.

    Only the shape of the single declaration line is inspected; the code
    itself is never interpreted.
    """
    code = line.strip()

    match = FUNCTION_DECL_RE.match(code)
    if match:
        table, name, is_method = _split_path(match.group(1))
        return Declaration(
            kind=DeclarationKind.FUNCTION,
            name=name,
            table=table,
            is_method=is_method,
            params=_split_params(match.group(2)),
            line=line_number,
        )

    match = FUNCTION_ASSIGN_RE.match(code)
    if match:
        table, name, _ = _split_path(match.group(1))
        return Declaration(
            kind=DeclarationKind.FUNCTION,
            name=name,
            table=table,
            params=_split_params(match.group(2)),
            line=line_number,
        )

    match = TABLE_RE.match(code)
    if match:
        return Declaration(
            kind=DeclarationKind.TABLE, name=match.group(1), line=line_number
        )

    match = VARIABLE_RE.match(code)
    if match:
        table, name, _ = _split_path(match.group(1))
        return Declaration(
            kind=DeclarationKind.VARIABLE, name=name, table=table, line=line_number
        )

    return Declaration(kind=DeclarationKind.OTHER, name=code, line=line_number)


def _strip_doc_leader(line: str) -> str:
    text = line.lstrip()[len(DOC_LEADER) :]
    # `--- text` and `---text` read the same.
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


class LuaCommentScanner:
    """Splits Lua source into `---` comment blocks and the lines they document."""

    def scan(self, source_code: str) -> List[CommentBlock]:
        lines = source_code.splitlines()
        blocks: List[CommentBlock] = []

        index = 0
        while index < len(lines):
            if not lines[index].lstrip().startswith(DOC_LEADER):
                index += 1
                continue

            start = index
            comments: List[str] = []
            # Plain `--` comments inside a run are skipped, not block breakers.
            while index < len(lines) and lines[index].lstrip().startswith(
                COMMENT_LEADER
            ):
                if lines[index].lstrip().startswith(DOC_LEADER):
                    comments.append(_strip_doc_leader(lines[index]))
                index += 1

            declaration = None
            if index < len(lines) and lines[index].strip():
                declaration = harvest_declaration(lines[index], index + 1)

            blocks.append(
                CommentBlock(
                    lines=tuple(comments),
                    declaration=declaration,
                    start_line=start + 1,
                )
            )

        log.debug(f"Found {len(blocks)} comment blocks")
        return blocks


def scan_comment_blocks(source_code: str) -> List[CommentBlock]:
    return LuaCommentScanner().scan(source_code)

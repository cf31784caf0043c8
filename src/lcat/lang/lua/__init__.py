from .type_parser import TypeParser, parse_type, parse_type_prefix
from .annotation_parser import (
    parse_alias_variant,
    parse_annotation,
    parse_line,
)
from .scanner import LuaCommentScanner, harvest_declaration, scan_comment_blocks

__all__ = [
    "TypeParser",
    "parse_type",
    "parse_type_prefix",
    "parse_alias_variant",
    "parse_annotation",
    "parse_line",
    "LuaCommentScanner",
    "harvest_declaration",
    "scan_comment_blocks",
]

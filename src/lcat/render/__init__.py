from .links import TypeLinker
from .markdown import MarkdownRenderer, escape_angle_brackets

__all__ = ["MarkdownRenderer", "TypeLinker", "escape_angle_brackets"]

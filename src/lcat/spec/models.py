from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .annotations import Scope
from .types import TypeExpr


# --- Scanner Output ---


class DeclarationKind(str, Enum):
    FUNCTION = "function"
    TABLE = "table"  # `local Foo = {}`
    VARIABLE = "variable"  # any other assignment
    OTHER = "other"  # code that is none of the above, kept verbatim as the name


@dataclass(frozen=True)
class Declaration:
    kind: DeclarationKind
    name: str
    table: Optional[str] = None  # `Foo` in `function Foo.bar()` / `Foo:bar()`
    is_method: bool = False
    params: Tuple[str, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class CommentBlock:
    # Comment lines with the `---` leader already stripped.
    lines: Tuple[str, ...]
    declaration: Optional[Declaration] = None
    start_line: int = 1

    @property
    def is_standalone(self) -> bool:
        return self.declaration is None


# --- Documentation Entities ---


@dataclass(frozen=True)
class FieldDoc:
    key: Union[str, TypeExpr]
    type: TypeExpr
    nullable: bool = False
    scope: Scope = Scope.PUBLIC
    description: str = ""

    @property
    def display_key(self) -> str:
        if isinstance(self.key, str):
            return self.key
        return f"[{self.key}]"


@dataclass(frozen=True)
class SeeDoc:
    name: str
    description: str = ""


@dataclass(frozen=True)
class ClassDoc:
    name: str
    exact: bool = False
    parent: Optional[TypeExpr] = None
    fields: Tuple[FieldDoc, ...] = ()
    description: str = ""
    sees: Tuple[SeeDoc, ...] = ()


@dataclass(frozen=True)
class AliasVariantDoc:
    type: TypeExpr
    description: str = ""


@dataclass(frozen=True)
class DirectAlias:
    type: TypeExpr


@dataclass(frozen=True)
class EnumeratedAlias:
    variants: Tuple[AliasVariantDoc, ...] = ()


@dataclass(frozen=True)
class AliasDoc:
    name: str
    definition: Union[DirectAlias, EnumeratedAlias]
    description: str = ""


@dataclass(frozen=True)
class ParamDoc:
    name: str
    type: TypeExpr
    nullable: bool = False
    description: str = ""


@dataclass(frozen=True)
class ReturnDoc:
    type: TypeExpr
    name: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class FunctionDoc:
    name: str
    params: Tuple[ParamDoc, ...] = ()
    returns: Tuple[ReturnDoc, ...] = ()
    description: str = ""
    table: Optional[str] = None
    is_method: bool = False
    sees: Tuple[SeeDoc, ...] = ()

    @property
    def qualified_name(self) -> str:
        if not self.table:
            return self.name
        connector = ":" if self.is_method else "."
        return f"{self.table}{connector}{self.name}"


@dataclass(frozen=True)
class EnumDoc:
    name: str
    keyed: bool = False
    description: str = ""


Entity = Union[ClassDoc, AliasDoc, FunctionDoc, EnumDoc]


# --- Diagnostics ---


class DiagnosticKind(str, Enum):
    MALFORMED_TYPE = "malformed-type"
    MALFORMED_ANNOTATION = "malformed-annotation"
    UNRESOLVED_CONTINUATION = "unresolved-continuation"
    ORPHAN_ANNOTATION = "orphan-annotation"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    line: Optional[int] = None  # best-effort, 1-based
    snippet: str = ""


# --- Results ---


@dataclass
class BlockResult:
    entities: List[Entity] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    # Set when a standalone suppression marker ends documentation for the file.
    suppress_rest: bool = False


@dataclass
class DocumentedFile:
    path: str
    entities: List[Entity] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    suppressed_from: Optional[int] = None  # line of a file-wide suppression marker


class Metatype(str, Enum):
    CLASS = "class"
    ALIAS = "alias"
    ENUM = "enum"


@dataclass
class DocIndex:
    """All entities of a run, grouped by kind for rendering."""

    classes: List[ClassDoc] = field(default_factory=list)
    aliases: List[AliasDoc] = field(default_factory=list)
    enums: List[EnumDoc] = field(default_factory=list)
    functions: List[FunctionDoc] = field(default_factory=list)

    @classmethod
    def from_files(cls, files: List[DocumentedFile]) -> "DocIndex":
        index = cls()
        for documented in files:
            for entity in documented.entities:
                if isinstance(entity, ClassDoc):
                    index.classes.append(entity)
                elif isinstance(entity, AliasDoc):
                    index.aliases.append(entity)
                elif isinstance(entity, EnumDoc):
                    index.enums.append(entity)
                else:
                    index.functions.append(entity)
        return index

    @property
    def lookup(self) -> Dict[str, Metatype]:
        names: Dict[str, Metatype] = {}
        for class_doc in self.classes:
            names[class_doc.name] = Metatype.CLASS
        for alias in self.aliases:
            names[alias.name] = Metatype.ALIAS
        for enum in self.enums:
            names[enum.name] = Metatype.ENUM
        return names

    def methods_of(self, class_name: str) -> List[FunctionDoc]:
        return [f for f in self.functions if f.table == class_name]

    def free_functions(self) -> List[FunctionDoc]:
        class_names = {c.name for c in self.classes}
        return [f for f in self.functions if f.table not in class_names]

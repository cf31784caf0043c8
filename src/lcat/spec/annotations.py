from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .types import TypeExpr


class Scope(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = "package"


@dataclass(frozen=True)
class ClassAnnotation:
    name: str
    exact: bool = False
    parent: Optional[TypeExpr] = None


@dataclass(frozen=True)
class FieldAnnotation:
    key: Union[str, TypeExpr]  # str for `name`, a type for `[K]`
    type: TypeExpr
    nullable: bool = False
    scope: Optional[Scope] = None  # None when no scope keyword was written
    trailing: str = ""


@dataclass(frozen=True)
class ParamAnnotation:
    name: str
    type: TypeExpr
    nullable: bool = False
    trailing: str = ""


@dataclass(frozen=True)
class ReturnAnnotation:
    type: TypeExpr
    name: Optional[str] = None
    trailing: str = ""


@dataclass(frozen=True)
class AliasAnnotation:
    name: str
    type: Optional[TypeExpr] = None  # None: variants follow on `|` lines
    trailing: str = ""


@dataclass(frozen=True)
class AliasVariant:
    type: TypeExpr
    trailing: str = ""


@dataclass(frozen=True)
class EnumAnnotation:
    name: str
    keyed: bool = False
    trailing: str = ""


@dataclass(frozen=True)
class SeeAnnotation:
    name: str
    trailing: str = ""


@dataclass(frozen=True)
class Suppress:
    pass


@dataclass(frozen=True)
class GenericTag:
    """An unrecognized tag, kept verbatim."""

    tag: str
    text: str = ""


@dataclass(frozen=True)
class PipedContinuation:
    text: str = ""


@dataclass(frozen=True)
class Text:
    """A description line carrying no tag."""

    text: str = ""


Annotation = Union[
    ClassAnnotation,
    FieldAnnotation,
    ParamAnnotation,
    ReturnAnnotation,
    AliasAnnotation,
    AliasVariant,
    EnumAnnotation,
    SeeAnnotation,
    Suppress,
    GenericTag,
    PipedContinuation,
    Text,
]

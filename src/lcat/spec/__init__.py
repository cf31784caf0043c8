from .types import (
    Array,
    Function,
    FunctionArg,
    FunctionReturn,
    Generic,
    Literal,
    Named,
    Nullable,
    Parenthesized,
    Table,
    TableField,
    TupleType,
    TypeExpr,
    UnionType,
    format_type,
)
from .annotations import (
    AliasAnnotation,
    AliasVariant,
    Annotation,
    ClassAnnotation,
    EnumAnnotation,
    FieldAnnotation,
    GenericTag,
    ParamAnnotation,
    PipedContinuation,
    ReturnAnnotation,
    Scope,
    SeeAnnotation,
    Suppress,
    Text,
)
from .models import (
    AliasDoc,
    AliasVariantDoc,
    BlockResult,
    ClassDoc,
    CommentBlock,
    Declaration,
    DeclarationKind,
    Diagnostic,
    DiagnosticKind,
    DirectAlias,
    DocIndex,
    DocumentedFile,
    Entity,
    EnumDoc,
    EnumeratedAlias,
    FieldDoc,
    FunctionDoc,
    Metatype,
    ParamDoc,
    ReturnDoc,
    SeeDoc,
)
from .errors import (
    LcatSyntaxError,
    MalformedAnnotation,
    MalformedType,
    UnresolvedContinuation,
)
from .protocols import CommentScannerProtocol, DocRendererProtocol

__all__ = [
    # Type expressions
    "Array",
    "Function",
    "FunctionArg",
    "FunctionReturn",
    "Generic",
    "Literal",
    "Named",
    "Nullable",
    "Parenthesized",
    "Table",
    "TableField",
    "TupleType",
    "TypeExpr",
    "UnionType",
    "format_type",
    # Annotations
    "AliasAnnotation",
    "AliasVariant",
    "Annotation",
    "ClassAnnotation",
    "EnumAnnotation",
    "FieldAnnotation",
    "GenericTag",
    "ParamAnnotation",
    "PipedContinuation",
    "ReturnAnnotation",
    "Scope",
    "SeeAnnotation",
    "Suppress",
    "Text",
    # Models
    "AliasDoc",
    "AliasVariantDoc",
    "BlockResult",
    "ClassDoc",
    "CommentBlock",
    "Declaration",
    "DeclarationKind",
    "Diagnostic",
    "DiagnosticKind",
    "DirectAlias",
    "DocIndex",
    "DocumentedFile",
    "Entity",
    "EnumDoc",
    "EnumeratedAlias",
    "FieldDoc",
    "FunctionDoc",
    "Metatype",
    "ParamDoc",
    "ReturnDoc",
    "SeeDoc",
    # Errors
    "LcatSyntaxError",
    "MalformedAnnotation",
    "MalformedType",
    "UnresolvedContinuation",
    # Protocols
    "CommentScannerProtocol",
    "DocRendererProtocol",
]

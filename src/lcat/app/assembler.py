import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from lcat.lang.lua import parse_alias_variant, parse_line
from lcat.spec import (
    AliasAnnotation,
    AliasDoc,
    AliasVariantDoc,
    Annotation,
    BlockResult,
    ClassAnnotation,
    ClassDoc,
    CommentBlock,
    DeclarationKind,
    Diagnostic,
    DiagnosticKind,
    DirectAlias,
    EnumAnnotation,
    EnumDoc,
    EnumeratedAlias,
    FieldAnnotation,
    FieldDoc,
    FunctionDoc,
    GenericTag,
    LcatSyntaxError,
    MalformedAnnotation,
    MalformedType,
    ParamAnnotation,
    ParamDoc,
    PipedContinuation,
    ReturnAnnotation,
    ReturnDoc,
    Scope,
    SeeAnnotation,
    SeeDoc,
    Suppress,
    Text,
    UnresolvedContinuation,
)

log = logging.getLogger(__name__)


class AssemblyState(str, Enum):
    IDLE = "idle"
    AWAITING_ALIAS_VARIANTS = "awaiting_alias_variants"
    IN_CLASS_FIELDS = "in_class_fields"
    IN_FUNCTION_SIGNATURE = "in_function_signature"


ERROR_KINDS = (
    (MalformedType, DiagnosticKind.MALFORMED_TYPE),
    (MalformedAnnotation, DiagnosticKind.MALFORMED_ANNOTATION),
    (UnresolvedContinuation, DiagnosticKind.UNRESOLVED_CONTINUATION),
)


MEMBER_ANNOTATIONS = (
    FieldAnnotation,
    ParamAnnotation,
    ReturnAnnotation,
    SeeAnnotation,
    PipedContinuation,
)


def diagnostic_kind_for(error: LcatSyntaxError) -> DiagnosticKind:
    for error_type, kind in ERROR_KINDS:
        if isinstance(error, error_type):
            return kind
    return DiagnosticKind.MALFORMED_ANNOTATION


# --- Open entities, frozen into Entity values once the block ends ---


@dataclass
class _ClassBuilder:
    annotation: ClassAnnotation
    description: str = ""
    fields: List[FieldDoc] = field(default_factory=list)
    sees: List[SeeDoc] = field(default_factory=list)
    suppressed: bool = False

    def build(self) -> ClassDoc:
        return ClassDoc(
            name=self.annotation.name,
            exact=self.annotation.exact,
            parent=self.annotation.parent,
            fields=tuple(self.fields),
            description=self.description,
            sees=tuple(self.sees),
        )


@dataclass
class _AliasBuilder:
    annotation: AliasAnnotation
    description: str = ""
    variants: List[AliasVariantDoc] = field(default_factory=list)
    suppressed: bool = False

    def build(self) -> AliasDoc:
        definition: Union[DirectAlias, EnumeratedAlias]
        if self.annotation.type is not None:
            definition = DirectAlias(self.annotation.type)
        else:
            definition = EnumeratedAlias(tuple(self.variants))
        return AliasDoc(
            name=self.annotation.name,
            definition=definition,
            description=self.description,
        )


@dataclass
class _EnumBuilder:
    annotation: EnumAnnotation
    description: str = ""
    suppressed: bool = False

    def build(self) -> EnumDoc:
        return EnumDoc(
            name=self.annotation.name,
            keyed=self.annotation.keyed,
            description=self.description,
        )


_Builder = Union[_ClassBuilder, _AliasBuilder, _EnumBuilder]


@dataclass
class _Assembly:
    """Mutable state of one block while its annotations are walked."""

    block: CommentBlock
    state: AssemblyState = AssemblyState.IDLE
    builders: List[_Builder] = field(default_factory=list)
    text: List[str] = field(default_factory=list)
    params: List[ParamDoc] = field(default_factory=list)
    returns: List[ReturnDoc] = field(default_factory=list)
    sees: List[SeeDoc] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    suppress_next: bool = False

    @property
    def current(self) -> Optional[_Builder]:
        return self.builders[-1] if self.builders else None

    @property
    def documents_function(self) -> bool:
        declaration = self.block.declaration
        return declaration is not None and declaration.kind == DeclarationKind.FUNCTION

    def take_description(self) -> str:
        description = "\n".join(self.text).strip("\n")
        self.text.clear()
        return description

    def report(
        self, kind: DiagnosticKind, message: str, line: int, snippet: str
    ) -> None:
        self.diagnostics.append(
            Diagnostic(kind=kind, message=message, line=line, snippet=snippet.strip())
        )


ParsedLine = Tuple[int, str, Annotation]


class BlockAssembler:
    """
    Turns one comment block into documentation entities.

    The walk is an explicit state machine over the block's annotations:
    `@class` opens field collection, an `@alias` without an inline type
    opens variant collection, and `@param`/`@return` switch to the
    signature of the documented function. Every annotation that fails to
    parse, or that arrives in a state where it has no owner, becomes a
    Diagnostic; the rest of the block is still assembled.
    """

    def assemble(self, block: CommentBlock) -> BlockResult:
        assembly = _Assembly(block=block)
        parsed = self._parse_lines(assembly)

        meaningful = [item for item in parsed if not self._is_blank(item[2])]
        if meaningful and isinstance(meaningful[0][2], Suppress):
            # A lone marker with nothing after it hides the rest of the file.
            sole = len(meaningful) == 1 and not assembly.diagnostics
            log.debug(f"Suppressed comment block at line {block.start_line}")
            return BlockResult(suppress_rest=sole and block.is_standalone)

        for line_number, raw, annotation in parsed:
            self._step(assembly, line_number, raw, annotation)

        if assembly.suppress_next:
            log.debug(f"Dropped comment block at line {block.start_line}")
            return BlockResult(suppress_rest=block.is_standalone)

        return self._finish(assembly)

    def _parse_lines(self, assembly: _Assembly) -> List[ParsedLine]:
        parsed: List[ParsedLine] = []
        for offset, raw in enumerate(assembly.block.lines):
            line_number = assembly.block.start_line + offset
            try:
                parsed.append((line_number, raw, parse_line(raw)))
            except LcatSyntaxError as e:
                assembly.report(diagnostic_kind_for(e), str(e), line_number, raw)
        return parsed

    @staticmethod
    def _is_blank(annotation: Annotation) -> bool:
        return isinstance(annotation, Text) and not annotation.text.strip()

    def _step(
        self, assembly: _Assembly, line_number: int, raw: str, annotation: Annotation
    ) -> None:
        if assembly.suppress_next and isinstance(annotation, MEMBER_ANNOTATIONS):
            # A marker before a member hides that one member only.
            assembly.suppress_next = False
            assembly.take_description()
            log.debug(f"Skipped suppressed annotation at line {line_number}")
            return

        if isinstance(annotation, Text):
            assembly.text.append(annotation.text)
        elif isinstance(annotation, PipedContinuation):
            self._on_piped(assembly, line_number, raw, annotation)
        elif isinstance(annotation, ClassAnnotation):
            builder = _ClassBuilder(annotation)
            self._open(assembly, builder, AssemblyState.IN_CLASS_FIELDS)
        elif isinstance(annotation, AliasAnnotation):
            builder = _AliasBuilder(annotation)
            if annotation.type is None:
                self._open(assembly, builder, AssemblyState.AWAITING_ALIAS_VARIANTS)
            else:
                self._open(assembly, builder, AssemblyState.IDLE)
                builder.description = builder.description or annotation.trailing
        elif isinstance(annotation, EnumAnnotation):
            builder = _EnumBuilder(annotation)
            self._open(assembly, builder, AssemblyState.IDLE)
            builder.description = builder.description or annotation.trailing
        elif isinstance(annotation, FieldAnnotation):
            self._on_field(assembly, line_number, raw, annotation)
        elif isinstance(annotation, (ParamAnnotation, ReturnAnnotation)):
            self._on_signature(assembly, line_number, raw, annotation)
        elif isinstance(annotation, SeeAnnotation):
            self._on_see(assembly, line_number, raw, annotation)
        elif isinstance(annotation, Suppress):
            assembly.suppress_next = True
        elif isinstance(annotation, GenericTag):
            log.debug(f"Ignoring @{annotation.tag} at line {line_number}")

    def _open(
        self, assembly: _Assembly, builder: _Builder, state: AssemblyState
    ) -> None:
        builder.description = assembly.take_description()
        if assembly.suppress_next:
            builder.suppressed = True
            assembly.suppress_next = False
        assembly.builders.append(builder)
        assembly.state = state

    def _on_piped(
        self,
        assembly: _Assembly,
        line_number: int,
        raw: str,
        annotation: PipedContinuation,
    ) -> None:
        current = assembly.current
        if assembly.state != AssemblyState.AWAITING_ALIAS_VARIANTS or not isinstance(
            current, _AliasBuilder
        ):
            error = UnresolvedContinuation(annotation.text)
            assembly.report(
                DiagnosticKind.UNRESOLVED_CONTINUATION, str(error), line_number, raw
            )
            assembly.text.append(raw.rstrip())
            return

        try:
            variant = parse_alias_variant(annotation.text)
        except LcatSyntaxError as e:
            assembly.report(diagnostic_kind_for(e), str(e), line_number, raw)
            return
        description = assembly.take_description() or variant.trailing
        current.variants.append(
            AliasVariantDoc(type=variant.type, description=description)
        )

    def _on_field(
        self,
        assembly: _Assembly,
        line_number: int,
        raw: str,
        annotation: FieldAnnotation,
    ) -> None:
        current = assembly.current
        description = assembly.take_description() or annotation.trailing
        if assembly.state != AssemblyState.IN_CLASS_FIELDS or not isinstance(
            current, _ClassBuilder
        ):
            assembly.report(
                DiagnosticKind.ORPHAN_ANNOTATION,
                "@field does not follow a @class",
                line_number,
                raw,
            )
            return
        current.fields.append(
            FieldDoc(
                key=annotation.key,
                type=annotation.type,
                nullable=annotation.nullable,
                scope=annotation.scope or Scope.PUBLIC,
                description=description,
            )
        )

    def _on_signature(
        self,
        assembly: _Assembly,
        line_number: int,
        raw: str,
        annotation: Union[ParamAnnotation, ReturnAnnotation],
    ) -> None:
        assembly.state = AssemblyState.IN_FUNCTION_SIGNATURE
        if not assembly.documents_function:
            tag = "@param" if isinstance(annotation, ParamAnnotation) else "@return"
            assembly.report(
                DiagnosticKind.ORPHAN_ANNOTATION,
                f"{tag} does not document a function",
                line_number,
                raw,
            )
            return

        if isinstance(annotation, ParamAnnotation):
            assembly.params.append(
                ParamDoc(
                    name=annotation.name,
                    type=annotation.type,
                    nullable=annotation.nullable,
                    description=annotation.trailing,
                )
            )
        else:
            assembly.returns.append(
                ReturnDoc(
                    type=annotation.type,
                    name=annotation.name,
                    description=annotation.trailing,
                )
            )

    def _on_see(
        self,
        assembly: _Assembly,
        line_number: int,
        raw: str,
        annotation: SeeAnnotation,
    ) -> None:
        see = SeeDoc(name=annotation.name, description=annotation.trailing)
        current = assembly.current
        if assembly.state == AssemblyState.IN_CLASS_FIELDS and isinstance(
            current, _ClassBuilder
        ):
            current.sees.append(see)
        elif assembly.documents_function:
            assembly.sees.append(see)
        else:
            assembly.report(
                DiagnosticKind.ORPHAN_ANNOTATION,
                "@see has neither a class nor a function to attach to",
                line_number,
                raw,
            )

    def _finish(self, assembly: _Assembly) -> BlockResult:
        leftover = assembly.take_description()
        builders = [b for b in assembly.builders if not b.suppressed]

        result = BlockResult(diagnostics=list(assembly.diagnostics))
        if leftover and not assembly.documents_function and builders:
            if not builders[-1].description:
                builders[-1].description = leftover

        result.entities.extend(builder.build() for builder in builders)

        declaration = assembly.block.declaration
        if assembly.documents_function and declaration is not None:
            result.entities.append(
                FunctionDoc(
                    name=declaration.name,
                    params=tuple(assembly.params),
                    returns=tuple(assembly.returns),
                    description=leftover,
                    table=declaration.table,
                    is_method=declaration.is_method,
                    sees=tuple(assembly.sees),
                )
            )
        return result


def assemble_block(block: CommentBlock) -> BlockResult:
    return BlockAssembler().assemble(block)

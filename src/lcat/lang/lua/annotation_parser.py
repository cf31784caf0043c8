import logging
import re
from typing import Callable, Dict, Optional

from lcat.spec import (
    AliasAnnotation,
    AliasVariant,
    Annotation,
    ClassAnnotation,
    EnumAnnotation,
    FieldAnnotation,
    GenericTag,
    MalformedAnnotation,
    MalformedType,
    ParamAnnotation,
    PipedContinuation,
    ReturnAnnotation,
    Scope,
    SeeAnnotation,
    Suppress,
    Text,
)

from .type_parser import TypeParser

log = logging.getLogger(__name__)

TAG_RE = re.compile(r"@([A-Za-z_][A-Za-z0-9_]*)(.*)$")
COMMENT_SEPARATORS = ("#", "--")
SUPPRESS_OPTION = "nodoc"
NESTING_LIMIT = "a less deeply nested type"
SCOPES: Dict[str, Scope] = {scope.value: scope for scope in Scope}


def _trailing_text(cursor: TypeParser) -> str:
    rest = cursor.rest.strip()
    for separator in COMMENT_SEPARATORS:
        if rest.startswith(separator):
            return rest[len(separator) :].strip()
    return rest


def _marker(cursor: TypeParser, word: str) -> bool:
    """Consumes a parenthesized marker such as `(exact)` if one comes next."""

    def rule() -> bool:
        cursor.expect("(")
        if cursor.identifier() != word:
            cursor.fail(f"'{word}'")
        cursor.expect(")")
        return True

    return bool(cursor.attempt(rule))


def _required_name(cursor: TypeParser, tag: str, text: str, what: str) -> str:
    name = cursor.attempt(cursor.parse_dotted_identifier)
    if name is None:
        raise MalformedAnnotation(tag, text, f"missing {what}")
    return name


def parse_class(text: str) -> ClassAnnotation:
    cursor = TypeParser(text)
    exact = _marker(cursor, "exact")
    name = _required_name(cursor, "class", text, "class name")
    parent = cursor.parse_ty() if cursor.accept(":") else None
    return ClassAnnotation(name=name, exact=exact, parent=parent)


def _field_body(
    cursor: TypeParser, text: str, scope: Optional[Scope]
) -> FieldAnnotation:
    if cursor.accept("["):
        key = cursor.parse_ty()
        cursor.expect("]")
    else:
        key = cursor.identifier()
        if key is None:
            raise MalformedAnnotation("field", text, "missing field name")
    nullable = cursor.accept("?")
    ty = cursor.parse_ty()
    return FieldAnnotation(
        key=key,
        type=ty,
        nullable=nullable,
        scope=scope,
        trailing=_trailing_text(cursor),
    )


def parse_field(text: str) -> FieldAnnotation:
    cursor = TypeParser(text)
    word = cursor.identifier()
    if word in SCOPES:
        scoped = cursor.attempt(lambda: _field_body(cursor, text, SCOPES[word]))
        if scoped is not None:
            return scoped
    # Either no scope was written or the "scope" is the field's own name.
    return _field_body(TypeParser(text), text, None)


def parse_param(text: str) -> ParamAnnotation:
    cursor = TypeParser(text)
    name = "..." if cursor.accept("...") else cursor.identifier()
    if name is None:
        raise MalformedAnnotation("param", text, "missing parameter name")
    nullable = cursor.accept("?")
    ty = cursor.parse_ty()
    return ParamAnnotation(
        name=name, type=ty, nullable=nullable, trailing=_trailing_text(cursor)
    )


def parse_return(text: str) -> ReturnAnnotation:
    cursor = TypeParser(text)
    ty = cursor.parse_ty()
    name = cursor.identifier()
    return ReturnAnnotation(type=ty, name=name, trailing=_trailing_text(cursor))


def parse_alias(text: str) -> AliasAnnotation:
    cursor = TypeParser(text)
    name = _required_name(cursor, "alias", text, "alias name")
    ty = cursor.attempt(cursor.parse_ty)
    return AliasAnnotation(name=name, type=ty, trailing=_trailing_text(cursor))


def parse_alias_variant(text: str) -> AliasVariant:
    """Parses the payload of a `| type # description` continuation line."""
    cursor = TypeParser(text)
    try:
        ty = cursor.parse_ty()
    except RecursionError:
        raise MalformedType(text, 0, NESTING_LIMIT) from None
    return AliasVariant(type=ty, trailing=_trailing_text(cursor))


def parse_enum(text: str) -> EnumAnnotation:
    cursor = TypeParser(text)
    keyed = _marker(cursor, "key")
    name = _required_name(cursor, "enum", text, "enum name")
    return EnumAnnotation(name=name, keyed=keyed, trailing=_trailing_text(cursor))


def parse_see(text: str) -> SeeAnnotation:
    cursor = TypeParser(text)
    name = _required_name(cursor, "see", text, "reference")
    return SeeAnnotation(name=name, trailing=_trailing_text(cursor))


def parse_lcat(text: str) -> Annotation:
    options = text.split()
    if any(option.lower() == SUPPRESS_OPTION for option in options):
        return Suppress()
    return GenericTag("lcat", text.strip())


ANNOTATION_PARSERS: Dict[str, Callable[[str], Annotation]] = {
    "class": parse_class,
    "field": parse_field,
    "param": parse_param,
    "return": parse_return,
    "alias": parse_alias,
    "enum": parse_enum,
    "see": parse_see,
    "lcat": parse_lcat,
}


def parse_annotation(tag: str, text: str) -> Annotation:
    """
    Parses the payload of one `@tag` line.

    Raises MalformedType or MalformedAnnotation when the payload doesn't
    match the tag's shape. Unknown tags are never an error.
    """
    parser = ANNOTATION_PARSERS.get(tag)
    if parser is None:
        log.debug(f"Keeping unrecognized tag @{tag}")
        return GenericTag(tag, text.strip())
    try:
        return parser(text)
    except RecursionError:
        raise MalformedType(text, 0, NESTING_LIMIT) from None


def parse_line(line: str) -> Annotation:
    stripped = line.strip()
    if stripped.startswith("|"):
        return PipedContinuation(stripped[1:].strip())

    match = TAG_RE.match(stripped)
    if match:
        return parse_annotation(match.group(1), match.group(2))
    return Text(line.rstrip())

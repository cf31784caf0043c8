import re
from typing import Callable, List, NoReturn, Optional, Tuple, TypeVar

from lcat.spec import (
    Array,
    Function,
    FunctionArg,
    FunctionReturn,
    Generic,
    LcatSyntaxError,
    Literal,
    MalformedType,
    Named,
    Nullable,
    Parenthesized,
    Table,
    TableField,
    TupleType,
    TypeExpr,
    UnionType,
)

IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
INTEGER_RE = re.compile(r"[0-9]+")
BLANKS = " \t"

T = TypeVar("T")


class Cursor:
    """A position in one line of annotation text. Blanks never span lines."""

    def __init__(self, source: str, pos: int = 0):
        self.source = source
        self.pos = pos

    def skip_blanks(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in BLANKS:
            self.pos += 1

    def peek_char(self) -> str:
        self.skip_blanks()
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def accept(self, token: str) -> bool:
        start = self.pos
        self.skip_blanks()
        if self.source.startswith(token, self.pos):
            self.pos += len(token)
            return True
        self.pos = start
        return False

    def expect(self, token: str) -> None:
        if not self.accept(token):
            self.fail(f"'{token}'")

    def fail(self, expected: str) -> NoReturn:
        self.skip_blanks()
        raise MalformedType(self.source, self.pos, expected)

    def attempt(self, rule: Callable[[], T]) -> Optional[T]:
        start = self.pos
        try:
            return rule()
        except LcatSyntaxError:
            self.pos = start
            return None

    def identifier(self) -> Optional[str]:
        self.skip_blanks()
        match = IDENT_RE.match(self.source, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return match.group()

    @property
    def rest(self) -> str:
        return self.source[self.pos :]


class TypeParser(Cursor):
    """
    Recursive-descent parser for the type expression sub-language.

    One method per grammar rule. Every rule either returns a node with the
    cursor placed right after its last token, or raises MalformedType.
    Optional parts of a rule are tried with `attempt`, which rewinds the
    cursor when they don't match, so a caller always gets the longest valid
    prefix of the input.
    """

    def parse_ty(self) -> TypeExpr:
        alternatives = [self.parse_single_type()]
        while True:
            alternative = self.attempt(self._union_alternative)
            if alternative is None:
                break
            alternatives.append(alternative)

        ty: TypeExpr = alternatives[0]
        if len(alternatives) > 1:
            ty = UnionType(tuple(alternatives))
        # `?` closes the whole union: `a|b?` is "a, b or nothing".
        if self.accept("?"):
            ty = Nullable(ty)
        return ty

    def _union_alternative(self) -> TypeExpr:
        self.expect("|")
        return self.parse_single_type()

    def parse_single_type(self) -> TypeExpr:
        ty = self._parse_base_type()

        generic_args = self.attempt(self._generic_args)
        if generic_args is not None:
            ty = Generic(ty, generic_args)

        while self.attempt(self._array_suffix):
            ty = Array(ty)
        return ty

    def _parse_base_type(self) -> TypeExpr:
        char = self.peek_char()
        if char == "{":
            return self.parse_table()
        if char == "[":
            return self.parse_tuple()
        if char in ("'", '"'):
            return self.parse_string_literal()
        if char and char in "0123456789":
            match = INTEGER_RE.match(self.source, self.pos)
            if match is None:
                self.fail("an integer")
            self.pos = match.end()
            return Literal(int(match.group()))
        if char == "(":
            self.pos += 1
            inner = self.parse_ty()
            self.expect(")")
            return Parenthesized(inner)
        if self.source.startswith("fun(", self.pos):
            return self.parse_function()
        if IDENT_RE.match(self.source, self.pos):
            return Named(self.parse_dotted_identifier())
        self.fail("a type")

    def parse_dotted_identifier(self) -> str:
        self.skip_blanks()
        start = self.pos
        if self.identifier() is None:
            self.fail("an identifier")
        # A segment after a dot may be empty: `a.b.` and `_..._x` are both names.
        while self.pos < len(self.source) and self.source[self.pos] == ".":
            self.pos += 1
            match = IDENT_RE.match(self.source, self.pos)
            if match:
                self.pos = match.end()
        return self.source[start : self.pos]

    def parse_string_literal(self) -> Literal:
        quote = self.source[self.pos]
        index = self.pos + 1
        while index < len(self.source):
            char = self.source[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                value = self.source[self.pos + 1 : index]
                self.pos = index + 1
                return Literal(value, quote=quote)
            index += 1
        self.fail(f"a closing {quote}")

    def _generic_args(self) -> Tuple[TypeExpr, ...]:
        self.expect("<")
        return tuple(self._type_list(">"))

    def _array_suffix(self) -> bool:
        self.expect("[")
        self.expect("]")
        return True

    def _type_list(self, closing: str) -> List[TypeExpr]:
        """`ty ("," ty)* ","? <closing>`"""
        types = [self.parse_ty()]
        while self.accept(","):
            if self.accept(closing):
                return types
            types.append(self.parse_ty())
        self.expect(closing)
        return types

    def parse_tuple(self) -> TupleType:
        self.expect("[")
        return TupleType(tuple(self._type_list("]")))

    def parse_table(self) -> Table:
        self.expect("{")
        fields: List[TableField] = []
        if self.accept("}"):
            return Table()

        while True:
            fields.append(self._table_field())
            if self.accept(",") or self.accept(";"):
                if self.accept("}"):
                    break
                continue
            self.expect("}")
            break
        return Table(tuple(fields))

    def _table_field(self) -> TableField:
        if self.accept("["):
            key = self.parse_ty()
            self.expect("]")
        else:
            key = self.identifier()
            if key is None:
                self.fail("a table key")
        nullable = self.accept("?")
        self.expect(":")
        return TableField(key=key, type=self.parse_ty(), nullable=nullable)

    def parse_function(self) -> Function:
        self.expect("fun(")
        args: List[FunctionArg] = []
        if not self.accept(")"):
            while True:
                args.append(self._function_arg())
                if self.accept(","):
                    continue
                self.expect(")")
                break

        returns = self.attempt(self._function_returns) or []
        return Function(tuple(args), tuple(returns))

    def _function_arg(self) -> FunctionArg:
        name = "..." if self.accept("...") else self.identifier()
        if name is None:
            self.fail("an argument name")
        nullable = self.accept("?")
        ty = self.parse_ty() if self.accept(":") else None
        return FunctionArg(name=name, nullable=nullable, type=ty)

    def _function_returns(self) -> List[FunctionReturn]:
        self.expect(":")
        returns = [self._function_return()]
        while True:
            ret = self.attempt(self._next_function_return)
            if ret is None:
                return returns
            returns.append(ret)

    def _next_function_return(self) -> FunctionReturn:
        self.expect(",")
        return self._function_return()

    def _function_return(self) -> FunctionReturn:
        named = self.attempt(self._named_return)
        if named is not None:
            return named
        return FunctionReturn(type=self.parse_ty())

    def _named_return(self) -> FunctionReturn:
        name = self.identifier()
        if name is None or not self.accept(":"):
            self.fail("a named return")
        return FunctionReturn(type=self.parse_ty(), name=name)


def parse_type_prefix(text: str, pos: int = 0) -> Tuple[TypeExpr, int]:
    """
    Parses the longest type expression starting at `pos`.

    Returns the expression and the index right after its last token.
    """
    parser = TypeParser(text, pos)
    try:
        ty = parser.parse_ty()
    except RecursionError:
        raise MalformedType(text, pos, "a less deeply nested type") from None
    return ty, parser.pos


def parse_type(text: str) -> TypeExpr:
    ty, end = parse_type_prefix(text)
    if text[end:].strip():
        raise MalformedType(text, end, "end of type")
    return ty

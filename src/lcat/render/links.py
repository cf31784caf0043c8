import html
from typing import Dict, Optional, Tuple

from lcat.spec import (
    Array,
    Function,
    FunctionArg,
    FunctionReturn,
    Generic,
    Literal,
    Metatype,
    Named,
    Nullable,
    Parenthesized,
    Table,
    TableField,
    TupleType,
    TypeExpr,
    UnionType,
)

PAGE_DIRS: Dict[Metatype, str] = {
    Metatype.CLASS: "classes",
    Metatype.ALIAS: "aliases",
    Metatype.ENUM: "enums",
}


def page_url(name: str, metatype: Metatype, base_url: str, anchor: str = "") -> str:
    url = f"{base_url}{PAGE_DIRS[metatype]}/{name}"
    return f"{url}#{anchor}" if anchor else url


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


class TypeLinker:
    """
    Prints a type expression as HTML for use inside `<code>`, turning every
    name documented in this run into a link to its page.
    """

    def __init__(self, lookup: Dict[str, Metatype], base_url: str = "/"):
        self.lookup = lookup
        self.base_url = base_url

    def format(self, ty: TypeExpr) -> str:
        if isinstance(ty, Named):
            return self._named(ty.name)
        if isinstance(ty, Literal):
            return _escape(str(ty))
        if isinstance(ty, UnionType):
            return " | ".join(self.format(t) for t in ty.types)
        if isinstance(ty, Nullable):
            return f"{self.format(ty.inner)}?"
        if isinstance(ty, Array):
            return f"{self.format(ty.inner)}[]"
        if isinstance(ty, Generic):
            args = ", ".join(self.format(arg) for arg in ty.args)
            return f"{self.format(ty.base)}&lt;{args}&gt;"
        if isinstance(ty, Table):
            if not ty.fields:
                return "{}"
            return "{ " + ", ".join(self._table_field(f) for f in ty.fields) + " }"
        if isinstance(ty, TupleType):
            return "[" + ", ".join(self.format(t) for t in ty.types) + "]"
        if isinstance(ty, Function):
            return self._function(ty)
        if isinstance(ty, Parenthesized):
            return f"({self.format(ty.inner)})"
        raise TypeError(f"Not a type expression: {ty!r}")

    def _named(self, name: str) -> str:
        metatype = self.lookup.get(name)
        if metatype is None:
            return _escape(name)
        # VitePress rejects an element whose text starts with `_`.
        label = f"&#95;{name[1:]}" if name.startswith("_") else name
        return f'<a href="{page_url(name, metatype, self.base_url)}">{label}</a>'

    def _table_field(self, table_field: TableField) -> str:
        if isinstance(table_field.key, str):
            key = table_field.key
        else:
            key = f"[{self.format(table_field.key)}]"
        nullable = "?" if table_field.nullable else ""
        return f"{key}{nullable}: {self.format(table_field.type)}"

    def _function(self, ty: Function) -> str:
        args = ", ".join(self._function_arg(arg) for arg in ty.args)
        if not ty.returns:
            return f"fun({args})"
        returns = ", ".join(self._function_return(ret) for ret in ty.returns)
        return f"fun({args}): {returns}"

    def _function_arg(self, arg: FunctionArg) -> str:
        nullable = "?" if arg.nullable else ""
        if arg.type is None:
            return f"{arg.name}{nullable}"
        return f"{arg.name}{nullable}: {self.format(arg.type)}"

    def _function_return(self, ret: FunctionReturn) -> str:
        if ret.name is None:
            return self.format(ret.type)
        return f"{ret.name}: {self.format(ret.type)}"

    def resolve_reference(self, reference: str) -> Optional[Tuple[str, str]]:
        """
        Splits a dotted `@see` reference into the longest documented name and
        the member path that follows it, e.g. `Foo.bar` -> (`Foo`, `bar`).
        """
        segments = reference.split(".")
        owner = None
        for end in range(1, len(segments) + 1):
            candidate = ".".join(segments[:end])
            if candidate in self.lookup:
                owner = end
            elif owner is not None:
                break
        if owner is None:
            return None
        return ".".join(segments[:owner]), ".".join(segments[owner:])

    def format_reference(self, reference: str) -> str:
        resolved = self.resolve_reference(reference)
        if resolved is None:
            return f"<code>{_escape(reference)}</code>"
        name, member = resolved
        url = page_url(name, self.lookup[name], self.base_url, member)
        return f'<code><a href="{url}">{_escape(reference)}</a></code>'

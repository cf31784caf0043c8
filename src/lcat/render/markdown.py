import logging
import re
import shutil
from pathlib import Path
from typing import List, Sequence

from lcat.spec import (
    AliasDoc,
    ClassDoc,
    DirectAlias,
    DocIndex,
    EnumDoc,
    FieldDoc,
    FunctionDoc,
    Nullable,
    Scope,
    SeeDoc,
)

from .links import PAGE_DIRS, TypeLinker

log = logging.getLogger(__name__)

FRONT_MATTER = "---\noutline: [2, 3]\n---\n"
FENCE_RE = re.compile(r"^\s*(```|~~~)")

EXACT_BADGE = '<Badge type="tip" text="exact" />'
KEY_BADGE = '<Badge type="tip" text="key" />'
NULLABLE_BADGE = '<Badge type="danger" text="nullable" />'
METHOD_BADGE = '<Badge type="method" text="method" />'
FUNCTION_BADGE = '<Badge type="function" text="function" />'


def escape_angle_brackets(markdown: str) -> str:
    """
    Replaces `<` with `&lt;` in prose so that VitePress doesn't read it as a
    tag. Fenced blocks and inline code spans are left as written.
    """
    lines = []
    in_fence = False
    for line in markdown.split("\n"):
        if FENCE_RE.match(line):
            in_fence = not in_fence
            lines.append(line)
            continue
        if in_fence:
            lines.append(line)
            continue
        # Odd segments sit between backticks.
        segments = line.split("`")
        for i in range(0, len(segments), 2):
            segments[i] = segments[i].replace("<", "&lt;")
        lines.append("`".join(segments))
    return "\n".join(lines)


def _sections(*parts: str) -> str:
    return "\n\n".join(part for part in parts if part) + "\n"


class MarkdownRenderer:
    """
    Writes VitePress-flavoured Markdown: one page per class, alias and enum,
    plus `functions.md` for functions that belong to no documented class.
    """

    def __init__(self, out_dir: Path, base_url: str = "/"):
        self.out_dir = out_dir
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"

    def render(self, index: DocIndex) -> List[Path]:
        linker = TypeLinker(index.lookup, self.base_url)
        for directory in PAGE_DIRS.values():
            # Pages of entities removed from the sources must not linger.
            shutil.rmtree(self.out_dir / directory, ignore_errors=True)
        functions_page = self.out_dir / "functions.md"
        if functions_page.exists():
            functions_page.unlink()

        written: List[Path] = []
        for class_doc in index.classes:
            methods = index.methods_of(class_doc.name)
            content = self.render_class(class_doc, methods, linker)
            written.append(self._write("classes", class_doc.name, content))
        for alias in index.aliases:
            content = self.render_alias(alias, linker)
            written.append(self._write("aliases", alias.name, content))
        for enum in index.enums:
            written.append(self._write("enums", enum.name, self.render_enum(enum)))

        free_functions = index.free_functions()
        if free_functions:
            path = self.out_dir / "functions.md"
            path.parent.mkdir(parents=True, exist_ok=True)
            content = self.render_functions(free_functions, linker)
            path.write_text(content, encoding="utf-8")
            written.append(path)

        log.debug(f"Wrote {len(written)} pages to {self.out_dir}")
        return written

    def _write(self, directory: str, name: str, content: str) -> Path:
        path = self.out_dir / directory / f"{name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    # --- Pages ---

    def render_class(
        self, class_doc: ClassDoc, methods: List[FunctionDoc], linker: TypeLinker
    ) -> str:
        parent = ""
        if class_doc.parent is not None:
            parent = f" : <code>{linker.format(class_doc.parent)}</code>"
        title = f"# Class `{class_doc.name}`{parent}"
        if class_doc.exact:
            title += f"\n{EXACT_BADGE}"

        fields = "\n".join(self._field_block(f, linker) for f in class_doc.fields)
        if fields:
            fields = f"## Fields\n\n{fields}"

        functions = "\n".join(self.function_block(f, linker) for f in methods)
        if functions:
            functions = f"## Functions\n\n{functions}"

        sees = self._see_also(class_doc.sees, linker, "##")
        return FRONT_MATTER + "\n" + _sections(
            title,
            escape_angle_brackets(class_doc.description),
            fields,
            functions,
            sees,
        )

    def _field_block(self, field_doc: FieldDoc, linker: TypeLinker) -> str:
        name = field_doc.display_key
        nullable = field_doc.nullable or isinstance(field_doc.type, Nullable)
        badge = f" {NULLABLE_BADGE}" if nullable else ""
        marker = "?" if field_doc.nullable else ""
        scope = ""
        if field_doc.scope != Scope.PUBLIC:
            scope = f" *({field_doc.scope.value})*"
        return (
            f"### {name}{badge}\n\n"
            f"`{name}{marker}`: <code>{linker.format(field_doc.type)}</code>{scope}\n\n"
            f"{escape_angle_brackets(field_doc.description)}\n"
        )

    def render_alias(self, alias: AliasDoc, linker: TypeLinker) -> str:
        if isinstance(alias.definition, DirectAlias):
            variants = [(alias.definition.type, "")]
        else:
            variants = [(v.type, v.description) for v in alias.definition.variants]

        short = " | ".join(f"<code>{linker.format(ty)}</code>" for ty, _ in variants)
        types = "\n".join(
            f"### <code>{linker.format(ty)}</code>\n\n{escape_angle_brackets(desc)}\n"
            for ty, desc in variants
        )
        if types:
            types = f"## Aliased types\n\n{types}"

        return FRONT_MATTER + "\n" + _sections(
            f"# Alias `{alias.name}`",
            short,
            escape_angle_brackets(alias.description),
            types,
        )

    def render_enum(self, enum: EnumDoc) -> str:
        title = f"# Enum `{enum.name}`"
        if enum.keyed:
            title += f"\n{KEY_BADGE}"
        description = escape_angle_brackets(enum.description)
        return FRONT_MATTER + "\n" + _sections(title, description)

    def render_functions(
        self, functions: List[FunctionDoc], linker: TypeLinker
    ) -> str:
        blocks = "\n".join(self.function_block(f, linker) for f in functions)
        return FRONT_MATTER + "\n" + _sections("# Functions", blocks)

    # --- Function blocks ---

    def function_block(self, function: FunctionDoc, linker: TypeLinker) -> str:
        badge = METHOD_BADGE if function.is_method else FUNCTION_BADGE

        params_short = ", ".join(
            f"{p.name}{'?' if p.nullable else ''}: {linker.format(p.type)}"
            for p in function.params
        )
        returns_short = ", ".join(
            f"{r.name + ': ' if r.name else ''}{linker.format(r.type)}"
            for r in function.returns
        )
        if returns_short:
            returns_short = f"\n    -> {returns_short}"
        signature = (
            '<div class="language-lua"><pre><code>'
            f"function {function.qualified_name}({params_short}){returns_short}"
            "</code></pre></div>"
        )

        params = "<br>\n".join(
            f"`{p.name}{'?' if p.nullable else ''}`: "
            f"<code>{linker.format(p.type)}</code>"
            + (f" - {escape_angle_brackets(p.description)}" if p.description else "")
            for p in function.params
        )
        if params:
            params = f"#### Parameters\n\n{params}"

        returns = "\n".join(
            f"{i}. {'`' + r.name + '`: ' if r.name else ''}"
            f"<code>{linker.format(r.type)}</code>"
            + (f" - {escape_angle_brackets(r.description)}" if r.description else "")
            for i, r in enumerate(function.returns, start=1)
        )
        if returns:
            returns = f"#### Returns\n\n{returns}"

        return _sections(
            f"### {badge} {function.name}",
            signature,
            escape_angle_brackets(function.description),
            params,
            returns,
            self._see_also(function.sees, linker, "####"),
        )

    def _see_also(
        self, sees: Sequence[SeeDoc], linker: TypeLinker, heading: str
    ) -> str:
        if not sees:
            return ""
        entries = "\n".join(
            f"- {linker.format_reference(see.name)}"
            + (f": {escape_angle_brackets(see.description)}" if see.description else "")
            for see in sees
        )
        return f"{heading} See also\n\n{entries}"

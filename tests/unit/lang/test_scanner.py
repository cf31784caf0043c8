from lcat.lang.lua import harvest_declaration, scan_comment_blocks
from lcat.spec import CommentBlock, Declaration, DeclarationKind

SOURCE = "\n".join(
    [
        "---@class Foo",
        "---@field x number",
        "local Foo = {}",
        "",
        "--- Adds two numbers.",
        "---@param a number",
        "---@return number",
        "function Foo.add(a, b)",
        "end",
        "",
        "---@lcat nodoc",
        "",
        "local x = 1",
    ]
)


def test_scan_splits_blocks_and_attaches_declarations():
    blocks = scan_comment_blocks(SOURCE)

    assert blocks == [
        CommentBlock(
            lines=("@class Foo", "@field x number"),
            declaration=Declaration(DeclarationKind.TABLE, "Foo", line=3),
            start_line=1,
        ),
        CommentBlock(
            lines=("Adds two numbers.", "@param a number", "@return number"),
            declaration=Declaration(
                DeclarationKind.FUNCTION, "add", table="Foo", params=("a", "b"), line=8
            ),
            start_line=5,
        ),
        CommentBlock(lines=("@lcat nodoc",), declaration=None, start_line=11),
    ]
    assert blocks[2].is_standalone


def test_plain_comments_inside_a_run_are_skipped():
    blocks = scan_comment_blocks("---a\n-- not documentation\n---b\nlocal t = {}\n")

    assert len(blocks) == 1
    assert blocks[0].lines == ("a", "b")
    assert blocks[0].declaration.name == "t"


def test_leader_strips_only_one_blank():
    blocks = scan_comment_blocks("---text\n---  indented\n")
    assert blocks[0].lines == ("text", " indented")


def test_code_without_comments_yields_nothing():
    assert scan_comment_blocks("local function f()\nend\n") == []


def test_method_declaration():
    declaration = harvest_declaration("function M.Foo:bar(self_x)")
    assert declaration.kind == DeclarationKind.FUNCTION
    assert declaration.table == "M.Foo"
    assert declaration.name == "bar"
    assert declaration.is_method


def test_local_function():
    declaration = harvest_declaration("local function helper()")
    assert (declaration.kind, declaration.name, declaration.table) == (
        DeclarationKind.FUNCTION,
        "helper",
        None,
    )


def test_function_assignment():
    declaration = harvest_declaration("M.handler = function(a, ...)")
    assert declaration.kind == DeclarationKind.FUNCTION
    assert declaration.table == "M"
    assert declaration.name == "handler"
    assert declaration.params == ("a", "...")


def test_variable_and_other_code():
    variable = harvest_declaration("M.value = 3")
    assert (variable.kind, variable.table, variable.name) == (
        DeclarationKind.VARIABLE,
        "M",
        "value",
    )
    other = harvest_declaration("return M")
    assert other.kind == DeclarationKind.OTHER
    assert other.name == "return M"

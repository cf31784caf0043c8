from lcat.spec import (
    AliasDoc,
    ClassDoc,
    DirectAlias,
    DocIndex,
    DocumentedFile,
    EnumDoc,
    FieldDoc,
    FunctionDoc,
    Metatype,
    Named,
)


def make_index() -> DocIndex:
    return DocIndex.from_files(
        [
            DocumentedFile(
                path="a.lua",
                entities=[
                    ClassDoc("Foo"),
                    FunctionDoc("bar", table="Foo", is_method=True),
                    FunctionDoc("helper"),
                ],
            ),
            DocumentedFile(
                path="b.lua",
                entities=[
                    AliasDoc("Key", DirectAlias(Named("string"))),
                    EnumDoc("Color"),
                    FunctionDoc("run", table="M"),
                ],
            ),
        ]
    )


def test_index_groups_entities_by_kind():
    index = make_index()

    assert [c.name for c in index.classes] == ["Foo"]
    assert [a.name for a in index.aliases] == ["Key"]
    assert [e.name for e in index.enums] == ["Color"]
    assert [f.name for f in index.functions] == ["bar", "helper", "run"]


def test_lookup_maps_names_to_their_kind():
    assert make_index().lookup == {
        "Foo": Metatype.CLASS,
        "Key": Metatype.ALIAS,
        "Color": Metatype.ENUM,
    }


def test_methods_and_free_functions():
    index = make_index()

    assert [f.name for f in index.methods_of("Foo")] == ["bar"]
    assert [f.qualified_name for f in index.free_functions()] == ["helper", "M.run"]


def test_field_display_key():
    assert FieldDoc("x", Named("number")).display_key == "x"
    assert FieldDoc(Named("string"), Named("number")).display_key == "[string]"

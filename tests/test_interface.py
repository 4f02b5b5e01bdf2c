import pytest

from bindgen_java.codegen.core.interface import (
    ComponentInterface,
    LiteralKind,
    ObjectImpl,
    Type,
    TypeKind,
)


def test_loader_requires_namespace():
    with pytest.raises(ValueError, match="namespace"):
        ComponentInterface.from_dict({"functions": []})


@pytest.mark.parametrize(
    "bad_type",
    ["int", {"name": "Point"}, {"kind": "tuple"}],
)
def test_loader_rejects_unknown_types(bad_type):
    data = {"namespace": "x", "functions": [{"name": "f", "return_type": bad_type}]}
    with pytest.raises(ValueError):
        ComponentInterface.from_dict(data)


def test_crate_name_defaults_to_namespace(geometry_ci):
    assert geometry_ci.crate_name == "geometry"
    assert geometry_ci.get_type("Point").module_path == "geometry"


def test_types_are_collected_once_in_order(geometry_ci):
    types = list(geometry_ci.iter_types())
    point = Type.record("Point", "geometry")
    assert types.count(point) == 1
    assert types[0] == point
    assert Type.sequence(point) in types
    assert Type.primitive(TypeKind.BOOLEAN) in types


def test_types_compare_structurally():
    assert Type.optional(Type.primitive(TypeKind.STRING)) == Type.optional(
        Type.primitive(TypeKind.STRING)
    )
    assert Type.record("A", "x") != Type.record("A", "y")


def test_primitive_constructor_rejects_named_kinds():
    with pytest.raises(ValueError):
        Type.primitive(TypeKind.RECORD)


def test_external_types(external_ci):
    thing = external_ci.get_type("Thing")
    assert external_ci.is_external(thing)
    assert list(external_ci.iter_external_types()) == [thing]
    assert thing not in list(external_ci.iter_local_types())


def test_errors_are_detected_from_throws(geometry_ci):
    assert geometry_ci.is_name_used_as_error("GeometryError")
    assert not geometry_ci.is_name_used_as_error("Shape")


def test_declared_errors():
    ci = ComponentInterface.from_dict(
        {"namespace": "x", "enums": [{"name": "Oops", "variants": [{"name": "A"}]}], "errors": ["Oops"]}
    )
    assert ci.is_name_used_as_error("Oops")


def test_flatness(geometry_ci):
    assert not geometry_ci.get_enum_definition("Shape").is_flat()
    assert geometry_ci.get_enum_definition("GeometryError").is_flat()


def test_variant_discriminants(services_ci):
    level = services_ci.get_enum_definition("Level")
    assert level.variant_discr(0).value == 1
    assert level.variant_discr(1).value == 2
    assert level.variant_discr(1).kind == LiteralKind.UINT
    with pytest.raises(IndexError):
        level.variant_discr(2)


def test_object_constructors(services_ci):
    store = services_ci.get_object_definition("Store")
    assert store.primary_constructor().name == "new"
    assert [c.name for c in store.alternate_constructors()] == ["in_memory", "open_remote"]
    assert not store.has_callback_interface()
    listener = services_ci.get_object_definition("Listener")
    assert listener.imp == ObjectImpl.CALLBACK_TRAIT
    assert listener.has_callback_interface()
    assert listener.primary_constructor() is None


def test_async_detection(geometry_ci, services_ci):
    assert geometry_ci.has_async_callables()
    assert services_ci.has_async_callables()
    assert not ComponentInterface("empty").has_async_callables()


def test_callables_cover_every_owner(services_ci):
    names = {c.name for c in services_ci.iter_callables()}
    assert {"parse_url", "new", "in_memory", "get", "on_change", "log"} <= names


def test_object_references(services_ci):
    assert services_ci.contains_object_references(Type.object("Store", "services"))
    assert services_ci.contains_object_references(
        Type.sequence(Type.optional(Type.object("Store", "services")))
    )
    assert not services_ci.contains_object_references(Type.record("Entry", "services"))


def test_recursive_records_terminate():
    ci = ComponentInterface.from_dict(
        {
            "namespace": "tree",
            "records": [
                {
                    "name": "Node",
                    "fields": [
                        {"name": "children", "type": {"kind": "sequence", "inner": {"kind": "record", "name": "Node"}}}
                    ],
                }
            ],
        }
    )
    assert not ci.contains_object_references(Type.record("Node", "tree"))


def test_custom_type_keeps_builtin(services_ci):
    url = services_ci.get_custom_type_definition("Url")
    assert url.builtin == Type.primitive(TypeKind.STRING)
    assert url.as_type().children() == [url.builtin]


def test_describe():
    assert Type.map(Type.primitive(TypeKind.STRING), Type.record("P")).describe() == (
        "map<string, record P>"
    )

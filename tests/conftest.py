import pytest

from bindgen_java.codegen.core.interface import ComponentInterface
from bindgen_java.codegen.languages.java.config import JavaConfig


def record_type(name, module_path=None):
    raw = {"kind": "record", "name": name}
    if module_path:
        raw["module_path"] = module_path
    return raw


GEOMETRY = {
    "namespace": "geometry",
    "docstring": "Plane geometry helpers.",
    "records": [
        {
            "name": "Point",
            "docstring": "A point in the plane.",
            "fields": [
                {"name": "x", "type": "f64"},
                {"name": "y", "type": "f64"},
            ],
        }
    ],
    "enums": [
        {
            "name": "Shape",
            "variants": [
                {"name": "Circle", "fields": [{"name": "radius", "type": "f64"}]},
                {"name": "Polygon", "fields": [{"name": "points", "type": {"kind": "sequence", "inner": record_type("Point")}}]},
            ],
        },
        {
            "name": "GeometryError",
            "variants": [{"name": "DivideByZero"}, {"name": "Degenerate"}],
        },
    ],
    "functions": [
        {
            "name": "distance",
            "docstring": "Distance between two points.",
            "arguments": [
                {"name": "a", "type": record_type("Point")},
                {"name": "b", "type": record_type("Point")},
            ],
            "return_type": "f64",
        },
        {
            "name": "midpoint",
            "arguments": [
                {"name": "a", "type": record_type("Point")},
                {"name": "class", "type": record_type("Point")},
            ],
            "return_type": record_type("Point"),
        },
        {
            "name": "slope",
            "arguments": [
                {"name": "a", "type": record_type("Point")},
                {"name": "b", "type": record_type("Point")},
            ],
            "return_type": "f64",
            "throws": {"kind": "enum", "name": "GeometryError"},
        },
        {
            "name": "is_convex",
            "arguments": [{"name": "points", "type": {"kind": "sequence", "inner": record_type("Point")}}],
            "return_type": "bool",
            "is_async": True,
        },
    ],
}


SERVICES = {
    "namespace": "services",
    "records": [
        {
            "name": "Entry",
            "fields": [
                {"name": "key", "type": "string"},
                {"name": "tags", "type": {"kind": "optional", "inner": {"kind": "map", "key": "string", "value": "i64"}}},
                {"name": "payload", "type": "bytes"},
            ],
        }
    ],
    "enums": [
        {
            "name": "Level",
            "discr_type": "u8",
            "variants": [
                {"name": "Low", "discr": {"kind": "uint", "value": 1}},
                {"name": "High"},
            ],
        }
    ],
    "objects": [
        {
            "name": "Store",
            "docstring": "A key value store.",
            "constructors": [
                {"name": "new", "arguments": [{"name": "path", "type": "string"}]},
                {"name": "in_memory"},
                {"name": "open_remote", "arguments": [{"name": "url", "type": "string"}], "is_async": True},
            ],
            "methods": [
                {"name": "get", "arguments": [{"name": "key", "type": "string"}], "return_type": {"kind": "optional", "inner": record_type("Entry")}},
                {"name": "put", "arguments": [{"name": "entry", "type": record_type("Entry")}]},
                {"name": "sync", "is_async": True},
            ],
        },
        {
            "name": "Listener",
            "imp": "callback_trait",
            "methods": [
                {"name": "on_change", "arguments": [{"name": "key", "type": "string"}]},
            ],
        },
    ],
    "callback_interfaces": [
        {
            "name": "Logger",
            "methods": [
                {"name": "log", "arguments": [{"name": "level", "type": {"kind": "enum", "name": "Level"}}, {"name": "message", "type": "string"}]},
                {"name": "enabled", "return_type": "bool"},
            ],
        }
    ],
    "custom_types": [
        {"name": "Url", "builtin": "string"},
        {"name": "Handle", "builtin": "u64"},
    ],
    "functions": [
        {"name": "parse_url", "arguments": [{"name": "raw", "type": "string"}], "return_type": {"kind": "custom", "name": "Url", "builtin": "string"}},
        {"name": "set_logger", "arguments": [{"name": "logger", "type": {"kind": "callback_interface", "name": "Logger"}}]},
        {"name": "next_handle", "return_type": {"kind": "custom", "name": "Handle", "builtin": "u64"}},
        {"name": "since", "arguments": [{"name": "start", "type": "timestamp"}], "return_type": "duration"},
    ],
}


@pytest.fixture
def geometry_data():
    return GEOMETRY


@pytest.fixture
def geometry_ci():
    return ComponentInterface.from_dict(GEOMETRY)


@pytest.fixture
def services_ci():
    return ComponentInterface.from_dict(SERVICES)


@pytest.fixture
def external_ci():
    """Interface using a record and an error owned by the ``shared`` crate."""
    return ComponentInterface.from_dict(
        {
            "namespace": "app",
            "functions": [
                {"name": "fetch", "return_type": record_type("Thing", "shared::types"), "is_async": True},
                {"name": "store", "arguments": [{"name": "thing", "type": record_type("Thing", "shared::types")}]},
            ],
        }
    )


@pytest.fixture
def java_config():
    return JavaConfig(package_name="com.example", external_packages={"shared": "com.example.shared"})

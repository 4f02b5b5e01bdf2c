import pytest

from bindgen_java.codegen.core.naming import NameSanitizer, NamingCase, split_words
from bindgen_java.codegen.languages.java import naming


@pytest.mark.parametrize(
    "name,words",
    [
        ("user_name", ["user", "name"]),
        ("userName", ["user", "Name"]),
        ("HTTPServer", ["HTTP", "Server"]),
        ("kebab-case name", ["kebab", "case", "name"]),
        ("", []),
    ],
)
def test_split_words(name, words):
    assert split_words(name) == words


@pytest.mark.parametrize(
    "case,expected",
    [
        (NamingCase.SNAKE_CASE, "http_server_port"),
        (NamingCase.CAMEL_CASE, "httpServerPort"),
        (NamingCase.PASCAL_CASE, "HttpServerPort"),
        (NamingCase.KEBAB_CASE, "http-server-port"),
        (NamingCase.SCREAMING_SNAKE, "HTTP_SERVER_PORT"),
    ],
)
def test_convert_case(case, expected):
    assert NameSanitizer().convert_case("HTTPServer_port", case) == expected


def test_sanitizer_escapes_reserved_words():
    sanitizer = NameSanitizer({"type"}, escape_prefix="r#")
    assert sanitizer.sanitize_name("type") == "r#type"
    assert sanitizer.is_reserved("type")
    assert not sanitizer.is_reserved("kind")


def test_java_keywords_are_prefixed():
    assert naming.fn_name("class") == "_class"
    assert naming.var_name("new") == "_new"
    assert naming.var_name("_") == "__"
    assert naming.var_name("object") == "object"


@pytest.mark.parametrize("word", sorted(naming.JAVA_RESERVED_WORDS))
def test_reserved_words_never_leak(word, geometry_ci):
    for converted in (naming.var_name(word), naming.class_name(word, geometry_ci)):
        assert converted
        assert converted not in naming.JAVA_RESERVED_WORDS


@pytest.mark.parametrize("name,expected", [("_", "__"), ("__", "__")])
def test_names_without_words_stay_usable(name, expected, geometry_ci):
    assert naming.class_name(name, geometry_ci) == expected
    assert naming.enum_variant_name(name) == expected
    assert naming.var_name(name) == expected
    assert NameSanitizer().convert_case(name, NamingCase.PASCAL_CASE) == name


def test_raw_var_name_keeps_keywords():
    assert naming.var_name_raw("default") == "default"
    assert naming.var_name_raw("return_value") == "returnValue"


def test_function_and_setter_names():
    assert naming.fn_name("open_remote") == "openRemote"
    assert naming.setter("user_name") == "setUserName"


def test_class_name_converts_error_suffix(geometry_ci):
    assert naming.class_name("GeometryError", geometry_ci) == "GeometryException"
    assert naming.class_name("point", geometry_ci) == "Point"


def test_error_suffix_rewrites_bare_error():
    assert naming.convert_error_suffix("Error") == "Exception"
    assert naming.convert_error_suffix("ErrorKind") == "ErrorKind"


def test_variant_names():
    assert naming.enum_variant_name("firstVariant") == "FIRST_VARIANT"
    assert naming.error_variant_name("not_found_error") == "NotFoundException"
    assert naming.error_variant_name("DivideByZero") == "DivideByZero"


def test_ffi_names():
    assert naming.ffi_callback_name("RustFutureContinuationCallback") == (
        "UniffiRustFutureContinuationCallback"
    )
    assert naming.ffi_struct_name("ForeignFuture") == "UniffiForeignFuture"


def test_unquote():
    assert naming.unquote("`value`") == "value"


@pytest.mark.parametrize(
    "package,valid",
    [
        ("com.example", True),
        ("uniffi", True),
        ("com.class", False),
        ("com..example", False),
        ("", False),
    ],
)
def test_validate_package_name(package, valid):
    assert (naming.validate_java_package_name(package) == []) is valid

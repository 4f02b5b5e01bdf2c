import pytest

from bindgen_java.codegen import generate_bindings, quick_generate
from bindgen_java.codegen.core.generator import (
    GeneratorError,
    UnsupportedConstructError,
    generate_code,
)
from bindgen_java.codegen.core.interface import ComponentInterface
from bindgen_java.codegen.languages.java import (
    JavaGenerator,
    UNIFFI_CONTRACT_VERSION,
    create_android_generator,
    create_generator,
    create_quarkus_generator,
    split_units,
)


def _generate(ci, **options):
    result = generate_code(create_generator(**options), ci)
    assert result.success, result.error_message
    return result


def _file(result, name, package_path="uniffi"):
    return result.files[f"{package_path}/{name}.java"]


class TestSplitUnits:
    def test_units_are_keyed_by_top_level_type(self):
        code = (
            "package a;\n\npublic class One {\n  class Nested {}\n}\n"
            "package a;\n\n@Deprecated\nfinal class Two {}\n"
            "package a;\n\npublic sealed interface Three {}\n"
        )
        assert list(split_units(code)) == ["One", "Two", "Three"]

    def test_duplicate_units_are_rejected(self):
        code = "package a;\nclass One {}\npackage a;\nclass One {}\n"
        with pytest.raises(GeneratorError, match="more than once"):
            split_units(code)

    def test_unit_without_type_is_rejected(self):
        with pytest.raises(GeneratorError, match="declares no type"):
            split_units("package a;\n// nothing here\n")


class TestGeometryBindings:
    def test_one_file_per_unit(self, geometry_ci):
        result = _generate(geometry_ci)
        for name in (
            "Point",
            "FfiConverterTypePoint",
            "Shape",
            "FfiConverterTypeShape",
            "GeometryException",
            "GeometryExceptionErrorHandler",
            "FfiConverterTypeGeometryError",
            "FfiConverterSequenceTypePoint",
            "FfiConverterDouble",
            "FfiConverterBoolean",
            "FfiConverterString",
            "Geometry",
            "UniffiAsyncHelpers",
            "NamespaceLibrary",
            "UniffiLib",
            "RustBuffer",
            "UniffiHelpers",
        ):
            assert f"uniffi/{name}.java" in result.files
        for code in result.files.values():
            assert code.startswith("package uniffi;")

    def test_shared_converter_is_rendered_once(self, geometry_ci):
        result = _generate(geometry_ci)
        assert result.code.count("public enum FfiConverterTypePoint ") == 1
        assert result.code.count("public enum FfiConverterString ") == 1

    def test_record_class(self, geometry_ci):
        point = _file(_generate(geometry_ci), "Point")
        assert "public class Point {" in point
        assert "private Double x;" in point
        assert "public void setY(Double y)" in point
        assert " * A point in the plane." in point

    def test_immutable_record(self, geometry_ci):
        point = _file(_generate(geometry_ci, generate_immutable_records=True), "Point")
        assert "public record Point(" in point
        assert "setX" not in point

    def test_keyword_arguments_are_escaped(self, geometry_ci):
        functions = _file(_generate(geometry_ci), "Geometry")
        assert "public static Point midpoint(Point a, Point _class)" in functions
        assert "FfiConverterTypePoint.INSTANCE.lower(_class)" in functions

    def test_top_level_functions(self, geometry_ci):
        functions = _file(_generate(geometry_ci), "Geometry")
        assert "public final class Geometry {" in functions
        assert "private Geometry() {}" in functions
        assert "public static Double distance(Point a, Point b) {" in functions
        assert "UniffiLib.getInstance().uniffi_geometry_fn_func_distance(" in functions
        assert " * Distance between two points." in functions

    def test_throwing_function(self, geometry_ci):
        functions = _file(_generate(geometry_ci), "Geometry")
        assert "public static Double slope(Point a, Point b) throws GeometryException {" in functions
        assert "uniffiRustCallWithError(new GeometryExceptionErrorHandler()" in functions

    def test_async_function(self, geometry_ci):
        functions = _file(_generate(geometry_ci), "Geometry")
        assert "public static CompletableFuture<Boolean> isConvex(List<Point> points) {" in functions
        assert "UniffiAsyncHelpers.uniffiRustCallAsync(" in functions
        assert "ffi_geometry_rust_future_poll_i8" in functions
        assert "(it) -> FfiConverterBoolean.INSTANCE.lift(it)" in functions

    def test_error_enum(self, geometry_ci):
        result = _generate(geometry_ci)
        error = _file(result, "GeometryException")
        assert "public class GeometryException extends Exception {" in error
        assert "public static class DivideByZero extends GeometryException {" in error
        converter = _file(result, "FfiConverterTypeGeometryError")
        assert "implements FfiConverterRustBuffer<GeometryException>" in converter

    def test_enum_with_fields_is_sealed(self, geometry_ci):
        shape = _file(_generate(geometry_ci), "Shape")
        assert "public sealed interface Shape {" in shape
        assert "record Circle(" in shape

    def test_native_library(self, geometry_ci):
        result = _generate(geometry_ci, cdylib_name="geometry_ffi")
        namespace = _file(result, "NamespaceLibrary")
        assert f"int bindingsContractVersion = {UNIFFI_CONTRACT_VERSION};" in namespace
        assert "lib.ffi_geometry_uniffi_contract_version()" in namespace
        assert 'return "geometry_ffi";' in namespace
        lib = _file(result, "UniffiLib")
        assert "public interface UniffiLib extends Library {" in lib
        assert "CLEANER" not in lib
        assert "Double uniffi_geometry_fn_func_distance(" in lib
        assert "UniffiRustCallStatus uniffi_out_err" in lib

    def test_ffi_structs_and_callbacks(self, geometry_ci):
        result = _generate(geometry_ci)
        assert "uniffi/UniffiRustFutureContinuationCallback.java" in result.files
        foreign_future = _file(result, "UniffiForeignFuture")
        assert '@Structure.FieldOrder({ "handle", "free" })' in foreign_future
        assert "public static class UniffiByValue extends UniffiForeignFuture" in foreign_future

    def test_package_name_sets_paths(self, geometry_ci):
        result = _generate(geometry_ci, package_name="com.example.geo")
        point = result.files["com/example/geo/Point.java"]
        assert point.startswith("package com.example.geo;")

    def test_comments_can_be_disabled(self, geometry_ci):
        point = _file(_generate(geometry_ci, add_comments=False), "Point")
        assert "A point in the plane." not in point

    def test_metadata(self, geometry_ci):
        result = _generate(geometry_ci)
        assert result.metadata["language"] == "java"
        assert result.metadata["namespace"] == "geometry"
        assert result.metadata["has_async"] is True
        assert result.metadata["file_count"] == len(result.files)


class TestServicesBindings:
    def test_object(self, services_ci):
        result = _generate(services_ci)
        store = _file(result, "Store")
        assert "public class Store implements AutoCloseable, StoreInterface {" in store
        assert "public Store(String path) {" in store
        assert "public static Store inMemory() {" in store
        assert "public static CompletableFuture<Store> openRemote(String url) {" in store
        assert "(it) -> new Store(it)" in store
        assert "uniffi_services_fn_free_store(pointer, status)" in store
        assert "public CompletableFuture<Void> sync() {" in store
        assert "uniffiRustCallAsyncVoid(" in store
        assert "uniffi/StoreInterface.java" in result.files

    def test_cleaner_defaults_to_java_lang_ref(self, services_ci):
        result = _generate(services_ci)
        assert "uniffi/JavaLangRefCleaner.java" in result.files
        assert "uniffi/UniffiJnaCleaner.java" not in result.files
        assert "UniffiCleaner CLEANER = UniffiCleaner.create();" in _file(result, "UniffiLib")

    def test_android_cleaner(self, services_ci):
        result = generate_code(create_android_generator(), services_ci)
        assert result.success, result.error_message
        assert "uniffi/UniffiJnaCleaner.java" in result.files
        assert "uniffi/JavaLangRefCleaner.java" not in result.files

    def test_quarkus_annotations(self, services_ci):
        result = generate_code(create_quarkus_generator(), services_ci)
        assert result.success, result.error_message
        entry = _file(result, "Entry")
        assert "import io.quarkus.runtime.annotations.RegisterForReflection;" in entry
        assert "@RegisterForReflection" in entry
        assert "@RegisterForProxy" in _file(result, "AutoCloseableHelper")

    def test_callback_interface(self, services_ci):
        result = _generate(services_ci)
        assert "public interface Logger {" in _file(result, "Logger")
        impl = _file(result, "UniffiCallbackInterfaceLogger")
        assert "final class UniffiCallbackInterfaceLogger {" in impl
        assert "implements UniffiCallbackInterfaceLoggerMethod0" in impl
        assert "FfiConverterTypeLogger.INSTANCE.handleMap.get(uniffiHandle)" in impl
        assert "lib.uniffi_services_fn_init_callback_vtable_logger(vtable);" in impl
        converter = _file(result, "FfiConverterTypeLogger")
        assert "extends FfiConverterCallbackInterface<Logger>" in converter
        lib = _file(result, "UniffiLib")
        assert "UniffiCallbackInterfaceLogger.INSTANCE.register(lib);" in lib
        assert "UniffiCallbackInterfaceListener.INSTANCE.register(lib);" in lib

    def test_callback_trait_object(self, services_ci):
        result = _generate(services_ci)
        assert "public interface Listener {" in _file(result, "Listener")
        impl = _file(result, "ListenerImpl")
        assert "public class ListenerImpl implements AutoCloseable, Listener {" in impl
        converter = _file(result, "FfiConverterTypeListener")
        assert "new Pointer(handleMap.insert(value))" in converter

    def test_enum_with_discriminants(self, services_ci):
        level = _file(_generate(services_ci), "Level")
        assert "LOW((byte) 1)," in level
        assert "HIGH((byte) 2);" in level
        assert "public final byte value;" in level

    def test_large_unsigned_discriminant_fits_java_int(self):
        ci = ComponentInterface.from_dict(
            {
                "namespace": "app",
                "enums": [
                    {
                        "name": "Big",
                        "discr_type": "u32",
                        "variants": [
                            {"name": "Low", "discr": {"kind": "uint", "value": 1}},
                            {"name": "High", "discr": {"kind": "uint", "value": 3000000000}},
                        ],
                    }
                ],
            }
        )
        big = _file(_generate(ci), "Big")
        assert "HIGH((int) -1294967296);" in big
        assert "3000000000" not in big

    def test_custom_type_without_config(self, services_ci):
        result = _generate(services_ci)
        assert "public record Url(" in _file(result, "Url")
        converter = _file(result, "FfiConverterTypeUrl")
        assert "return new Url(builtinValue);" in converter
        assert "FfiConverter<Handle, Long>" in _file(result, "FfiConverterTypeHandle")

    def test_custom_type_with_config(self, services_ci):
        result = _generate(
            services_ci,
            custom_types={
                "Url": {
                    "type_name": "URI",
                    "imports": ["java.net.URI"],
                    "lift": "URI.create({})",
                    "lower": "{}.toString()",
                }
            },
        )
        url = _file(result, "Url")
        assert "URI value" in url
        assert "import java.net.URI;" in url
        converter = _file(result, "FfiConverterTypeUrl")
        assert "return new Url(URI.create(builtinValue));" in converter

    def test_builtin_helpers(self, services_ci):
        result = _generate(services_ci)
        for name in (
            "FfiConverterTimestamp",
            "FfiConverterDuration",
            "FfiConverterByteArray",
            "FfiConverterOptionalMap6StringLong",
            "FfiConverterMap6StringLong",
            "FfiConverterOptionalTypeEntry",
        ):
            assert f"uniffi/{name}.java" in result.files


class TestExternalTypes:
    def test_external_types_are_qualified(self, external_ci):
        result = _generate(external_ci, external_packages={"shared": "com.example.shared"})
        functions = _file(result, "App")
        assert "public static CompletableFuture<com.example.shared.Thing> fetch() {" in functions
        assert "com.example.shared.RustBuffer.create(" in functions
        assert "com.example.shared.FfiConverterTypeThing.INSTANCE.lower(thing)" in functions
        lib = _file(result, "UniffiLib")
        assert "com.example.shared.RustBuffer.ByValue thing" in lib
        assert "uniffi/Thing.java" not in result.files

    def test_external_error_is_rejected(self):
        ci = ComponentInterface.from_dict(
            {
                "namespace": "app",
                "functions": [
                    {
                        "name": "risky",
                        "throws": {"kind": "enum", "name": "SharedError", "module_path": "shared"},
                    }
                ],
            }
        )
        result = generate_code(create_generator(), ci)
        assert not result.success
        assert isinstance(result.exception, UnsupportedConstructError)
        assert "risky" in result.error_message


def test_async_callback_method_is_rejected():
    ci = ComponentInterface.from_dict(
        {
            "namespace": "app",
            "callback_interfaces": [
                {"name": "Fetcher", "methods": [{"name": "fetch", "is_async": True}]}
            ],
        }
    )
    result = generate_code(JavaGenerator(), ci)
    assert not result.success
    assert "Fetcher.fetch" in result.error_message


def test_validation_warnings():
    ci = ComponentInterface.from_dict(
        {"namespace": "app", "records": [{"name": "Empty"}]}
    )
    result = generate_code(JavaGenerator(), ci)
    assert result.success
    assert result.warnings == ["Record 'Empty' has no fields"]


def test_generate_bindings_accepts_dicts(geometry_data):
    result = generate_bindings(geometry_data, "jvm", {"package_name": "com.geo"})
    assert result.success, result.error_message
    assert "com/geo/Point.java" in result.files


def test_generate_bindings_reports_bad_input():
    assert not generate_bindings({"records": []}).success
    assert not generate_bindings({"namespace": "x"}, language="cobol").success


def test_quick_generate(geometry_data):
    code = quick_generate(geometry_data, package_name="com.geo")
    assert "package com.geo;" in code
    with pytest.raises(RuntimeError):
        quick_generate({"namespace": "x"}, language="cobol")

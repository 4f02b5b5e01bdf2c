"""
Java (JNA) renderings of native-boundary types.

Every FFI type has an object representation (boxed, used in interfaces),
a primitive representation (unboxed where Java allows it), a by-reference
representation (for out-parameters) and a default value (for error
returns and struct initialisation).
"""

from ...core.ffi import FfiType, FfiTypeKind
from ...core.generator import UnsupportedConstructError
from ...core.interface import ComponentInterface, crate_name_of
from .config import JavaConfig
from .naming import ffi_callback_name, ffi_struct_name
from .packages import package_for

# kind: (object repr, primitive repr, by-reference repr, default value)
_SCALARS = {
    FfiTypeKind.INT8: ("Byte", "byte", "ByteByReference", "(byte)0"),
    FfiTypeKind.UINT8: ("Byte", "byte", "ByteByReference", "(byte)0"),
    FfiTypeKind.INT16: ("Short", "short", "ShortByReference", "(short)0"),
    FfiTypeKind.UINT16: ("Short", "short", "ShortByReference", "(short)0"),
    FfiTypeKind.INT32: ("Integer", "int", "IntByReference", "0"),
    FfiTypeKind.UINT32: ("Integer", "int", "IntByReference", "0"),
    FfiTypeKind.INT64: ("Long", "long", "LongByReference", "0L"),
    FfiTypeKind.UINT64: ("Long", "long", "LongByReference", "0L"),
    FfiTypeKind.FLOAT32: ("Float", "float", "FloatByReference", "0.0f"),
    FfiTypeKind.FLOAT64: ("Double", "double", "DoubleByReference", "0.0"),
    FfiTypeKind.HANDLE: ("Long", "long", "LongByReference", "0L"),
}

_REFERENCE_KINDS = (FfiTypeKind.REFERENCE, FfiTypeKind.MUT_REFERENCE)


def _external_buffer_package(
    ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface
):
    """Package of an external module's RustBuffer, or None for our own."""
    external = ffi_type.external
    if external is None or crate_name_of(external.module_path) == ci.crate_name:
        return None
    return package_for(config, external.module_path, external.name)


def _rust_buffer_label(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    package = _external_buffer_package(ffi_type, config, ci)
    if package is None:
        return "RustBuffer"
    return f"{package}.RustBuffer"


def object_repr(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    """Boxed Java type for an FFI type."""
    kind = ffi_type.kind
    if kind in _SCALARS:
        return _SCALARS[kind][0]
    if kind in (FfiTypeKind.RUST_ARC_PTR, FfiTypeKind.VOID_POINTER):
        return "Pointer"
    if kind == FfiTypeKind.RUST_BUFFER:
        return _rust_buffer_label(ffi_type, config, ci)
    if kind == FfiTypeKind.RUST_CALL_STATUS:
        return "UniffiRustCallStatus.ByValue"
    if kind == FfiTypeKind.FOREIGN_BYTES:
        return "ForeignBytes.ByValue"
    if kind == FfiTypeKind.CALLBACK:
        return ffi_callback_name(ffi_type.name)
    if kind == FfiTypeKind.STRUCT:
        return ffi_struct_name(ffi_type.name)
    if kind in _REFERENCE_KINDS:
        return by_reference_repr(ffi_type.inner, config, ci)
    raise UnsupportedConstructError(f"No Java representation for {ffi_type.describe()}")


def primitive_repr(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    """Unboxed Java type where one exists, else the object representation."""
    if ffi_type.kind in _SCALARS:
        return _SCALARS[ffi_type.kind][1]
    return object_repr(ffi_type, config, ci)


def by_reference_repr(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    """
    JNA type for passing an FFI value by reference.

    Raises:
        UnsupportedConstructError: For types JNA cannot pass by reference,
            including references to references
    """
    kind = ffi_type.kind
    if kind in _SCALARS:
        return _SCALARS[kind][2]
    if kind == FfiTypeKind.RUST_ARC_PTR:
        return "PointerByReference"
    # JNA structures are passed by reference unless marked ByValue
    if kind in (FfiTypeKind.RUST_BUFFER, FfiTypeKind.STRUCT):
        return object_repr(ffi_type, config, ci)
    raise UnsupportedConstructError(
        f"{ffi_type.describe()} cannot be passed by reference"
    )


def default_value(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    """Java expression for the zero value of an FFI type."""
    kind = ffi_type.kind
    if kind in _SCALARS:
        return _SCALARS[kind][3]
    if kind in (FfiTypeKind.RUST_ARC_PTR, FfiTypeKind.VOID_POINTER):
        return "Pointer.NULL"
    if kind == FfiTypeKind.RUST_BUFFER:
        return f"new {_rust_buffer_label(ffi_type, config, ci)}.ByValue()"
    if kind == FfiTypeKind.RUST_CALL_STATUS:
        return "new UniffiRustCallStatus.ByValue()"
    if kind == FfiTypeKind.FOREIGN_BYTES:
        return "new ForeignBytes.ByValue()"
    if kind == FfiTypeKind.STRUCT:
        return f"new {ffi_struct_name(ffi_type.name)}.UniffiByValue()"
    if kind in (FfiTypeKind.CALLBACK,) + _REFERENCE_KINDS:
        return "null"
    raise UnsupportedConstructError(f"No default value for {ffi_type.describe()}")


def by_value_repr(
    ffi_type: FfiType,
    config: JavaConfig,
    ci: ComponentInterface,
    prefer_primitive: bool = False,
) -> str:
    """Java type for passing an FFI value by value (JNA ``ByValue`` structures)."""
    if ffi_type.kind == FfiTypeKind.RUST_BUFFER:
        return f"{object_repr(ffi_type, config, ci)}.ByValue"
    if ffi_type.kind == FfiTypeKind.STRUCT:
        return f"{ffi_struct_name(ffi_type.name)}.UniffiByValue"
    if prefer_primitive:
        return primitive_repr(ffi_type, config, ci)
    return object_repr(ffi_type, config, ci)


def struct_field_repr(ffi_type: FfiType, config: JavaConfig, ci: ComponentInterface) -> str:
    """
    Java type of a field inside a JNA structure.

    Callback fields stay nullable; everything else uses the primitive
    by-value form so the structure has usable defaults.
    """
    if ffi_type.kind == FfiTypeKind.CALLBACK:
        return ffi_callback_name(ffi_type.name)
    return by_value_repr(ffi_type, config, ci, prefer_primitive=True)

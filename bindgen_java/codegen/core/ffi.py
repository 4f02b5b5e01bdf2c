"""
Native-boundary (FFI) type system.

Describes how values are represented when crossing into native code and
derives, from a component interface, the full set of native functions,
callback signatures and marshaled structs that bindings must declare.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Iterator
from enum import Enum

from .interface import (
    Callable,
    ComponentInterface,
    Constructor,
    Method,
    Type,
    TypeKind,
)


class FfiTypeKind(Enum):
    """Every variant of the native-boundary type algebra."""

    INT8 = "i8"
    UINT8 = "u8"
    INT16 = "i16"
    UINT16 = "u16"
    INT32 = "i32"
    UINT32 = "u32"
    INT64 = "i64"
    UINT64 = "u64"
    FLOAT32 = "f32"
    FLOAT64 = "f64"
    HANDLE = "handle"
    RUST_ARC_PTR = "rust_arc_ptr"
    RUST_BUFFER = "rust_buffer"
    FOREIGN_BYTES = "foreign_bytes"
    CALLBACK = "callback"
    STRUCT = "struct"
    RUST_CALL_STATUS = "rust_call_status"
    VOID_POINTER = "void_pointer"
    REFERENCE = "reference"
    MUT_REFERENCE = "mut_reference"


SCALAR_FFI_KINDS = frozenset(
    {
        FfiTypeKind.INT8,
        FfiTypeKind.UINT8,
        FfiTypeKind.INT16,
        FfiTypeKind.UINT16,
        FfiTypeKind.INT32,
        FfiTypeKind.UINT32,
        FfiTypeKind.INT64,
        FfiTypeKind.UINT64,
        FfiTypeKind.FLOAT32,
        FfiTypeKind.FLOAT64,
        FfiTypeKind.HANDLE,
    }
)


@dataclass(frozen=True)
class ExternalFfiMetadata:
    """Origin of a buffer owned by another module's bindings."""

    name: str
    module_path: str


@dataclass(frozen=True)
class FfiType:
    """Immutable native-boundary type."""

    kind: FfiTypeKind
    name: Optional[str] = None
    inner: Optional["FfiType"] = None
    external: Optional[ExternalFfiMetadata] = None

    @classmethod
    def scalar(cls, kind: FfiTypeKind) -> "FfiType":
        if kind not in SCALAR_FFI_KINDS:
            raise ValueError(f"Not a scalar FFI kind: {kind}")
        return cls(kind)

    @classmethod
    def rust_arc_ptr(cls, name: str) -> "FfiType":
        return cls(FfiTypeKind.RUST_ARC_PTR, name=name)

    @classmethod
    def rust_buffer(cls, external: Optional[ExternalFfiMetadata] = None) -> "FfiType":
        return cls(FfiTypeKind.RUST_BUFFER, external=external)

    @classmethod
    def callback(cls, name: str) -> "FfiType":
        return cls(FfiTypeKind.CALLBACK, name=name)

    @classmethod
    def struct(cls, name: str) -> "FfiType":
        return cls(FfiTypeKind.STRUCT, name=name)

    @classmethod
    def reference(cls, inner: "FfiType") -> "FfiType":
        return cls(FfiTypeKind.REFERENCE, inner=inner)

    @classmethod
    def mut_reference(cls, inner: "FfiType") -> "FfiType":
        return cls(FfiTypeKind.MUT_REFERENCE, inner=inner)

    def is_scalar(self) -> bool:
        return self.kind in SCALAR_FFI_KINDS

    def describe(self) -> str:
        if self.inner is not None:
            return f"{self.kind.value}<{self.inner.describe()}>"
        if self.name is not None:
            return f"{self.kind.value}({self.name})"
        return self.kind.value


RUST_CALL_STATUS = FfiType(FfiTypeKind.RUST_CALL_STATUS)
FOREIGN_BYTES = FfiType(FfiTypeKind.FOREIGN_BYTES)
VOID_POINTER = FfiType(FfiTypeKind.VOID_POINTER)
HANDLE = FfiType.scalar(FfiTypeKind.HANDLE)


@dataclass
class FfiArgument:
    name: str
    type: FfiType


@dataclass
class FfiFunction:
    """A native entry point the bindings declare and call."""

    name: str
    arguments: List[FfiArgument] = field(default_factory=list)
    return_type: Optional[FfiType] = None
    has_rust_call_status_arg: bool = True


@dataclass
class FfiCallbackFunction:
    """A function pointer type the native side calls back through."""

    name: str
    arguments: List[FfiArgument] = field(default_factory=list)
    return_type: Optional[FfiType] = None
    has_rust_call_status_arg: bool = False


@dataclass
class FfiField:
    name: str
    type: FfiType


@dataclass
class FfiStruct:
    """A struct marshaled across the boundary by value or reference."""

    name: str
    fields: List[FfiField] = field(default_factory=list)


_SCALAR_LOWERING = {
    TypeKind.INT8: FfiTypeKind.INT8,
    TypeKind.UINT8: FfiTypeKind.UINT8,
    TypeKind.INT16: FfiTypeKind.INT16,
    TypeKind.UINT16: FfiTypeKind.UINT16,
    TypeKind.INT32: FfiTypeKind.INT32,
    TypeKind.UINT32: FfiTypeKind.UINT32,
    TypeKind.INT64: FfiTypeKind.INT64,
    TypeKind.UINT64: FfiTypeKind.UINT64,
    TypeKind.FLOAT32: FfiTypeKind.FLOAT32,
    TypeKind.FLOAT64: FfiTypeKind.FLOAT64,
    # Booleans cross as a single byte
    TypeKind.BOOLEAN: FfiTypeKind.INT8,
    # Callback interfaces cross as a handle into the foreign handle map
    TypeKind.CALLBACK_INTERFACE: FfiTypeKind.UINT64,
}

_BUFFER_KINDS = frozenset(
    {
        TypeKind.STRING,
        TypeKind.BYTES,
        TypeKind.TIMESTAMP,
        TypeKind.DURATION,
        TypeKind.ENUM,
        TypeKind.RECORD,
        TypeKind.OPTIONAL,
        TypeKind.SEQUENCE,
        TypeKind.MAP,
    }
)


def ffi_type_for(type_: Type, ci: ComponentInterface) -> FfiType:
    """
    Lower an interface type to its native-boundary representation.

    Args:
        type_: Interface type
        ci: Interface the type is used in (decides external ownership)

    Returns:
        FFI type
    """
    kind = type_.kind
    if kind in _SCALAR_LOWERING:
        return FfiType(_SCALAR_LOWERING[kind])
    if kind == TypeKind.OBJECT:
        return FfiType.rust_arc_ptr(type_.name)
    if kind == TypeKind.CUSTOM:
        return ffi_type_for(type_.builtin, ci)
    if kind in _BUFFER_KINDS:
        if type_.is_named() and ci.is_external(type_):
            return FfiType.rust_buffer(
                ExternalFfiMetadata(name=type_.name, module_path=type_.module_path)
            )
        return FfiType.rust_buffer()
    raise ValueError(f"No FFI lowering for {type_.describe()}")


_RETURN_SUFFIXES = {
    FfiTypeKind.INT8: "i8",
    FfiTypeKind.UINT8: "u8",
    FfiTypeKind.INT16: "i16",
    FfiTypeKind.UINT16: "u16",
    FfiTypeKind.INT32: "i32",
    FfiTypeKind.UINT32: "u32",
    FfiTypeKind.INT64: "i64",
    FfiTypeKind.UINT64: "u64",
    FfiTypeKind.HANDLE: "u64",
    FfiTypeKind.FLOAT32: "f32",
    FfiTypeKind.FLOAT64: "f64",
    FfiTypeKind.RUST_ARC_PTR: "pointer",
    FfiTypeKind.RUST_BUFFER: "rust_buffer",
}

# One future family per distinct return representation
FUTURE_RETURN_TYPES: List[Optional[FfiType]] = [
    FfiType.scalar(FfiTypeKind.UINT8),
    FfiType.scalar(FfiTypeKind.INT8),
    FfiType.scalar(FfiTypeKind.UINT16),
    FfiType.scalar(FfiTypeKind.INT16),
    FfiType.scalar(FfiTypeKind.UINT32),
    FfiType.scalar(FfiTypeKind.INT32),
    FfiType.scalar(FfiTypeKind.UINT64),
    FfiType.scalar(FfiTypeKind.INT64),
    FfiType.scalar(FfiTypeKind.FLOAT32),
    FfiType.scalar(FfiTypeKind.FLOAT64),
    FfiType.rust_arc_ptr(""),
    FfiType.rust_buffer(),
    None,
]


def return_type_suffix(ffi_type: Optional[FfiType]) -> str:
    """Suffix distinguishing per-return-type native helpers (``_u8``, ``_void``)."""
    if ffi_type is None:
        return "void"
    try:
        return _RETURN_SUFFIXES[ffi_type.kind]
    except KeyError:
        raise ValueError(f"{ffi_type.describe()} cannot be a return type") from None


def _upper_camel_suffix(ffi_type: Optional[FfiType]) -> str:
    return "".join(part.capitalize() for part in return_type_suffix(ffi_type).split("_"))


class FfiSurface:
    """
    Derives the native declarations needed by the bindings of one interface.

    Names follow the scaffolding conventions: ``uniffi_<crate>_fn_*`` for
    component entry points, ``ffi_<namespace>_*`` for runtime support.
    """

    def __init__(self, ci: ComponentInterface):
        self.ci = ci

    @property
    def _crate(self) -> str:
        return self.ci.crate_name.replace("-", "_")

    def lower(self, type_: Type) -> FfiType:
        return ffi_type_for(type_, self.ci)

    def return_type(self, callable_: Callable) -> Optional[FfiType]:
        """Native return representation of a callable's declared result."""
        if isinstance(callable_, Constructor):
            return FfiType.rust_arc_ptr(callable_.object_name)
        if callable_.return_type is None:
            return None
        return self.lower(callable_.return_type)

    # Names

    def ffi_func_name(self, callable_: Callable) -> str:
        if isinstance(callable_, Constructor):
            obj = callable_.object_name.lower()
            return f"uniffi_{self._crate}_fn_constructor_{obj}_{callable_.name}"
        if isinstance(callable_, Method):
            obj = callable_.object_name.lower()
            return f"uniffi_{self._crate}_fn_method_{obj}_{callable_.name}"
        return f"uniffi_{self._crate}_fn_func_{callable_.name}"

    def object_free_name(self, object_name: str) -> str:
        return f"uniffi_{self._crate}_fn_free_{object_name.lower()}"

    def object_clone_name(self, object_name: str) -> str:
        return f"uniffi_{self._crate}_fn_clone_{object_name.lower()}"

    def init_callback_vtable_name(self, name: str) -> str:
        return f"uniffi_{self._crate}_fn_init_callback_vtable_{name.lower()}"

    def rustbuffer_function_name(self, op: str) -> str:
        return f"ffi_{self.ci.namespace}_rustbuffer_{op}"

    def rust_future_function_name(self, op: str, return_type: Optional[FfiType]) -> str:
        """Name of a future helper: ``op`` is poll, cancel, complete or free."""
        suffix = return_type_suffix(return_type)
        return f"ffi_{self.ci.namespace}_rust_future_{op}_{suffix}"

    def rust_future_poll(self, callable_: Callable) -> str:
        return self.rust_future_function_name("poll", self.return_type(callable_))

    def rust_future_complete(self, callable_: Callable) -> str:
        return self.rust_future_function_name("complete", self.return_type(callable_))

    def rust_future_free(self, callable_: Callable) -> str:
        return self.rust_future_function_name("free", self.return_type(callable_))

    @staticmethod
    def vtable_struct_name(name: str) -> str:
        return f"VTableCallbackInterface{name}"

    @staticmethod
    def vtable_method_callback_name(name: str, index: int) -> str:
        return f"CallbackInterface{name}Method{index}"

    # Declarations

    def function_for(self, callable_: Callable) -> FfiFunction:
        """Native declaration backing a function, method or constructor."""
        arguments = []
        if isinstance(callable_, Method):
            arguments.append(
                FfiArgument("ptr", FfiType.rust_arc_ptr(callable_.object_name))
            )
        arguments.extend(
            FfiArgument(arg.name, self.lower(arg.type)) for arg in callable_.arguments
        )

        if callable_.is_async:
            # Async entry points hand back a future handle and report errors
            # through the completion call instead.
            return FfiFunction(
                name=self.ffi_func_name(callable_),
                arguments=arguments,
                return_type=HANDLE,
                has_rust_call_status_arg=False,
            )
        return FfiFunction(
            name=self.ffi_func_name(callable_),
            arguments=arguments,
            return_type=self.return_type(callable_),
        )

    def _callback_method_owners(self) -> Iterator[tuple]:
        for cbi in self.ci.callback_interfaces:
            if not self.ci.is_external(cbi.as_type()):
                yield cbi.name, cbi.methods
        for obj in self.ci.objects:
            if obj.has_callback_interface():
                yield obj.name, obj.methods

    def vtable_methods(self, name: str, methods: List[Method]) -> List[tuple]:
        """Pair each callback method with the native callback type calling it."""
        result = []
        for index, method in enumerate(methods):
            return_type = None if method.return_type is None else self.lower(method.return_type)
            out_return = (
                VOID_POINTER
                if return_type is None
                else FfiType.mut_reference(return_type)
            )
            arguments = [FfiArgument("uniffi_handle", FfiType.scalar(FfiTypeKind.UINT64))]
            arguments.extend(
                FfiArgument(arg.name, self.lower(arg.type)) for arg in method.arguments
            )
            arguments.append(FfiArgument("uniffi_out_return", out_return))
            callback = FfiCallbackFunction(
                name=self.vtable_method_callback_name(name, index),
                arguments=arguments,
                return_type=None,
                has_rust_call_status_arg=True,
            )
            result.append((method, callback))
        return result

    def functions(self) -> List[FfiFunction]:
        """Every native function the bindings declare."""
        u64 = FfiType.scalar(FfiTypeKind.UINT64)
        buffer = FfiType.rust_buffer()
        functions = [
            FfiFunction(
                self.rustbuffer_function_name("alloc"),
                [FfiArgument("size", u64)],
                buffer,
            ),
            FfiFunction(
                self.rustbuffer_function_name("from_bytes"),
                [FfiArgument("bytes", FOREIGN_BYTES)],
                buffer,
            ),
            FfiFunction(
                self.rustbuffer_function_name("free"),
                [FfiArgument("buf", buffer)],
            ),
            FfiFunction(
                self.rustbuffer_function_name("reserve"),
                [FfiArgument("buf", buffer), FfiArgument("additional", u64)],
                buffer,
            ),
        ]

        for return_type in FUTURE_RETURN_TYPES:
            functions.extend(self._future_functions(return_type))

        for function in self.ci.functions:
            functions.append(self.function_for(function))

        for obj in self.ci.objects:
            ptr = FfiType.rust_arc_ptr(obj.name)
            functions.append(
                FfiFunction(self.object_clone_name(obj.name), [FfiArgument("ptr", ptr)], ptr)
            )
            functions.append(
                FfiFunction(self.object_free_name(obj.name), [FfiArgument("ptr", ptr)])
            )
            for cons in obj.constructors:
                functions.append(self.function_for(cons))
            for meth in obj.methods:
                functions.append(self.function_for(meth))

        for name, _ in self._callback_method_owners():
            vtable = FfiType.reference(FfiType.struct(self.vtable_struct_name(name)))
            functions.append(
                FfiFunction(
                    self.init_callback_vtable_name(name),
                    [FfiArgument("vtable", vtable)],
                    has_rust_call_status_arg=False,
                )
            )

        functions.append(
            FfiFunction(
                f"ffi_{self.ci.namespace}_uniffi_contract_version",
                [],
                FfiType.scalar(FfiTypeKind.UINT32),
                has_rust_call_status_arg=False,
            )
        )
        return functions

    def _future_functions(self, return_type: Optional[FfiType]) -> List[FfiFunction]:
        handle = FfiArgument("handle", HANDLE)
        return [
            FfiFunction(
                self.rust_future_function_name("poll", return_type),
                [
                    handle,
                    FfiArgument("callback", FfiType.callback("RustFutureContinuationCallback")),
                    FfiArgument("callback_data", HANDLE),
                ],
                has_rust_call_status_arg=False,
            ),
            FfiFunction(
                self.rust_future_function_name("cancel", return_type),
                [handle],
                has_rust_call_status_arg=False,
            ),
            FfiFunction(
                self.rust_future_function_name("complete", return_type),
                [handle],
                return_type,
            ),
            FfiFunction(
                self.rust_future_function_name("free", return_type),
                [handle],
                has_rust_call_status_arg=False,
            ),
        ]

    def callbacks(self) -> List[FfiCallbackFunction]:
        """Every callback function-pointer type the bindings declare."""
        u64 = FfiType.scalar(FfiTypeKind.UINT64)
        callbacks = [
            FfiCallbackFunction(
                "RustFutureContinuationCallback",
                [
                    FfiArgument("data", u64),
                    FfiArgument("poll_result", FfiType.scalar(FfiTypeKind.INT8)),
                ],
            ),
            FfiCallbackFunction("ForeignFutureFree", [FfiArgument("handle", u64)]),
            FfiCallbackFunction("CallbackInterfaceFree", [FfiArgument("handle", u64)]),
        ]
        for return_type in FUTURE_RETURN_TYPES:
            suffix = _upper_camel_suffix(return_type)
            callbacks.append(
                FfiCallbackFunction(
                    f"ForeignFutureComplete{suffix}",
                    [
                        FfiArgument("callback_data", u64),
                        FfiArgument("result", FfiType.struct(f"ForeignFutureStruct{suffix}")),
                    ],
                )
            )
        for name, methods in self._callback_method_owners():
            callbacks.extend(cb for _, cb in self.vtable_methods(name, methods))
        return callbacks

    def structs(self) -> List[FfiStruct]:
        """Every struct type the bindings declare."""
        u64 = FfiType.scalar(FfiTypeKind.UINT64)
        structs = [
            FfiStruct(
                "ForeignFuture",
                [
                    FfiField("handle", u64),
                    FfiField("free", FfiType.callback("ForeignFutureFree")),
                ],
            )
        ]
        for return_type in FUTURE_RETURN_TYPES:
            fields = []
            if return_type is not None:
                fields.append(FfiField("return_value", return_type))
            fields.append(FfiField("call_status", RUST_CALL_STATUS))
            structs.append(
                FfiStruct(f"ForeignFutureStruct{_upper_camel_suffix(return_type)}", fields)
            )
        for name, methods in self._callback_method_owners():
            fields = [
                FfiField(method.name, FfiType.callback(callback.name))
                for method, callback in self.vtable_methods(name, methods)
            ]
            fields.append(FfiField("uniffi_free", FfiType.callback("CallbackInterfaceFree")))
            structs.append(FfiStruct(self.vtable_struct_name(name), fields))
        return structs

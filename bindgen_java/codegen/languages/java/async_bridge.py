"""
Java closures that drive native futures for async callables.

Async calls hand back a future handle; the generated Java polls it,
completes it to obtain the result and frees it, each through a lambda
bound to the native helper for the callable's return representation.
"""

from typing import Optional

from ...core.ffi import FfiSurface, FfiTypeKind, ffi_type_for
from ...core.interface import Callable, ComponentInterface
from .config import JavaConfig
from .packages import package_for
from .types import resolve


def async_inner_return_type(
    callable_: Callable, ci: ComponentInterface, config: JavaConfig
) -> str:
    """Java type the future resolves to (``Void`` when nothing is returned)."""
    if callable_.return_type is None:
        return "Void"
    return resolve(callable_.return_type).type_label(ci, config)


def async_return_type(
    callable_: Callable, ci: ComponentInterface, config: JavaConfig
) -> str:
    """Declared Java return type: wrapped in ``CompletableFuture`` when async."""
    inner = async_inner_return_type(callable_, ci, config)
    if callable_.is_async:
        return f"CompletableFuture<{inner}>"
    return inner


def async_poll(callable_: Callable, ci: ComponentInterface) -> str:
    ffi_func = FfiSurface(ci).rust_future_poll(callable_)
    return (
        "(future, callback, continuation) -> "
        f"UniffiLib.getInstance().{ffi_func}(future, callback, continuation)"
    )


def _external_buffer_package(
    callable_: Callable, ci: ComponentInterface, config: JavaConfig
) -> Optional[str]:
    return_type = callable_.return_type
    if return_type is None or not ci.is_external(return_type):
        return None
    ffi_type = ffi_type_for(return_type, ci)
    if ffi_type.kind != FfiTypeKind.RUST_BUFFER or ffi_type.external is None:
        return None
    return package_for(config, ffi_type.external.module_path, ffi_type.external.name)


def async_complete(
    callable_: Callable, ci: ComponentInterface, config: JavaConfig
) -> str:
    """
    Lambda completing a future.

    A buffer returned for an external type is allocated by our library but
    read by the other module's converters, so it is rewrapped as that
    module's ``RustBuffer``.
    """
    ffi_func = FfiSurface(ci).rust_future_complete(callable_)
    call = f"UniffiLib.getInstance().{ffi_func}(future, continuation)"

    package = _external_buffer_package(callable_, ci, config)
    if package is None:
        return f"(future, continuation) -> {call}"
    return (
        "(future, continuation) -> {\n"
        f"    var result = {call};\n"
        f"    return {package}.RustBuffer.create(result.capacity, result.len, result.data);\n"
        "}"
    )


def async_free(callable_: Callable, ci: ComponentInterface) -> str:
    ffi_func = FfiSurface(ci).rust_future_free(callable_)
    return f"(future) -> UniffiLib.getInstance().{ffi_func}(future)"

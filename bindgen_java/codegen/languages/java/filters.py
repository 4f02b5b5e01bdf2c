"""
Template filters for the Java generator.

Filters are bound to one interface and one configuration, so templates
can write ``field|type_name`` instead of threading both through every
call.
"""

import textwrap
from typing import Any, Callable, Dict, Tuple

from ...core.ffi import FfiSurface, FfiType, ffi_type_for
from ...core.interface import ComponentInterface, EnumDefinition, ObjectDefinition, Type
from . import async_bridge, ffi_types, naming
from .config import JavaConfig
from .types import CodeType, resolve, variant_discr_literal


def as_type(value: Any) -> Type:
    """Get the interface type of a type, field, argument or definition."""
    if isinstance(value, Type):
        return value
    if hasattr(value, "as_type"):
        return value.as_type()
    type_ = getattr(value, "type", None)
    if isinstance(type_, Type):
        return type_
    raise TypeError(f"{value!r} has no interface type")


def docstring(text: str, spaces: int = 0) -> str:
    """Render a docstring as a Javadoc block indented by ``spaces``."""
    body = textwrap.indent(textwrap.dedent(text).strip("\n"), " * ", lambda line: True)
    block = f"/**\n{body}\n */"
    return textwrap.indent(block, " " * spaces)


class JavaFilters:
    """Filters and globals for one generation run."""

    def __init__(self, ci: ComponentInterface, config: JavaConfig):
        self.ci = ci
        self.config = config
        self.ffi = FfiSurface(ci)

    def code_type(self, value: Any) -> CodeType:
        return resolve(as_type(value))

    # Type descriptors

    def type_name(self, value: Any) -> str:
        return self.code_type(value).type_label(self.ci, self.config)

    def canonical_name(self, value: Any) -> str:
        return self.code_type(value).canonical_name()

    def ffi_converter_name(self, value: Any) -> str:
        return self.code_type(value).ffi_converter_name()

    def ffi_converter_instance(self, value: Any) -> str:
        return self.code_type(value).ffi_converter_instance(self.config, self.ci)

    def _converter_method(self, method: str) -> Callable[[Any], str]:
        def converter_method(value: Any) -> str:
            return f"{self.ffi_converter_instance(value)}.{method}"

        return converter_method

    def class_name(self, name: str) -> str:
        return naming.class_name(name, self.ci)

    def object_names(self, obj: ObjectDefinition) -> Tuple[str, str]:
        """
        Interface name and implementation class name of an object.

        Objects foreign code may implement expose the plain name as the
        interface; otherwise the plain name is the concrete class.
        """
        name = naming.class_name(obj.name, self.ci)
        if obj.has_callback_interface():
            return name, f"{name}Impl"
        return f"{name}Interface", name

    def variant_discr_literal(self, enum: EnumDefinition, index: int) -> str:
        return variant_discr_literal(enum, index)

    # Native boundary

    def ffi_type(self, value: Any) -> FfiType:
        return ffi_type_for(as_type(value), self.ci)

    def ffi_type_name(self, ffi_type: FfiType) -> str:
        return ffi_types.object_repr(ffi_type, self.config, self.ci)

    def ffi_type_name_primitive(self, ffi_type: FfiType) -> str:
        return ffi_types.primitive_repr(ffi_type, self.config, self.ci)

    def ffi_type_name_by_reference(self, ffi_type: FfiType) -> str:
        return ffi_types.by_reference_repr(ffi_type, self.config, self.ci)

    def ffi_type_name_by_value(self, ffi_type: FfiType) -> str:
        return ffi_types.by_value_repr(ffi_type, self.config, self.ci)

    def ffi_type_name_for_ffi_struct(self, ffi_type: FfiType) -> str:
        return ffi_types.struct_field_repr(ffi_type, self.config, self.ci)

    def ffi_default_value(self, ffi_type: FfiType) -> str:
        return ffi_types.default_value(ffi_type, self.config, self.ci)

    def ffi_return_type(self, ffi_type: Any) -> str:
        """Return type of a native declaration (``void`` when absent)."""
        if ffi_type is None:
            return "void"
        return self.ffi_type_name_by_value(ffi_type)

    # Async

    def async_inner_return_type(self, callable_) -> str:
        return async_bridge.async_inner_return_type(callable_, self.ci, self.config)

    def async_return_type(self, callable_) -> str:
        return async_bridge.async_return_type(callable_, self.ci, self.config)

    def async_poll(self, callable_) -> str:
        return async_bridge.async_poll(callable_, self.ci)

    def async_complete(self, callable_) -> str:
        return async_bridge.async_complete(callable_, self.ci, self.config)

    def async_free(self, callable_) -> str:
        return async_bridge.async_free(callable_, self.ci)

    def ffi_func_name(self, callable_) -> str:
        return self.ffi.ffi_func_name(callable_)

    def as_filters(self) -> Dict[str, Callable]:
        """All filters, keyed by the name templates use."""
        return {
            "type_name": self.type_name,
            "canonical_name": self.canonical_name,
            "ffi_converter_name": self.ffi_converter_name,
            "ffi_converter_instance": self.ffi_converter_instance,
            "lower_fn": self._converter_method("lower"),
            "lift_fn": self._converter_method("lift"),
            "read_fn": self._converter_method("read"),
            "write_fn": self._converter_method("write"),
            "allocation_size_fn": self._converter_method("allocationSize"),
            "class_name": self.class_name,
            "fn_name": naming.fn_name,
            "var_name": naming.var_name,
            "setter": naming.setter,
            "variant_name": lambda variant: naming.enum_variant_name(variant.name),
            "error_variant_name": lambda variant: naming.error_variant_name(variant.name),
            "ffi_callback_name": naming.ffi_callback_name,
            "ffi_struct_name": naming.ffi_struct_name,
            "unquote": naming.unquote,
            "object_names": self.object_names,
            "variant_discr_literal": self.variant_discr_literal,
            "ffi_type": self.ffi_type,
            "ffi_type_name": self.ffi_type_name,
            "ffi_type_name_primitive": self.ffi_type_name_primitive,
            "ffi_type_name_by_reference": self.ffi_type_name_by_reference,
            "ffi_type_name_by_value": self.ffi_type_name_by_value,
            "ffi_type_name_for_ffi_struct": self.ffi_type_name_for_ffi_struct,
            "ffi_default_value": self.ffi_default_value,
            "ffi_return_type": self.ffi_return_type,
            "ffi_func_name": self.ffi_func_name,
            "async_inner_return_type": self.async_inner_return_type,
            "async_return_type": self.async_return_type,
            "async_poll": self.async_poll,
            "async_complete": self.async_complete,
            "async_free": self.async_free,
            "docstring": docstring,
        }

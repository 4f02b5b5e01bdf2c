"""
Java type system for generated bindings.

Maps every interface type to a stateless ``CodeType`` descriptor that
knows the Java type label, the canonical name used to build helper
identifiers, the converter singleton and any imports or startup hooks.
"""

from typing import Callable, Dict, List, Optional

from ...core.generator import UnsupportedConstructError
from ...core.interface import (
    ComponentInterface,
    EnumDefinition,
    Literal,
    LiteralKind,
    Type,
    TypeKind,
    ObjectImpl,
    SIGNED_INT_KINDS,
    UNSIGNED_INT_KINDS,
)
from .config import JavaConfig
from .naming import class_name
from .packages import potentially_add_external_package


class CodeType:
    """Base descriptor; all attributes are pure functions of their inputs."""

    def __init__(self, type_: Type):
        self.type_ = type_

    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        raise NotImplementedError

    def canonical_name(self) -> str:
        """Name usable inside other identifiers (``FfiConverter<canonical>``)."""
        raise NotImplementedError

    def ffi_converter_name(self) -> str:
        return f"FfiConverter{self.canonical_name()}"

    def ffi_converter_instance(self, config: JavaConfig, ci: ComponentInterface) -> str:
        return f"{self.ffi_converter_name()}.INSTANCE"

    def imports(self, config: JavaConfig) -> List[str]:
        return []

    def initialization_fn(self) -> Optional[str]:
        """Static hook run when the native library is loaded."""
        return None

    def literal(self, literal: Literal, ci: ComponentInterface, config: JavaConfig) -> str:
        raise UnsupportedConstructError(
            f"Literals are not supported for {self.type_label(ci, config)}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_.describe()})"


class SimpleCodeType(CodeType):
    """Builtin type with a fixed label and canonical name."""

    def __init__(self, type_: Type, label: str, canonical: str):
        super().__init__(type_)
        self._label = label
        self._canonical = canonical

    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        return self._label

    def canonical_name(self) -> str:
        return self._canonical


# kind: (label, canonical name); unsigned kinds share the signed Java type
_SIMPLE_TYPES = {
    TypeKind.INT8: ("Byte", "Byte"),
    TypeKind.UINT8: ("Byte", "Byte"),
    TypeKind.INT16: ("Short", "Short"),
    TypeKind.UINT16: ("Short", "Short"),
    TypeKind.INT32: ("Integer", "Integer"),
    TypeKind.UINT32: ("Integer", "Integer"),
    TypeKind.INT64: ("Long", "Long"),
    TypeKind.UINT64: ("Long", "Long"),
    TypeKind.FLOAT32: ("Float", "Float"),
    TypeKind.FLOAT64: ("Double", "Double"),
    TypeKind.BOOLEAN: ("Boolean", "Boolean"),
    TypeKind.STRING: ("String", "String"),
    TypeKind.BYTES: ("byte[]", "ByteArray"),
    TypeKind.TIMESTAMP: ("java.time.Instant", "Timestamp"),
    TypeKind.DURATION: ("java.time.Duration", "Duration"),
}


class NamedCodeType(CodeType):
    """User-defined type referenced by name, possibly from another module."""

    # Whether the converter singleton lives in the owning module's package
    qualify_converter = True

    @property
    def name(self) -> str:
        return self.type_.name

    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        return potentially_add_external_package(
            config, ci, self.name, class_name(self.name, ci)
        )

    def canonical_name(self) -> str:
        return f"Type{self.name}"

    def ffi_converter_instance(self, config: JavaConfig, ci: ComponentInterface) -> str:
        instance = super().ffi_converter_instance(config, ci)
        if not self.qualify_converter:
            return instance
        return potentially_add_external_package(config, ci, self.name, instance)


class EnumCodeType(NamedCodeType):
    pass


class RecordCodeType(NamedCodeType):
    pass


class ObjectCodeType(NamedCodeType):
    def initialization_fn(self) -> Optional[str]:
        if self.type_.imp == ObjectImpl.CALLBACK_TRAIT:
            return f"UniffiCallbackInterface{self.name}.INSTANCE.register"
        return None


class CallbackInterfaceCodeType(NamedCodeType):
    qualify_converter = False

    def initialization_fn(self) -> Optional[str]:
        return f"UniffiCallbackInterface{self.name}.INSTANCE.register"


class CustomCodeType(NamedCodeType):
    def imports(self, config: JavaConfig) -> List[str]:
        custom = config.custom_types.get(self.name)
        if custom is None:
            return []
        return list(custom.imports)


class OptionalCodeType(CodeType):
    """Java references are nullable, so the label is the inner label."""

    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        return resolve(self.type_.inner).type_label(ci, config)

    def canonical_name(self) -> str:
        return f"Optional{resolve(self.type_.inner).canonical_name()}"

    def imports(self, config: JavaConfig) -> List[str]:
        return resolve(self.type_.inner).imports(config)


class SequenceCodeType(CodeType):
    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        return f"List<{resolve(self.type_.inner).type_label(ci, config)}>"

    def canonical_name(self) -> str:
        return f"Sequence{resolve(self.type_.inner).canonical_name()}"

    def imports(self, config: JavaConfig) -> List[str]:
        return ["java.util.List"] + resolve(self.type_.inner).imports(config)


class MapCodeType(CodeType):
    def type_label(self, ci: ComponentInterface, config: JavaConfig) -> str:
        key = resolve(self.type_.key).type_label(ci, config)
        value = resolve(self.type_.value).type_label(ci, config)
        return f"Map<{key}, {value}>"

    def canonical_name(self) -> str:
        key = resolve(self.type_.key).canonical_name()
        value = resolve(self.type_.value).canonical_name()
        # Key length marks where the key ends: Map<A, BTypeC> != Map<ATypeB, C>
        return f"Map{len(key)}{key}{value}"

    def imports(self, config: JavaConfig) -> List[str]:
        return (
            ["java.util.Map"]
            + resolve(self.type_.key).imports(config)
            + resolve(self.type_.value).imports(config)
        )


def _simple(type_: Type) -> CodeType:
    label, canonical = _SIMPLE_TYPES[type_.kind]
    return SimpleCodeType(type_, label, canonical)


CODE_TYPE_FACTORIES: Dict[TypeKind, Callable[[Type], CodeType]] = {
    **{kind: _simple for kind in _SIMPLE_TYPES},
    TypeKind.ENUM: EnumCodeType,
    TypeKind.RECORD: RecordCodeType,
    TypeKind.OBJECT: ObjectCodeType,
    TypeKind.CALLBACK_INTERFACE: CallbackInterfaceCodeType,
    TypeKind.CUSTOM: CustomCodeType,
    TypeKind.OPTIONAL: OptionalCodeType,
    TypeKind.SEQUENCE: SequenceCodeType,
    TypeKind.MAP: MapCodeType,
}


def resolve(type_: Type) -> CodeType:
    """
    Get the descriptor for an interface type.

    Raises:
        UnsupportedConstructError: If no descriptor is registered for the type kind
    """
    try:
        factory = CODE_TYPE_FACTORIES[type_.kind]
    except KeyError:
        raise UnsupportedConstructError(
            f"No Java mapping registered for {type_.describe()}"
        ) from None
    return factory(type_)


_INT_BITS = {
    TypeKind.INT8: 8,
    TypeKind.UINT8: 8,
    TypeKind.INT16: 16,
    TypeKind.UINT16: 16,
    TypeKind.INT32: 32,
    TypeKind.UINT32: 32,
    TypeKind.INT64: 64,
    TypeKind.UINT64: 64,
}


def variant_discr_literal(enum: EnumDefinition, index: int) -> str:
    """
    Java literal for an enum variant's discriminant.

    Java integers are signed, so unsigned discriminants are written as the
    signed value with the same bits (a ``u8`` of 255 becomes ``-1``);
    64-bit representations get an ``L`` suffix.

    Raises:
        UnsupportedConstructError: If the enum declares no integer
            representation, the discriminant is not an integer, or it does
            not fit the representation
    """
    variant = enum.variants[index]
    literal = enum.variant_discr(index)
    where = f"enum {enum.name}, variant {variant.name}"

    if literal.kind not in (LiteralKind.INT, LiteralKind.UINT):
        raise UnsupportedConstructError(
            f"Only integer discriminants are supported ({where})"
        )
    discr_type = enum.discr_type
    if discr_type is None:
        raise UnsupportedConstructError(
            f"Enum has no discriminant representation defined ({where})"
        )
    if discr_type.kind not in SIGNED_INT_KINDS | UNSIGNED_INT_KINDS:
        raise UnsupportedConstructError(
            f"Discriminant representation must be an integer type ({where})"
        )

    bits = _INT_BITS[discr_type.kind]
    value = int(literal.value)
    if discr_type.kind in UNSIGNED_INT_KINDS:
        low, high = 0, (1 << bits) - 1
    else:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise UnsupportedConstructError(
            f"Discriminant {value} does not fit {discr_type.describe()} ({where})"
        )
    if value > (1 << (bits - 1)) - 1:
        value -= 1 << bits

    text = str(value)
    if bits == 64:
        text += "L"
    return text

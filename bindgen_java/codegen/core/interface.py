"""
Core component interface representation for code generation.

Models the language-neutral description of an exported component: its
type algebra, functions, records, enums, objects and callback interfaces.
Instances are built once by a loader and are read-only for the whole
generation run.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Iterator, Set
from enum import Enum


class TypeKind(Enum):
    """Every variant of the interface type algebra."""

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
    BOOLEAN = "bool"
    STRING = "string"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"
    DURATION = "duration"
    ENUM = "enum"
    RECORD = "record"
    OBJECT = "object"
    CALLBACK_INTERFACE = "callback_interface"
    OPTIONAL = "optional"
    SEQUENCE = "sequence"
    MAP = "map"
    CUSTOM = "custom"


PRIMITIVE_KINDS = frozenset(
    {
        TypeKind.INT8,
        TypeKind.UINT8,
        TypeKind.INT16,
        TypeKind.UINT16,
        TypeKind.INT32,
        TypeKind.UINT32,
        TypeKind.INT64,
        TypeKind.UINT64,
        TypeKind.FLOAT32,
        TypeKind.FLOAT64,
        TypeKind.BOOLEAN,
        TypeKind.STRING,
        TypeKind.BYTES,
        TypeKind.TIMESTAMP,
        TypeKind.DURATION,
    }
)

NAMED_KINDS = frozenset(
    {
        TypeKind.ENUM,
        TypeKind.RECORD,
        TypeKind.OBJECT,
        TypeKind.CALLBACK_INTERFACE,
        TypeKind.CUSTOM,
    }
)

SIGNED_INT_KINDS = frozenset(
    {TypeKind.INT8, TypeKind.INT16, TypeKind.INT32, TypeKind.INT64}
)
UNSIGNED_INT_KINDS = frozenset(
    {TypeKind.UINT8, TypeKind.UINT16, TypeKind.UINT32, TypeKind.UINT64}
)


class ObjectImpl(Enum):
    """How an object type is implemented."""

    STRUCT = "struct"
    TRAIT = "trait"
    CALLBACK_TRAIT = "callback_trait"  # may also be implemented by foreign code


@dataclass(frozen=True)
class Type:
    """
    Immutable, structurally compared interface type.

    Named variants carry the module path of the compilation unit that
    defines them; composite variants carry their inner types.
    """

    kind: TypeKind
    name: Optional[str] = None
    module_path: Optional[str] = None
    inner: Optional["Type"] = None
    key: Optional["Type"] = None
    value: Optional["Type"] = None
    builtin: Optional["Type"] = None
    imp: Optional[ObjectImpl] = None

    @classmethod
    def primitive(cls, kind: TypeKind) -> "Type":
        if kind not in PRIMITIVE_KINDS:
            raise ValueError(f"Not a primitive type kind: {kind}")
        return cls(kind)

    @classmethod
    def enum(cls, name: str, module_path: Optional[str] = None) -> "Type":
        return cls(TypeKind.ENUM, name=name, module_path=module_path)

    @classmethod
    def record(cls, name: str, module_path: Optional[str] = None) -> "Type":
        return cls(TypeKind.RECORD, name=name, module_path=module_path)

    @classmethod
    def object(
        cls,
        name: str,
        module_path: Optional[str] = None,
        imp: ObjectImpl = ObjectImpl.STRUCT,
    ) -> "Type":
        return cls(TypeKind.OBJECT, name=name, module_path=module_path, imp=imp)

    @classmethod
    def callback_interface(cls, name: str, module_path: Optional[str] = None) -> "Type":
        return cls(TypeKind.CALLBACK_INTERFACE, name=name, module_path=module_path)

    @classmethod
    def custom(
        cls, name: str, builtin: "Type", module_path: Optional[str] = None
    ) -> "Type":
        return cls(TypeKind.CUSTOM, name=name, module_path=module_path, builtin=builtin)

    @classmethod
    def optional(cls, inner: "Type") -> "Type":
        return cls(TypeKind.OPTIONAL, inner=inner)

    @classmethod
    def sequence(cls, inner: "Type") -> "Type":
        return cls(TypeKind.SEQUENCE, inner=inner)

    @classmethod
    def map(cls, key: "Type", value: "Type") -> "Type":
        return cls(TypeKind.MAP, key=key, value=value)

    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    def is_named(self) -> bool:
        return self.kind in NAMED_KINDS

    def children(self) -> List["Type"]:
        """Directly nested types."""
        if self.kind in (TypeKind.OPTIONAL, TypeKind.SEQUENCE):
            return [self.inner]
        if self.kind == TypeKind.MAP:
            return [self.key, self.value]
        if self.kind == TypeKind.CUSTOM:
            return [self.builtin]
        return []

    def iter_types(self) -> Iterator["Type"]:
        """Yield this type followed by every type nested inside it."""
        yield self
        for child in self.children():
            yield from child.iter_types()

    def describe(self) -> str:
        """Human readable rendering used in error messages."""
        if self.kind in (TypeKind.OPTIONAL, TypeKind.SEQUENCE):
            return f"{self.kind.value}<{self.inner.describe()}>"
        if self.kind == TypeKind.MAP:
            return f"map<{self.key.describe()}, {self.value.describe()}>"
        if self.is_named():
            return f"{self.kind.value} {self.name}"
        return self.kind.value


class LiteralKind(Enum):
    """Kinds of default-value and discriminant literals."""

    BOOLEAN = "boolean"
    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    ENUM = "enum"
    EMPTY_SEQUENCE = "empty_sequence"
    EMPTY_MAP = "empty_map"
    NONE = "none"


@dataclass(frozen=True)
class Literal:
    """A literal value attached to a field default or enum discriminant."""

    kind: LiteralKind
    value: Any = None
    type: Optional[Type] = None


@dataclass
class Field:
    """A named, typed member of a record, variant or error."""

    name: str
    type: Type
    default: Optional[Literal] = None
    docstring: Optional[str] = None


@dataclass
class Argument:
    """A named, typed callable argument."""

    name: str
    type: Type
    default: Optional[Literal] = None


@dataclass
class Variant:
    """One variant of an enum or error."""

    name: str
    fields: List[Field] = field(default_factory=list)
    discr: Optional[Literal] = None
    docstring: Optional[str] = None

    def has_fields(self) -> bool:
        return bool(self.fields)


@dataclass
class Record:
    """A plain data structure passed by value."""

    name: str
    module_path: str
    fields: List[Field] = field(default_factory=list)
    docstring: Optional[str] = None

    def as_type(self) -> Type:
        return Type.record(self.name, self.module_path)


@dataclass
class EnumDefinition:
    """An enumeration, optionally carrying per-variant fields."""

    name: str
    module_path: str
    variants: List[Variant] = field(default_factory=list)
    discr_type: Optional[Type] = None
    flat: Optional[bool] = None
    docstring: Optional[str] = None

    def as_type(self) -> Type:
        return Type.enum(self.name, self.module_path)

    def is_flat(self) -> bool:
        """Flat enums have no variant carrying fields."""
        if self.flat is not None:
            return self.flat
        return not any(variant.has_fields() for variant in self.variants)

    def variant_discr(self, index: int) -> Literal:
        """
        Get the discriminant of a variant.

        Variants without an explicit discriminant count up from the
        previous one, starting at zero.

        Raises:
            IndexError: If the variant index is out of range
        """
        if index < 0 or index >= len(self.variants):
            raise IndexError(f"Enum {self.name} has no variant at index {index}")

        current = None
        for variant in self.variants[: index + 1]:
            if variant.discr is not None:
                current = variant.discr
            elif current is None:
                current = Literal(LiteralKind.UINT, 0, self.discr_type)
            else:
                current = Literal(current.kind, current.value + 1, current.type)
        return current


class Callable:
    """Shared behaviour of functions, methods and constructors."""

    name: str
    arguments: List[Argument]
    return_type: Optional[Type]
    throws: Optional[Type]
    is_async: bool

    def throws_type(self) -> Optional[Type]:
        return self.throws

    def full_arguments(self) -> List[Argument]:
        return list(self.arguments)


@dataclass
class Function(Callable):
    """A top-level exported function."""

    name: str
    module_path: str
    arguments: List[Argument] = field(default_factory=list)
    return_type: Optional[Type] = None
    throws: Optional[Type] = None
    is_async: bool = False
    docstring: Optional[str] = None


@dataclass
class Method(Callable):
    """A method on an object or callback interface."""

    name: str
    object_name: str
    arguments: List[Argument] = field(default_factory=list)
    return_type: Optional[Type] = None
    throws: Optional[Type] = None
    is_async: bool = False
    docstring: Optional[str] = None


@dataclass
class Constructor(Callable):
    """An object constructor; returns the object's pointer."""

    name: str
    object_name: str
    arguments: List[Argument] = field(default_factory=list)
    throws: Optional[Type] = None
    is_async: bool = False
    docstring: Optional[str] = None
    return_type: Optional[Type] = None

    def is_primary(self) -> bool:
        return self.name == "new"


@dataclass
class ObjectDefinition:
    """An object living on the native side, referenced by pointer."""

    name: str
    module_path: str
    imp: ObjectImpl = ObjectImpl.STRUCT
    constructors: List[Constructor] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    docstring: Optional[str] = None

    def as_type(self) -> Type:
        return Type.object(self.name, self.module_path, self.imp)

    def has_callback_interface(self) -> bool:
        return self.imp == ObjectImpl.CALLBACK_TRAIT

    def primary_constructor(self) -> Optional[Constructor]:
        for cons in self.constructors:
            if cons.is_primary():
                return cons
        return None

    def alternate_constructors(self) -> List[Constructor]:
        return [cons for cons in self.constructors if not cons.is_primary()]


@dataclass
class CallbackInterfaceDefinition:
    """An interface implemented by foreign code and called from native code."""

    name: str
    module_path: str
    methods: List[Method] = field(default_factory=list)
    docstring: Optional[str] = None

    def as_type(self) -> Type:
        return Type.callback_interface(self.name, self.module_path)


@dataclass
class CustomTypeDefinition:
    """A named type represented on the wire by a builtin type."""

    name: str
    module_path: str
    builtin: Type
    docstring: Optional[str] = None

    def as_type(self) -> Type:
        return Type.custom(self.name, self.builtin, self.module_path)


def crate_name_of(module_path: str) -> str:
    """The root compilation unit of a module path (``crate::sub`` -> ``crate``)."""
    return module_path.split("::")[0]


class ComponentInterface:
    """Read-only view over everything a component exports."""

    def __init__(
        self,
        namespace: str,
        crate_name: Optional[str] = None,
        functions: Optional[List[Function]] = None,
        records: Optional[List[Record]] = None,
        enums: Optional[List[EnumDefinition]] = None,
        objects: Optional[List[ObjectDefinition]] = None,
        callback_interfaces: Optional[List[CallbackInterfaceDefinition]] = None,
        custom_types: Optional[List[CustomTypeDefinition]] = None,
        errors: Optional[Set[str]] = None,
        external_types: Optional[List[Type]] = None,
        docstring: Optional[str] = None,
    ):
        """
        Initialize component interface.

        Args:
            namespace: Namespace used for FFI symbol names
            crate_name: Root module owning the local types (defaults to namespace)
            functions: Top-level functions
            records: Record definitions
            enums: Enum definitions (including error enums)
            objects: Object definitions
            callback_interfaces: Callback interface definitions
            custom_types: Custom type definitions
            errors: Names of types used as errors
            external_types: Types from other modules referenced by this one
            docstring: Namespace documentation
        """
        self.namespace = namespace
        self.crate_name = crate_name or namespace
        self.functions = functions or []
        self.records = records or []
        self.enums = enums or []
        self.objects = objects or []
        self.callback_interfaces = callback_interfaces or []
        self.custom_types = custom_types or []
        self.external_types = external_types or []
        self.docstring = docstring
        self._errors = set(errors or ())

        self._types = self._collect_types()

    # Type walking

    def _collect_types(self) -> Dict[Type, None]:
        """Collect every reachable type, deduplicated, in first-seen order."""
        seen: Dict[Type, None] = {}

        def add(type_: Optional[Type]):
            if type_ is None:
                return
            for nested in type_.iter_types():
                seen.setdefault(nested, None)

        for definition in self._definitions():
            add(definition.as_type())
        for record in self.records:
            for fld in record.fields:
                add(fld.type)
        for enum in self.enums:
            if enum.discr_type is not None:
                add(enum.discr_type)
            for variant in enum.variants:
                for fld in variant.fields:
                    add(fld.type)
        for callable_ in self.iter_callables():
            for arg in callable_.arguments:
                add(arg.type)
            add(callable_.return_type)
            add(callable_.throws)
        for type_ in self.external_types:
            add(type_)
        return seen

    def _definitions(self) -> Iterator[Any]:
        yield from self.records
        yield from self.enums
        yield from self.objects
        yield from self.callback_interfaces
        yield from self.custom_types

    def iter_callables(self) -> Iterator[Callable]:
        """Yield every function, constructor and method."""
        yield from self.functions
        for obj in self.objects:
            yield from obj.constructors
            yield from obj.methods
        for cbi in self.callback_interfaces:
            yield from cbi.methods

    def iter_types(self) -> Iterator[Type]:
        """Yield every type used anywhere in the interface."""
        return iter(list(self._types))

    def iter_local_types(self) -> Iterator[Type]:
        """Yield every type owned by this interface."""
        return (t for t in self._types if not self.is_external(t))

    def iter_external_types(self) -> Iterator[Type]:
        """Yield every type owned by another module."""
        return (t for t in self._types if self.is_external(t))

    def get_type(self, name: str) -> Optional[Type]:
        """Find a named type by name."""
        for type_ in self._types:
            if type_.is_named() and type_.name == name:
                return type_
        return None

    def is_external(self, type_: Type) -> bool:
        """Whether a type is defined in a different compilation module."""
        if not type_.is_named() or type_.module_path is None:
            return False
        return crate_name_of(type_.module_path) != self.crate_name

    def is_name_used_as_error(self, name: str) -> bool:
        """Whether a type name is thrown by some callable or declared as an error."""
        if name in self._errors:
            return True
        return any(
            callable_.throws is not None and callable_.throws.name == name
            for callable_ in self.iter_callables()
        )

    # Definition lookup

    def get_record_definition(self, name: str) -> Optional[Record]:
        return next((r for r in self.records if r.name == name), None)

    def get_enum_definition(self, name: str) -> Optional[EnumDefinition]:
        return next((e for e in self.enums if e.name == name), None)

    def get_object_definition(self, name: str) -> Optional[ObjectDefinition]:
        return next((o for o in self.objects if o.name == name), None)

    def get_callback_interface_definition(
        self, name: str
    ) -> Optional[CallbackInterfaceDefinition]:
        return next((c for c in self.callback_interfaces if c.name == name), None)

    def get_custom_type_definition(self, name: str) -> Optional[CustomTypeDefinition]:
        return next((c for c in self.custom_types if c.name == name), None)

    def has_async_callables(self) -> bool:
        return any(callable_.is_async for callable_ in self.iter_callables())

    def contains_object_references(self, type_: Type) -> bool:
        """Whether values of a type may hold native object pointers."""
        return self._contains_object_references(type_, set())

    def _contains_object_references(self, type_: Type, visiting: Set[Type]) -> bool:
        if type_ in visiting:
            return False
        visiting.add(type_)

        if type_.kind == TypeKind.OBJECT:
            return True
        if type_.kind == TypeKind.RECORD:
            record = self.get_record_definition(type_.name)
            fields = record.fields if record else []
        elif type_.kind == TypeKind.ENUM:
            enum = self.get_enum_definition(type_.name)
            fields = [f for v in enum.variants for f in v.fields] if enum else []
        else:
            return any(
                self._contains_object_references(child, visiting)
                for child in type_.children()
            )
        return any(
            self._contains_object_references(fld.type, visiting) for fld in fields
        )

    # Loading

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentInterface":
        """
        Build an interface from its JSON-compatible dictionary form.

        Args:
            data: Parsed interface metadata

        Returns:
            Component interface

        Raises:
            ValueError: If the metadata is malformed
        """
        return _InterfaceReader(data).read()


class _InterfaceReader:
    """Reads the dictionary form produced by metadata exporters."""

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ValueError("Interface metadata must be an object")
        if "namespace" not in data:
            raise ValueError("Interface metadata is missing 'namespace'")
        self.data = data
        self.namespace = data["namespace"]
        self.crate_name = data.get("crate_name", self.namespace)

    def read(self) -> ComponentInterface:
        data = self.data
        objects = [self._object(o) for o in data.get("objects", [])]
        return ComponentInterface(
            namespace=self.namespace,
            crate_name=self.crate_name,
            functions=[self._function(f) for f in data.get("functions", [])],
            records=[self._record(r) for r in data.get("records", [])],
            enums=[self._enum(e) for e in data.get("enums", [])],
            objects=objects,
            callback_interfaces=[
                self._callback_interface(c)
                for c in data.get("callback_interfaces", [])
            ],
            custom_types=[self._custom_type(c) for c in data.get("custom_types", [])],
            errors=set(data.get("errors", [])),
            external_types=[self.type_(t) for t in data.get("external_types", [])],
            docstring=data.get("docstring"),
        )

    def type_(self, raw: Any) -> Type:
        """Parse a type: a primitive name, or an object with a ``kind`` key."""
        if isinstance(raw, str):
            try:
                return Type.primitive(TypeKind(raw))
            except ValueError as e:
                raise ValueError(f"Unknown primitive type: {raw!r}") from e

        if not isinstance(raw, dict) or "kind" not in raw:
            raise ValueError(f"Malformed type: {raw!r}")

        try:
            kind = TypeKind(raw["kind"])
        except ValueError as e:
            raise ValueError(f"Unknown type kind: {raw['kind']!r}") from e

        if kind in PRIMITIVE_KINDS:
            return Type.primitive(kind)
        if kind in (TypeKind.OPTIONAL, TypeKind.SEQUENCE):
            return Type(kind, inner=self.type_(raw["inner"]))
        if kind == TypeKind.MAP:
            return Type.map(self.type_(raw["key"]), self.type_(raw["value"]))

        module_path = raw.get("module_path", self.crate_name)
        if kind == TypeKind.OBJECT:
            return Type.object(
                raw["name"], module_path, ObjectImpl(raw.get("imp", "struct"))
            )
        if kind == TypeKind.CUSTOM:
            return Type.custom(raw["name"], self.type_(raw["builtin"]), module_path)
        return Type(kind, name=raw["name"], module_path=module_path)

    def _optional_type(self, raw: Any) -> Optional[Type]:
        return None if raw is None else self.type_(raw)

    def _literal(self, raw: Optional[Dict[str, Any]]) -> Optional[Literal]:
        if raw is None:
            return None
        return Literal(
            kind=LiteralKind(raw["kind"]),
            value=raw.get("value"),
            type=self._optional_type(raw.get("type")),
        )

    def _field(self, raw: Dict[str, Any]) -> Field:
        return Field(
            name=raw["name"],
            type=self.type_(raw["type"]),
            default=self._literal(raw.get("default")),
            docstring=raw.get("docstring"),
        )

    def _argument(self, raw: Dict[str, Any]) -> Argument:
        return Argument(
            name=raw["name"],
            type=self.type_(raw["type"]),
            default=self._literal(raw.get("default")),
        )

    def _arguments(self, raw: Dict[str, Any]) -> List[Argument]:
        return [self._argument(a) for a in raw.get("arguments", [])]

    def _function(self, raw: Dict[str, Any]) -> Function:
        return Function(
            name=raw["name"],
            module_path=raw.get("module_path", self.crate_name),
            arguments=self._arguments(raw),
            return_type=self._optional_type(raw.get("return_type")),
            throws=self._optional_type(raw.get("throws")),
            is_async=raw.get("is_async", False),
            docstring=raw.get("docstring"),
        )

    def _method(self, raw: Dict[str, Any], object_name: str) -> Method:
        return Method(
            name=raw["name"],
            object_name=object_name,
            arguments=self._arguments(raw),
            return_type=self._optional_type(raw.get("return_type")),
            throws=self._optional_type(raw.get("throws")),
            is_async=raw.get("is_async", False),
            docstring=raw.get("docstring"),
        )

    def _record(self, raw: Dict[str, Any]) -> Record:
        return Record(
            name=raw["name"],
            module_path=raw.get("module_path", self.crate_name),
            fields=[self._field(f) for f in raw.get("fields", [])],
            docstring=raw.get("docstring"),
        )

    def _enum(self, raw: Dict[str, Any]) -> EnumDefinition:
        variants = [
            Variant(
                name=v["name"],
                fields=[self._field(f) for f in v.get("fields", [])],
                discr=self._literal(v.get("discr")),
                docstring=v.get("docstring"),
            )
            for v in raw.get("variants", [])
        ]
        return EnumDefinition(
            name=raw["name"],
            module_path=raw.get("module_path", self.crate_name),
            variants=variants,
            discr_type=self._optional_type(raw.get("discr_type")),
            flat=raw.get("flat"),
            docstring=raw.get("docstring"),
        )

    def _object(self, raw: Dict[str, Any]) -> ObjectDefinition:
        name = raw["name"]
        constructors = [
            Constructor(
                name=c.get("name", "new"),
                object_name=name,
                arguments=self._arguments(c),
                throws=self._optional_type(c.get("throws")),
                is_async=c.get("is_async", False),
                docstring=c.get("docstring"),
            )
            for c in raw.get("constructors", [])
        ]
        return ObjectDefinition(
            name=name,
            module_path=raw.get("module_path", self.crate_name),
            imp=ObjectImpl(raw.get("imp", "struct")),
            constructors=constructors,
            methods=[self._method(m, name) for m in raw.get("methods", [])],
            docstring=raw.get("docstring"),
        )

    def _callback_interface(self, raw: Dict[str, Any]) -> CallbackInterfaceDefinition:
        name = raw["name"]
        return CallbackInterfaceDefinition(
            name=name,
            module_path=raw.get("module_path", self.crate_name),
            methods=[self._method(m, name) for m in raw.get("methods", [])],
            docstring=raw.get("docstring"),
        )

    def _custom_type(self, raw: Dict[str, Any]) -> CustomTypeDefinition:
        return CustomTypeDefinition(
            name=raw["name"],
            module_path=raw.get("module_path", self.crate_name),
            builtin=self.type_(raw["builtin"]),
            docstring=raw.get("docstring"),
        )

"""
Java code generator implementation.

Generates Java classes plus the JNA glue needed to call a native
component from a component interface.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.generator import CodeGenerator, GeneratorError, UnsupportedConstructError
from ...core.interface import Callable, ComponentInterface, Type, TypeKind
from ...core.render_once import RenderOnceTracker
from ...core.templates import TemplateError
from ....logging_config import get_logger
from .config import JavaConfig
from .filters import JavaFilters
from .types import resolve

logger = get_logger(__name__)

# Version of the native scaffolding contract the generated code speaks
UNIFFI_CONTRACT_VERSION = 29

_TYPE_TEMPLATES = {
    TypeKind.INT8: "Int8Helper.java.j2",
    TypeKind.UINT8: "Int8Helper.java.j2",
    TypeKind.INT16: "Int16Helper.java.j2",
    TypeKind.UINT16: "Int16Helper.java.j2",
    TypeKind.INT32: "Int32Helper.java.j2",
    TypeKind.UINT32: "Int32Helper.java.j2",
    TypeKind.INT64: "Int64Helper.java.j2",
    TypeKind.UINT64: "Int64Helper.java.j2",
    TypeKind.FLOAT32: "Float32Helper.java.j2",
    TypeKind.FLOAT64: "Float64Helper.java.j2",
    TypeKind.BOOLEAN: "BooleanHelper.java.j2",
    TypeKind.STRING: "StringHelper.java.j2",
    TypeKind.BYTES: "ByteArrayHelper.java.j2",
    TypeKind.TIMESTAMP: "TimestampHelper.java.j2",
    TypeKind.DURATION: "DurationHelper.java.j2",
    TypeKind.RECORD: "RecordTemplate.java.j2",
    TypeKind.OBJECT: "ObjectTemplate.java.j2",
    TypeKind.CALLBACK_INTERFACE: "CallbackInterfaceTemplate.java.j2",
    TypeKind.CUSTOM: "CustomTypeTemplate.java.j2",
    TypeKind.OPTIONAL: "OptionalTemplate.java.j2",
    TypeKind.SEQUENCE: "SequenceTemplate.java.j2",
    TypeKind.MAP: "MapTemplate.java.j2",
}

# Every generated unit starts with its package declaration
_UNIT_START = re.compile(r"^(?=package\s+[\w.]+;)", re.MULTILINE)
_TOP_LEVEL_DECLARATION = re.compile(
    r"^(?:(?:public|protected|private|abstract|final|sealed|non-sealed|static)\s+)*"
    r"(?:class|interface|enum|record|@interface)\s+([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)


def split_units(code: str) -> Dict[str, str]:
    """
    Split rendered output into compilation units keyed by top-level type name.

    Raises:
        GeneratorError: If a unit declares no type or two units share a name
    """
    units: Dict[str, str] = {}
    for chunk in _UNIT_START.split(code):
        if not chunk.strip():
            continue
        match = _TOP_LEVEL_DECLARATION.search(chunk)
        if match is None:
            if chunk.lstrip().startswith("package"):
                raise GeneratorError(f"Generated unit declares no type:\n{chunk[:200]}")
            # Leading comments before the first package declaration
            continue
        name = match.group(1)
        if name in units:
            raise GeneratorError(f"Java type {name} generated more than once")
        units[name] = chunk
    return units


class _RenderRun:
    """Template state for a single ``generate()`` call."""

    def __init__(self, generator: "JavaGenerator", ci: ComponentInterface, config: JavaConfig):
        self.ci = ci
        self.config = config
        self.tracker = RenderOnceTracker()
        self.filters = JavaFilters(ci, config)
        self.engine = generator.template_engine.overlay(
            filters=self.filters.as_filters(),
            globals={
                "ci": ci,
                "config": config,
                "ffi": self.filters.ffi,
                "include_once_check": self.tracker.mark_if_new,
                "type_imports": self._type_imports(),
                "STRING_TYPE": Type.primitive(TypeKind.STRING),
            },
        )

    def _type_imports(self) -> List[str]:
        imports = set()
        for type_ in self.ci.iter_types():
            imports.update(resolve(type_).imports(self.config))
        return sorted(imports - {"java.util.List", "java.util.Map"})

    def render(self, template_name: str, subject: str, **context: Any) -> str:
        try:
            return self.engine.render_template(template_name, context)
        except TemplateError as e:
            raise GeneratorError(f"Failed to render {subject}: {e}") from e


class JavaGenerator(CodeGenerator):
    """Code generator for Java bindings over JNA."""

    def __init__(self, config=None):
        """Initialize Java generator with configuration."""
        super().__init__(config)
        self.java_config = JavaConfig.from_generator_config(self.config)

    def get_template_directory(self) -> Optional[Path]:
        """Return the Java templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "java"

    @property
    def file_extension(self) -> str:
        """Return Java file extension."""
        return ".java"

    def generate(self, ci: ComponentInterface) -> Dict[str, str]:
        """Generate all Java units, keyed by path relative to the source root."""
        config = self.java_config
        self.check_supported(ci)

        run = _RenderRun(self, ci, config)
        logger.info("Generating Java bindings for %s into %s", ci.namespace, config.package_name)

        parts = [run.render("Helpers.java.j2", "runtime helpers")]

        for type_ in ci.iter_local_types():
            code_type = resolve(type_)
            if not run.tracker.mark_if_new(code_type.ffi_converter_name()):
                logger.debug("Skipping already rendered %s", code_type.ffi_converter_name())
                continue
            parts.append(self._render_type(run, type_))

        if ci.functions:
            parts.append(self._render_functions(run, ci))

        if ci.has_async_callables() and run.tracker.mark_if_new("async-support"):
            parts.append(run.render("Async.java.j2", "async helpers"))

        parts.append(
            run.render(
                "NamespaceLibraryTemplate.java.j2",
                "native library declarations",
                ffi_functions=run.filters.ffi.functions(),
                ffi_callbacks=run.filters.ffi.callbacks(),
                ffi_structs=run.filters.ffi.structs(),
                initialization_fns=self.initialization_fns(ci),
                contract_version=UNIFFI_CONTRACT_VERSION,
            )
        )

        units = split_units("\n".join(parts))
        logger.debug("Rendered %d Java units", len(units))
        return {
            f"{config.package_path}/{name}{self.file_extension}": code
            for name, code in units.items()
        }

    def initialization_fns(self, ci: ComponentInterface) -> List[str]:
        """Startup hooks of local types, in type order."""
        fns = []
        for type_ in ci.iter_local_types():
            fn = resolve(type_).initialization_fn()
            if fn is not None:
                fns.append(fn)
        return fns

    def check_supported(self, ci: ComponentInterface):
        """
        Reject interfaces using constructs the Java bindings cannot express.

        Raises:
            UnsupportedConstructError: Naming the offending callable
        """
        for callable_ in ci.iter_callables():
            throws = callable_.throws_type()
            if throws is not None and ci.is_external(throws):
                raise UnsupportedConstructError(
                    f"{_describe_callable(callable_)} throws {throws.name}, "
                    f"an error type from module {throws.module_path}; "
                    "external error types are not supported"
                )

        foreign_implemented = [(cbi.name, cbi.methods) for cbi in ci.callback_interfaces]
        foreign_implemented += [
            (obj.name, obj.methods) for obj in ci.objects if obj.has_callback_interface()
        ]
        for owner, methods in foreign_implemented:
            for method in methods:
                if method.is_async:
                    raise UnsupportedConstructError(
                        f"Async method {owner}.{method.name} cannot be implemented "
                        "by foreign code"
                    )

    def _render_type(self, run: _RenderRun, type_: Type) -> str:
        ci = run.ci
        code_type = resolve(type_)
        context: Dict[str, Any] = {
            "type_": type_,
            "type_name": code_type.type_label(ci, run.config),
            "canonical_type_name": code_type.canonical_name(),
            "ffi_converter_name": code_type.ffi_converter_name(),
            "ffi_converter_instance": code_type.ffi_converter_instance(run.config, ci),
            "contains_object_references": ci.contains_object_references(type_),
        }

        kind = type_.kind
        template = _TYPE_TEMPLATES.get(kind)
        definition = None
        if kind == TypeKind.ENUM:
            definition = context["e"] = ci.get_enum_definition(type_.name)
            if ci.is_name_used_as_error(type_.name):
                template = "ErrorTemplate.java.j2"
            else:
                template = "EnumTemplate.java.j2"
        elif kind == TypeKind.RECORD:
            definition = context["rec"] = ci.get_record_definition(type_.name)
        elif kind == TypeKind.OBJECT:
            definition = context["obj"] = ci.get_object_definition(type_.name)
        elif kind == TypeKind.CALLBACK_INTERFACE:
            definition = context["cbi"] = ci.get_callback_interface_definition(type_.name)
        elif kind == TypeKind.CUSTOM:
            definition = context["builtin"] = type_.builtin
            context["custom_type_config"] = run.config.custom_types.get(type_.name)
        elif kind in (TypeKind.OPTIONAL, TypeKind.SEQUENCE):
            context["inner_type"] = type_.inner
        elif kind == TypeKind.MAP:
            context["key_type"] = type_.key
            context["value_type"] = type_.value

        if type_.is_named() and definition is None:
            raise GeneratorError(f"No definition found for {type_.describe()}")

        logger.debug("Rendering %s with %s", type_.describe(), template)
        return run.render(template, f"type {type_.describe()}", **context)

    def _render_functions(self, run: _RenderRun, ci: ComponentInterface) -> str:
        declarations = [
            run.render(
                "TopLevelFunction.java.j2", f"function {func.name}", func=func
            )
            for func in ci.functions
        ]
        return run.render(
            "TopLevelFunctionsTemplate.java.j2",
            "top-level functions",
            declarations=declarations,
        )


def _describe_callable(callable_: Callable) -> str:
    owner = getattr(callable_, "object_name", None)
    if owner:
        return f"{owner}.{callable_.name}"
    return callable_.name

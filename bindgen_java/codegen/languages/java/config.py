"""
Java-specific configuration and validation.

Builds the immutable settings the Java generator works from out of the
base configuration system, including per-type custom conversions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ...core.config import ConfigError, GeneratorConfig
from .naming import validate_java_package_name

PLACEHOLDER = "{}"


@dataclass(frozen=True)
class TemplateExpression:
    """
    A Java expression with a single ``{}`` slot for the value being converted.

    Checked when configuration is loaded so malformed conversions are
    reported before any code is generated.
    """

    source: str

    def __post_init__(self):
        count = self.source.count(PLACEHOLDER)
        if count != 1:
            raise ConfigError(
                f"Conversion expression {self.source!r} must contain exactly one "
                f"'{PLACEHOLDER}' placeholder, found {count}"
            )

    def render(self, value: str) -> str:
        return self.source.replace(PLACEHOLDER, value)


@dataclass(frozen=True)
class CustomTypeConfig:
    """How a custom type is represented in Java and converted from its builtin."""

    lift: TemplateExpression
    lower: TemplateExpression
    type_name: Optional[str] = None
    imports: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "CustomTypeConfig":
        """
        Parse one ``custom_types`` entry.

        ``into_custom`` and ``from_custom`` are accepted as older spellings
        of ``lift`` and ``lower``.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"Custom type {name!r} must be a table")

        lift = data.get("lift") or data.get("into_custom")
        lower = data.get("lower") or data.get("from_custom")
        if not lift or not lower:
            raise ConfigError(f"Custom type {name!r} needs both lift and lower")

        imports = data.get("imports") or ()
        if isinstance(imports, str) or not all(isinstance(i, str) for i in imports):
            raise ConfigError(f"Custom type {name!r} imports must be a list of strings")

        return cls(
            lift=TemplateExpression(lift),
            lower=TemplateExpression(lower),
            type_name=data.get("type_name"),
            imports=tuple(imports),
        )

    def lift_expr(self, value: str) -> str:
        return self.lift.render(value)

    def lower_expr(self, value: str) -> str:
        return self.lower.render(value)


@dataclass(frozen=True)
class JavaConfig:
    """Settings for generated Java bindings."""

    package_name: str = "uniffi"
    cdylib_name: str = "uniffi"
    generate_immutable_records: bool = False
    custom_types: Mapping[str, CustomTypeConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )
    external_packages: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    android: bool = False
    android_cleaner: Optional[bool] = None
    quarkus: bool = False
    add_comments: bool = True

    def __post_init__(self):
        errors = validate_java_package_name(self.package_name)
        if errors:
            raise ConfigError(f"Invalid package_name: {'; '.join(errors)}")
        # Freeze mutable mappings handed in by callers
        object.__setattr__(self, "custom_types", MappingProxyType(dict(self.custom_types)))
        object.__setattr__(
            self, "external_packages", MappingProxyType(dict(self.external_packages))
        )

    @property
    def use_android_cleaner(self) -> bool:
        """Android cleaner unless explicitly set, follows the android flag."""
        if self.android_cleaner is None:
            return self.android
        return self.android_cleaner

    @property
    def package_path(self) -> str:
        return self.package_name.replace(".", "/")

    @classmethod
    def from_generator_config(cls, config: GeneratorConfig) -> "JavaConfig":
        """Build Java settings from the shared configuration object."""
        custom_types: Dict[str, CustomTypeConfig] = {
            name: CustomTypeConfig.from_dict(name, entry)
            for name, entry in (config.custom_types or {}).items()
        }
        return cls(
            package_name=config.package_name or "uniffi",
            cdylib_name=config.cdylib_name or "uniffi",
            generate_immutable_records=bool(config.generate_immutable_records),
            custom_types=custom_types,
            external_packages=dict(config.external_packages or {}),
            android=bool(config.android),
            android_cleaner=config.android_cleaner,
            quarkus=bool(config.quarkus),
            add_comments=config.add_comments,
        )

"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    UnsupportedConstructError,
    GenerationResult,
    generate_code,
)
from .interface import (
    ComponentInterface,
    Type,
    TypeKind,
    ObjectImpl,
    Literal,
    LiteralKind,
)
from .ffi import FfiType, FfiTypeKind, FfiSurface, ffi_type_for, return_type_suffix
from .naming import NameSanitizer, NamingCase, split_words
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine
from .render_once import RenderOnceTracker

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "UnsupportedConstructError",
    "GenerationResult",
    "generate_code",
    # Interface model
    "ComponentInterface",
    "Type",
    "TypeKind",
    "ObjectImpl",
    "Literal",
    "LiteralKind",
    # Native boundary types
    "FfiType",
    "FfiTypeKind",
    "FfiSurface",
    "ffi_type_for",
    "return_type_suffix",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "split_words",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    "RenderOnceTracker",
]

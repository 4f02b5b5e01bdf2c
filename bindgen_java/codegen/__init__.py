"""
Binding Code Generation Module

Generates foreign-language bindings from component interface metadata.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    GeneratorError,
    UnsupportedConstructError,
    GenerationResult,
    generate_code,
)
from .core.interface import ComponentInterface, Type, TypeKind
from .core.config import GeneratorConfig, ConfigManager, load_config

# Version info
__version__ = "0.1.0"


def generate_bindings(
    interface: Union[ComponentInterface, Dict[str, Any]],
    language: str = "java",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Generate bindings for a component interface.

    Args:
        interface: Interface, or its dictionary form
        language: Target language name or alias
        config: Generator configuration as object, dict or file path

    Returns:
        GenerationResult with generated files
    """
    if isinstance(interface, dict):
        try:
            interface = ComponentInterface.from_dict(interface)
        except (ValueError, KeyError, TypeError) as e:
            return GenerationResult.error(f"Invalid interface metadata: {e}", exception=e)

    try:
        generator = get_generator(language, config)
    except RegistryError as e:
        return GenerationResult.error(str(e), exception=e)

    return generate_code(generator, interface)


def quick_generate(interface, language="java", **options) -> str:
    """
    Generate bindings and return them as a single string.

    Args:
        interface: Interface, its dictionary form, or a JSON string
        language: Target language
        **options: Generator options

    Returns:
        Generated code string
    """
    if isinstance(interface, str):
        import json

        interface = json.loads(interface)

    result = generate_bindings(interface, language, options)

    if result.success:
        return result.code
    else:
        raise RuntimeError(f"Code generation failed: {result.error_message}")


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "UnsupportedConstructError",
    "GenerationResult",
    "ComponentInterface",
    "Type",
    "TypeKind",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_code",
    "generate_bindings",
    "quick_generate",
    "get_generator",
    "get_registry",
    "list_supported_languages",
]

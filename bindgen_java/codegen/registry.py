"""
Registry of binding generators, keyed by target language.

Languages are looked up case-insensitively by name or alias ("java" or
"jvm"); the registry resolves configuration before instantiating one.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator
from ..logging_config import get_logger

logger = get_logger(__name__)

ConfigSource = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


@dataclass(frozen=True)
class Registration:
    """A generator class and the names it answers to."""

    language: str
    generator_class: Type[CodeGenerator]
    aliases: Tuple[str, ...] = field(default_factory=tuple)


class GeneratorRegistry:
    """Maps language names and aliases to generator classes."""

    def __init__(self):
        self._registrations: Dict[str, Registration] = {}
        self._names: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
    ):
        """
        Register a generator under a language name and its aliases.

        Raises:
            RegistryError: If the class is not a CodeGenerator or a name is taken
        """
        if not issubclass(generator_class, CodeGenerator):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        key = language.lower()
        alias_keys = tuple(sorted({a.lower() for a in aliases or []} - {key}))
        for name in (key, *alias_keys):
            if name in self._names:
                raise RegistryError(
                    f"Language name '{name}' is already registered for {self._names[name]}"
                )

        self._registrations[key] = Registration(key, generator_class, alias_keys)
        for name in (key, *alias_keys):
            self._names[name] = key

    def resolve(self, language: str) -> Registration:
        """
        Find the registration answering to a name or alias.

        Raises:
            RegistryError: If no generator answers to ``language``
        """
        key = self._names.get(language.lower())
        if key is None:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return self._registrations[key]

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Instantiate the generator for ``language``.

        ``config`` may be a ready GeneratorConfig, a dict of overrides on the
        defaults, or the path of a JSON or uniffi.toml file.

        Raises:
            RegistryError: If the language is unknown or creation fails
        """
        registration = self.resolve(language)
        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, (str, Path)):
                final_config = load_config(registration.language, config_file=config)
            elif isinstance(config, dict):
                final_config = load_config(registration.language, custom_config=config)
            elif config is None:
                final_config = load_config(registration.language)
            else:
                raise RegistryError(f"Invalid config type: {type(config)}")
            return registration.generator_class(final_config)
        except RegistryError:
            raise
        except Exception as e:
            raise RegistryError(f"Failed to create {language} generator: {e}") from e

    def list_languages(self) -> List[str]:
        """Registered primary language names, sorted."""
        return sorted(self._registrations)

    def is_supported(self, language: str) -> bool:
        return language.lower() in self._names

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """Describe the generator answering to ``language``."""
        registration = self.resolve(language)
        generator = self.create_generator(registration.language)
        return {
            "name": generator.language_name,
            "class": registration.generator_class.__name__,
            "module": registration.generator_class.__module__,
            "file_extension": generator.file_extension,
            "aliases": list(registration.aliases),
            "config": generator.config,
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Get the global generator registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _register_builtin_generators(_global_registry)
    return _global_registry


def _register_builtin_generators(registry: GeneratorRegistry):
    from .languages.java import JavaGenerator

    registry.register("java", JavaGenerator, aliases=["jvm"])
    logger.debug("Registered generators: %s", ", ".join(registry.list_languages()))


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    """Create a configured generator from the global registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Describe every registered language; broken ones are logged and skipped."""
    result = {}
    for language in list_supported_languages():
        try:
            result[language] = get_language_info(language)
        except RegistryError as e:
            logger.warning("Skipping %s: %s", language, e)
    return result

"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Dict, List, Any, Optional, Union
from pathlib import Path

from .config import GeneratorConfig
from .interface import ComponentInterface
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnsupportedConstructError(GeneratorError):
    """Raised when the interface uses a construct the target cannot express."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """Initialize generator with optional configuration."""
        if config is None:
            config = GeneratorConfig()
        elif isinstance(config, dict):
            config = GeneratorConfig(**config)
        self.config: GeneratorConfig = config
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'java')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.java')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, ci: ComponentInterface) -> Dict[str, str]:
        """
        Generate bindings for a component interface.

        Args:
            ci: Interface to generate bindings for

        Returns:
            Mapping of relative output paths to file contents
        """
        pass

    def validate_interface(self, ci: ComponentInterface) -> List[str]:
        """
        Check an interface for issues worth reporting without failing.

        Language generators should override this to add language-specific checks.

        Args:
            ci: Interface to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for obj in ci.objects:
            if not obj.constructors and not obj.methods:
                warnings.append(f"Object '{obj.name}' has no constructors or methods")

        for record in ci.records:
            if not record.fields:
                warnings.append(f"Record '{record.name}' has no fields")

        for enum in ci.enums:
            if not enum.variants:
                warnings.append(f"Enum '{enum.name}' has no variants")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files keyed by relative path
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def code(self) -> str:
        """All generated files concatenated in path order."""
        return "\n".join(self.files[path] for path in sorted(self.files))

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files={})
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, ci: ComponentInterface) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        ci: Interface to generate bindings for

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        warnings = generator.validate_interface(ci)

        files = {
            path: generator.format_code(code)
            for path, code in generator.generate(ci).items()
        }

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "namespace": ci.namespace,
            "file_count": len(files),
            "type_count": len(list(ci.iter_types())),
            "has_async": ci.has_async_callables(),
            "config": asdict(generator.config),
        }

        logger.info(
            "Generated %d %s files for namespace %s",
            len(files),
            generator.language_name,
            ci.namespace,
        )
        return GenerationResult(files, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

"""
Template engine wrapper for code generation.

Jinja2 rendering with strict undefined checks and per-run overlays
of filters and globals.
"""

from typing import Dict, Any, Callable, Optional
from pathlib import Path

from jinja2 import (
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
)
from jinja2 import TemplateError as JinjaTemplateError

from ...logging_config import get_logger

logger = get_logger(__name__)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(
        self, template_dir: Optional[Path] = None, environment: Optional[Environment] = None
    ):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
            environment: Prepared environment to wrap instead of building one
        """
        self.template_dir = template_dir
        self._env = environment
        if self._env is None:
            self._setup_environment()

    def _setup_environment(self):
        """Build the Jinja2 environment shared by every render."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # Use in-memory templates
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def overlay(
        self,
        filters: Optional[Dict[str, Callable]] = None,
        globals: Optional[Dict[str, Any]] = None,
    ) -> "TemplateEngine":
        """
        Create an engine sharing this one's loader with extra filters and globals.

        The overlay gets its own filter and global tables, so bindings added
        to it never reach this engine.
        """
        # Fresh cache: templates compiled here bind to the overlay's filters
        env = self._env.overlay(cache_size=400)
        env.filters = dict(self._env.filters)
        env.globals = dict(self._env.globals)
        env.filters.update(filters or {})
        env.globals.update(globals or {})
        return TemplateEngine(self.template_dir, environment=env)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        logger.debug("Rendering template %s", template_name)
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {e}"
            ) from e


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """
    Create a template engine.

    Args:
        template_dir: Directory of template files, or None for in-memory templates

    Returns:
        New template engine
    """
    return TemplateEngine(template_dir)

"""
Language-specific code generators.

This module contains generators for different programming languages.
"""

from .java import (
    JavaGenerator,
    create_generator,
    create_android_generator,
    create_quarkus_generator,
)

__all__ = [
    "JavaGenerator",
    "create_generator",
    "create_android_generator",
    "create_quarkus_generator",
]

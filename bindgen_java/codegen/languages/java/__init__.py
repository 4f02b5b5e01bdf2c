"""
Java code generator module.

Generates Java classes and JNA declarations from a component interface.
"""

from .config import CustomTypeConfig, JavaConfig, TemplateExpression
from .generator import JavaGenerator, UNIFFI_CONTRACT_VERSION, split_units
from .naming import JAVA_RESERVED_WORDS
from .types import CodeType, resolve

__all__ = [
    "JavaGenerator",
    "JavaConfig",
    "CustomTypeConfig",
    "TemplateExpression",
    "CodeType",
    "resolve",
    "split_units",
    "JAVA_RESERVED_WORDS",
    "UNIFFI_CONTRACT_VERSION",
    # Factory functions
    "create_generator",
    "create_android_generator",
    "create_quarkus_generator",
]


def create_generator(**kwargs):
    """
    Create a Java generator.

    Args:
        **kwargs: Generator options (package_name, cdylib_name, etc.)

    Returns:
        Configured JavaGenerator instance
    """
    generator_config = {
        "package_name": kwargs.get("package_name", "uniffi"),
        "cdylib_name": kwargs.get("cdylib_name", "uniffi"),
        "add_comments": kwargs.get("add_comments", True),
        **kwargs,
    }
    return JavaGenerator(generator_config)


def create_android_generator(**kwargs):
    """
    Create generator for Android targets.

    Features:
    - Objects are cleaned through JNA's cleaner
    - No dependency on java.lang.ref.Cleaner (API level 33)
    """
    kwargs.setdefault("android", True)
    return create_generator(**kwargs)


def create_quarkus_generator(**kwargs):
    """
    Create generator for Quarkus native images.

    Features:
    - Records, enums and objects carry @RegisterForReflection
    """
    kwargs.setdefault("quarkus", True)
    return create_generator(**kwargs)

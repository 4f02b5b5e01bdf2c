"""
Java-specific naming utilities and sanitization.

Handles Java reserved words and the naming conventions of generated
bindings: classes, methods, variables, enum constants and FFI symbols.
"""

from ...core.interface import ComponentInterface
from ...core.naming import NameSanitizer, NamingCase


# Java keywords (JLS section 3.9), plus the underscore identifier
JAVA_RESERVED_WORDS = frozenset(
    {
        "abstract",
        "assert",
        "boolean",
        "break",
        "byte",
        "case",
        "catch",
        "char",
        "class",
        "const",
        "continue",
        "default",
        "do",
        "double",
        "else",
        "enum",
        "extends",
        "final",
        "finally",
        "float",
        "for",
        "goto",
        "if",
        "implements",
        "import",
        "instanceof",
        "int",
        "interface",
        "long",
        "native",
        "new",
        "package",
        "private",
        "protected",
        "public",
        "return",
        "short",
        "static",
        "strictfp",
        "super",
        "switch",
        "synchronized",
        "this",
        "throw",
        "throws",
        "transient",
        "try",
        "void",
        "volatile",
        "while",
        "_",
    }
)

ERROR_SUFFIX = "Error"
EXCEPTION_SUFFIX = "Exception"

_sanitizer = NameSanitizer(JAVA_RESERVED_WORDS, escape_prefix="_")


def fixup_keyword(name: str) -> str:
    """Prefix a name with ``_`` if it is a Java keyword."""
    return _sanitizer.fixup_keyword(name)


def convert_error_suffix(name: str) -> str:
    """Rewrite a trailing ``Error`` to ``Exception`` (``Error`` alone included)."""
    if name.endswith(ERROR_SUFFIX):
        return name[: -len(ERROR_SUFFIX)] + EXCEPTION_SUFFIX
    return name


def class_name(name: str, ci: ComponentInterface) -> str:
    """
    Java class name for an interface type.

    Types used as errors get the ``Exception`` suffix Java code expects.
    """
    result = _sanitizer.convert_case(name, NamingCase.PASCAL_CASE)
    if ci.is_name_used_as_error(name):
        result = convert_error_suffix(result)
    return fixup_keyword(result)


def fn_name(name: str) -> str:
    return fixup_keyword(_sanitizer.convert_case(name, NamingCase.CAMEL_CASE))


def var_name(name: str) -> str:
    return fixup_keyword(var_name_raw(name))


def var_name_raw(name: str) -> str:
    """Variable name before keyword escaping."""
    return _sanitizer.convert_case(name, NamingCase.CAMEL_CASE)


def setter(name: str) -> str:
    return "set" + fixup_keyword(_sanitizer.convert_case(name, NamingCase.PASCAL_CASE))


def enum_variant_name(name: str) -> str:
    return fixup_keyword(_sanitizer.convert_case(name, NamingCase.SCREAMING_SNAKE))


def error_variant_name(name: str) -> str:
    return convert_error_suffix(_sanitizer.convert_case(name, NamingCase.PASCAL_CASE))


def ffi_callback_name(name: str) -> str:
    return "Uniffi" + _sanitizer.convert_case(name, NamingCase.PASCAL_CASE)


def ffi_struct_name(name: str) -> str:
    return "Uniffi" + _sanitizer.convert_case(name, NamingCase.PASCAL_CASE)


def unquote(name: str) -> str:
    """Strip the backticks some names are wrapped in."""
    return name.strip("`")


def validate_java_package_name(name: str) -> list[str]:
    """
    Validate a dotted Java package name.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    for part in name.split("."):
        if not part.isidentifier():
            errors.append(f"'{part}' is not a valid Java identifier")
        elif part in JAVA_RESERVED_WORDS:
            errors.append(f"'{part}' is a Java reserved word")

    return errors
